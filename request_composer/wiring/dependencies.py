from functools import lru_cache
import logging

from request_composer.application.ports.connectivity import ConnectivityPort
from request_composer.application.ports.offline_queue import OfflineQueuePort
from request_composer.application.ports.service_catalog import ServiceCatalogPort
from request_composer.application.ports.snapshot_store import SnapshotStorePort
from request_composer.application.use_cases.composition_session import CompositionSession
from request_composer.application.use_cases.composition_store import CompositionStore
from request_composer.application.use_cases.session_persistence import SessionPersistenceGateway
from request_composer.application.use_cases.submit_request import SubmitServiceRequestUseCase
from request_composer.application.use_cases.sync_pending_requests import SyncPendingRequestsUseCase
from request_composer.application.use_cases.validate_composition import ValidateCompositionUseCase
from request_composer.application.utils.transient_notice import TransientNotice
from request_composer.core.config import settings
from request_composer.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from request_composer.infrastructure.service_requests.catalog_client import HttpServiceCatalog
from request_composer.infrastructure.service_requests.connectivity import HttpConnectivityProbe, StaticConnectivity
from request_composer.infrastructure.service_requests.service_requests_client import ServiceRequestsClient
from request_composer.infrastructure.store.json_offline_queue import JsonOfflineQueue
from request_composer.infrastructure.store.json_snapshot_store import JsonSnapshotStore
from request_composer.infrastructure.store.memory_store import MemorySnapshotStore


_session: CompositionSession | None = None


@lru_cache
def get_snapshot_store() -> SnapshotStorePort:
    if settings.SNAPSHOT_PROVIDER.lower() == "memory":
        return MemorySnapshotStore()
    return JsonSnapshotStore(data_dir=settings.SNAPSHOT_DIR)


@lru_cache
def get_offline_queue() -> OfflineQueuePort:
    return JsonOfflineQueue(path=settings.OFFLINE_QUEUE_PATH)


@lru_cache
def get_transport() -> ServiceRequestsClient:
    return ServiceRequestsClient(base_url=settings.API_BASE_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)


@lru_cache
def get_connectivity() -> ConnectivityPort:
    if settings.FORCE_OFFLINE:
        return StaticConnectivity(online=False)
    return HttpConnectivityProbe(probe_url=settings.CONNECTIVITY_PROBE_URL or settings.API_BASE_URL)


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    if settings.CATALOG_PROVIDER.lower() == "static":
        return ServiceCatalogStore()
    return HttpServiceCatalog(base_url=settings.API_BASE_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)


def get_persistence_gateway() -> SessionPersistenceGateway:
    return SessionPersistenceGateway(
        store=get_snapshot_store(),
        key=settings.SESSION_SNAPSHOT_KEY,
        debounce_seconds=settings.PERSIST_DEBOUNCE_SECONDS,
    )


def build_session() -> CompositionSession:
    store = CompositionStore()
    persistence = get_persistence_gateway()
    notice = TransientNotice(ttl_seconds=settings.WARNING_TTL_SECONDS)
    catalog = get_service_catalog()
    submit_use_case = SubmitServiceRequestUseCase(
        store=store,
        transport=get_transport(),
        connectivity=get_connectivity(),
        offline_queue=get_offline_queue(),
        validator=ValidateCompositionUseCase(catalog=catalog),
        notice=notice,
        persistence=persistence,
        wire_strategy=settings.WIRE_INSTANCE_STRATEGY,
        rejection_patterns=settings.FIELD_REJECTION_PATTERNS,
    )
    session = CompositionSession(
        store=store,
        persistence=persistence,
        submit_use_case=submit_use_case,
        notice=notice,
        catalog=catalog,
    )
    if session.restore():
        logging.getLogger(__name__).info("Composition restored from snapshot")
    return session


def get_composition_session() -> CompositionSession:
    global _session
    if _session is None:
        _session = build_session()
    return _session


def get_sync_use_case() -> SyncPendingRequestsUseCase:
    return SyncPendingRequestsUseCase(
        queue=get_offline_queue(),
        transport=get_transport(),
        connectivity=get_connectivity(),
    )
