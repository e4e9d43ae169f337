"""Shared fakes and fixtures."""
from __future__ import annotations

from typing import Any

import pytest

from request_composer.application.ports.submission_transport import SubmissionTransportPort
from request_composer.application.use_cases.composition_session import CompositionSession
from request_composer.application.use_cases.composition_store import CompositionStore
from request_composer.application.use_cases.session_persistence import SessionPersistenceGateway
from request_composer.application.use_cases.submit_request import SubmitServiceRequestUseCase
from request_composer.application.use_cases.validate_composition import ValidateCompositionUseCase
from request_composer.application.utils.transient_notice import TransientNotice
from request_composer.domain.entities.service_catalog import AdditionalFieldSchema, ServiceCatalogItem
from request_composer.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from request_composer.infrastructure.service_requests.connectivity import StaticConnectivity
from request_composer.infrastructure.store.memory_store import MemoryOfflineQueue, MemorySnapshotStore


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval: float, function, args=(), kwargs=None) -> None:
        self.interval = interval
        self.function = function
        self.args = args
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.started and not self.cancelled:
            self.function(*self.args, **self.kwargs)


class TimerRecorder:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function, args=(), kwargs=None) -> FakeTimer:
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer

    def fire_all(self) -> None:
        for timer in list(self.timers):
            timer.fire()


class FakeTransport(SubmissionTransportPort):
    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response if response is not None else {"success": True, "request_id": 42, "message": "ok"}
        self.error = error
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []

    def send(self, method: str, url: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        self.calls.append((method, url, payload))
        if self.error is not None:
            raise self.error
        return self.response


def make_item(code: str = "EDS-3", item_id: int = 103, fields: tuple[AdditionalFieldSchema, ...] = ()) -> ServiceCatalogItem:
    return ServiceCatalogItem(id=item_id, code=code, name=f"Service {code}", additional_info=fields)


VALID_PROFILE = {
    "name": "A",
    "name_project": "Torre Norte",
    "location": "Bucaramanga",
    "identification": "900123456",
    "phone": "3001234567",
    "email": "a@example.com",
    "description": "Soil study",
}


@pytest.fixture
def timers() -> TimerRecorder:
    return TimerRecorder()


@pytest.fixture
def snapshot_store() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
def offline_queue() -> MemoryOfflineQueue:
    return MemoryOfflineQueue()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def connectivity() -> StaticConnectivity:
    return StaticConnectivity(online=True)


@pytest.fixture
def session_parts(timers, snapshot_store, offline_queue, transport, connectivity):
    store = CompositionStore()
    persistence = SessionPersistenceGateway(store=snapshot_store, key="test", debounce_seconds=0.5, timer_factory=timers)
    notice = TransientNotice(ttl_seconds=3.0, timer_factory=timers)
    submit = SubmitServiceRequestUseCase(
        store=store,
        transport=transport,
        connectivity=connectivity,
        offline_queue=offline_queue,
        validator=ValidateCompositionUseCase(catalog=ServiceCatalogStore()),
        notice=notice,
        persistence=persistence,
        clock=lambda: 1700000000.0,
    )
    session = CompositionSession(
        store=store,
        persistence=persistence,
        submit_use_case=submit,
        notice=notice,
        catalog=ServiceCatalogStore(),
    )
    return {
        "store": store,
        "persistence": persistence,
        "notice": notice,
        "submit": submit,
        "session": session,
    }


@pytest.fixture
def session(session_parts) -> CompositionSession:
    return session_parts["session"]
