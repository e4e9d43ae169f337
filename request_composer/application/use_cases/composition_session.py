from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any
from uuid import uuid4

from request_composer.application.dto.composition_actions import (
    AddSelection,
    MergeSelections,
    RemoveSelection,
    Reset,
    RestoreSnapshot,
    SetClientProfile,
    SetError,
    SetFormValidity,
    SetLoading,
    UpdateAdditionalInfo,
)
from request_composer.application.ports.service_catalog import ServiceCatalogPort
from request_composer.application.use_cases.composition_store import CompositionStore
from request_composer.application.use_cases.merge_from_source import RemovalSet, merge_selections
from request_composer.application.use_cases.session_persistence import SessionPersistenceGateway
from request_composer.application.use_cases.submit_request import SubmitServiceRequestUseCase
from request_composer.application.utils.instance_model import create_instances
from request_composer.application.utils.transient_notice import TransientNotice
from request_composer.domain.entities.composition_state import CompositionState
from request_composer.domain.entities.selection import Instance, SelectionEntry
from request_composer.domain.entities.service_catalog import ServiceCatalogItem
from request_composer.domain.entities.submission import SubmissionResult


class CompositionSession:
    """
    Entry point for UI event handlers.

    Wraps the store with the helper operations the UI needs, subscribes the
    persistence gateway to every state change and owns the session's RemovalSet.
    """

    def __init__(
        self,
        store: CompositionStore,
        persistence: SessionPersistenceGateway,
        submit_use_case: SubmitServiceRequestUseCase,
        notice: TransientNotice,
        catalog: ServiceCatalogPort | None = None,
        removal_set: RemovalSet | None = None,
    ) -> None:
        self._store = store
        self._persistence = persistence
        self._submit_use_case = submit_use_case
        self._notice = notice
        self._catalog = catalog
        self._removed = removal_set if removal_set is not None else RemovalSet()
        self._unsubscribe = store.subscribe(persistence.schedule_persist)
        self._notice.set_on_clear(self._on_notice_cleared)
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> CompositionState:
        return self._store.state

    @property
    def removed(self) -> RemovalSet:
        return self._removed

    def restore(self) -> bool:
        """Load the persisted snapshot, if any. Returns True when state was restored."""
        snapshot = self._persistence.restore()
        if snapshot is None:
            return False
        # a warning or spinner from the previous run has no timer or request behind it
        self._store.dispatch(RestoreSnapshot(replace(snapshot, error=None, loading=False)))
        return True

    def set_form_data(self, partial: Mapping[str, Any]) -> CompositionState:
        return self._store.dispatch(SetClientProfile(dict(partial)))

    def set_form_validity(self, is_valid: bool) -> CompositionState:
        return self._store.dispatch(SetFormValidity(is_valid))

    def set_loading(self, loading: bool) -> CompositionState:
        return self._store.dispatch(SetLoading(loading))

    def set_error(self, error: str | None) -> CompositionState:
        return self._store.dispatch(SetError(error))

    def add_selected_service(
        self,
        item: ServiceCatalogItem,
        quantity: int,
        category: str | None = None,
        service_id: str | None = None,
        instances: Iterable[Instance] | None = None,
    ) -> str | None:
        """Select a service. Returns the selection id, or None when nothing was added."""
        instances = tuple(instances) if instances is not None else ()
        if quantity < 1 and not instances:
            return None
        new_id = service_id or str(uuid4())
        # adding by hand overrides an earlier explicit removal
        self._removed.discard(new_id, item.id)
        service_instances = instances or create_instances(quantity)
        self._store.dispatch(
            AddSelection(
                SelectionEntry(
                    id=new_id,
                    item=item,
                    quantity=len(service_instances),
                    instances=service_instances,
                    category=category,
                )
            )
        )
        self._logger.info("Service selected", extra={"service_id": new_id, "service": item.code})
        return new_id

    def add_service_by_code(self, code: str, quantity: int = 1, category: str | None = None) -> str | None:
        if self._catalog is None:
            raise ValueError("No service catalog configured")
        item = self._catalog.get_item(code)
        if item is None:
            raise ValueError(f"Unknown service code: {code}")
        return self.add_selected_service(item, quantity, category=category)

    def update_additional_info(
        self,
        service_id: str,
        instance_id: str | None,
        additional_info: Mapping[str, Any] | None,
        instances: Iterable[Instance] | None = None,
        new_quantity: int | None = None,
    ) -> CompositionState:
        return self._store.dispatch(
            UpdateAdditionalInfo(
                service_id=service_id,
                instance_id=instance_id,
                additional_info=additional_info,
                instances=tuple(instances) if instances is not None else None,
                new_quantity=new_quantity,
            )
        )

    def set_quantity(self, service_id: str, quantity: int) -> CompositionState:
        return self._store.dispatch(UpdateAdditionalInfo(service_id=service_id, new_quantity=quantity))

    def remove_instance(self, service_id: str, instance_id: str) -> CompositionState:
        """Drop one instance; removing the last one removes the whole selection."""
        entry = self._find(service_id)
        if entry is None:
            return self.state
        remaining = tuple(i for i in entry.instances if i.id != instance_id)
        if len(remaining) == len(entry.instances):
            return self.state
        if not remaining:
            return self.remove_selected_service(service_id)
        return self.update_additional_info(service_id, None, None, instances=remaining)

    def remove_selected_service(self, service_id: str) -> CompositionState:
        entry = self._find(service_id)
        # recorded before the reducer drops it so a later merge cannot bring it back
        self._removed.add(service_id, entry.item.id if entry else None)
        self._logger.info("Service removed", extra={"service_id": service_id})
        return self._store.dispatch(RemoveSelection(service_id))

    def import_from_source(
        self,
        source_id: str | None,
        selections: Iterable[SelectionEntry],
        mode: str = "merge",
    ) -> CompositionState:
        """Bring a stored record's selections into the composition."""
        self._removed.switch_source(source_id)
        merged = merge_selections(self.state.selections, selections, self._removed, mode)
        return self._store.dispatch(MergeSelections(merged))

    def reset(self) -> CompositionState:
        state = self._store.dispatch(Reset())
        self._persistence.clear()
        self._notice.clear()
        return state

    def validate_form(self) -> bool:
        return self._submit_use_case.validate()

    def submit(self, request_id: int | None = None) -> SubmissionResult:
        return self._submit_use_case.execute(request_id=request_id)

    def current_warning(self) -> str | None:
        return self._notice.current()

    def close(self) -> None:
        self._persistence.flush()
        self._unsubscribe()

    def _find(self, service_id: str) -> SelectionEntry | None:
        return next((entry for entry in self.state.selections if entry.id == service_id), None)

    def _on_notice_cleared(self, message: str) -> None:
        if self.state.error == message:
            self._store.dispatch(SetError(None))
