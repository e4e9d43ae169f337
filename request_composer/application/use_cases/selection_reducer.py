from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import fields, replace
from typing import Any

from request_composer.application.dto.composition_actions import (
    AddSelection,
    CompositionAction,
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
from request_composer.application.utils.instance_model import normalize_entry, reconcile, sanitize_additional_info
from request_composer.domain.entities.client_profile import ClientProfile
from request_composer.domain.entities.composition_state import CompositionState
from request_composer.domain.entities.selection import Instance, SelectionEntry

logger = logging.getLogger(__name__)

INITIAL_STATE = CompositionState()

_PROFILE_FIELDS = {f.name for f in fields(ClientProfile)}
_STATE_FIELDS = {f.name for f in fields(CompositionState)}
_PROFILE_ALIASES = {"nameProject": "name_project"}


def reduce_composition(state: CompositionState, action: CompositionAction | Any) -> CompositionState:
    """
    Apply one transition to the composition state.
    Never raises: unknown actions and actions whose preconditions do not hold
    return `state` unchanged.
    """
    try:
        if isinstance(action, SetClientProfile):
            return _set_client_profile(state, action.partial)
        if isinstance(action, SetFormValidity):
            return _set_field(state, "form_is_valid", bool(action.is_valid))
        if isinstance(action, AddSelection):
            return _add_selection(state, action.entry)
        if isinstance(action, UpdateAdditionalInfo):
            return _update_additional_info(state, action)
        if isinstance(action, RemoveSelection):
            return _remove_selection(state, action.service_id)
        if isinstance(action, SetLoading):
            return _set_field(state, "loading", bool(action.loading))
        if isinstance(action, SetError):
            return _set_field(state, "error", action.error)
        if isinstance(action, Reset):
            return INITIAL_STATE
        if isinstance(action, RestoreSnapshot):
            return _restore_snapshot(action.snapshot)
        if isinstance(action, MergeSelections):
            return replace(state, selections=_dedupe(normalize_entry(e) for e in action.selections))
    except (TypeError, ValueError, AttributeError) as e:
        logger.debug(
            "Rejected malformed action",
            extra={"action": type(action).__name__, "reason": str(e)},
        )
        return state
    return state


def _set_client_profile(state: CompositionState, partial: Mapping[str, Any]) -> CompositionState:
    updates = {}
    for key, value in partial.items():
        key = _PROFILE_ALIASES.get(key, key)
        if key in _PROFILE_FIELDS and value is not None:
            # form widgets may hand over numbers (phone, identification)
            updates[key] = value if isinstance(value, str) else str(value)
    if not updates:
        return state
    return replace(state, client_profile=replace(state.client_profile, **updates))


def _add_selection(state: CompositionState, entry: SelectionEntry) -> CompositionState:
    if any(existing.id == entry.id for existing in state.selections):
        return state
    if not entry.instances and entry.quantity < 1:
        return state
    return replace(state, selections=state.selections + (normalize_entry(entry),))


def _update_additional_info(state: CompositionState, action: UpdateAdditionalInfo) -> CompositionState:
    target = next((entry for entry in state.selections if entry.id == action.service_id), None)
    if target is None:
        return state

    if action.instances is not None:
        instances = tuple(
            Instance(id=instance.id, additional_info=sanitize_additional_info(instance.additional_info))
            for instance in action.instances
        )
        # new_quantity wins, but the list is resized so both agree
        quantity = action.new_quantity if action.new_quantity is not None else len(instances)
        instances = reconcile(instances, quantity)
    elif action.instance_id and action.additional_info is not None:
        if not any(instance.id == action.instance_id for instance in target.instances):
            return state
        # the supplied map replaces the instance's answers
        patched = sanitize_additional_info(action.additional_info)
        instances = tuple(
            Instance(id=instance.id, additional_info=patched) if instance.id == action.instance_id else instance
            for instance in target.instances
        )
    elif action.new_quantity is not None:
        instances = reconcile(target.instances, action.new_quantity)
    else:
        return state

    updated = replace(target, instances=instances, quantity=len(instances))
    return replace(
        state,
        selections=tuple(updated if entry.id == target.id else entry for entry in state.selections),
    )


def _remove_selection(state: CompositionState, service_id: str) -> CompositionState:
    remaining = tuple(entry for entry in state.selections if entry.id != service_id)
    if len(remaining) == len(state.selections):
        return state
    return replace(state, selections=remaining)


def _restore_snapshot(snapshot: CompositionState | Mapping[str, Any]) -> CompositionState:
    if isinstance(snapshot, CompositionState):
        values = {name: getattr(snapshot, name) for name in _STATE_FIELDS}
    else:
        values = {key: value for key, value in snapshot.items() if key in _STATE_FIELDS}

    profile = values.get("client_profile")
    if isinstance(profile, Mapping):
        values["client_profile"] = _set_client_profile(INITIAL_STATE, profile).client_profile
    elif not isinstance(profile, ClientProfile):
        values.pop("client_profile", None)
    if "selections" in values:
        values["selections"] = _dedupe(normalize_entry(entry) for entry in values["selections"])
    return replace(INITIAL_STATE, **values)


def _dedupe(entries) -> tuple[SelectionEntry, ...]:
    seen: set[str] = set()
    unique: list[SelectionEntry] = []
    for entry in entries:
        if entry.id in seen:
            continue
        seen.add(entry.id)
        unique.append(entry)
    return tuple(unique)


def _set_field(state: CompositionState, name: str, value: Any) -> CompositionState:
    if getattr(state, name) == value:
        return state
    return replace(state, **{name: value})
