from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from request_composer.domain.entities.composition_state import CompositionState
from request_composer.domain.entities.selection import Instance, SelectionEntry


@dataclass(frozen=True)
class SetClientProfile:
    partial: Mapping[str, Any]


@dataclass(frozen=True)
class SetFormValidity:
    is_valid: bool


@dataclass(frozen=True)
class AddSelection:
    entry: SelectionEntry


@dataclass(frozen=True)
class UpdateAdditionalInfo:
    service_id: str
    instance_id: str | None = None
    additional_info: Mapping[str, Any] | None = None
    instances: tuple[Instance, ...] | None = None
    new_quantity: int | None = None


@dataclass(frozen=True)
class RemoveSelection:
    service_id: str


@dataclass(frozen=True)
class SetLoading:
    loading: bool


@dataclass(frozen=True)
class SetError:
    error: str | None


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class RestoreSnapshot:
    snapshot: CompositionState | Mapping[str, Any]


@dataclass(frozen=True)
class MergeSelections:
    selections: tuple[SelectionEntry, ...]


CompositionAction = Union[
    SetClientProfile,
    SetFormValidity,
    AddSelection,
    UpdateAdditionalInfo,
    RemoveSelection,
    SetLoading,
    SetError,
    Reset,
    RestoreSnapshot,
    MergeSelections,
]
