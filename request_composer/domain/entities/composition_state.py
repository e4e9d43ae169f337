from __future__ import annotations

from dataclasses import dataclass

from request_composer.domain.entities.client_profile import ClientProfile
from request_composer.domain.entities.selection import SelectionEntry


@dataclass(frozen=True)
class CompositionState:
    client_profile: ClientProfile = ClientProfile()
    selections: tuple[SelectionEntry, ...] = ()
    loading: bool = False
    error: str | None = None
    form_is_valid: bool = False
