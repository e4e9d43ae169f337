from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from request_composer.application.dto.catalog import ServiceCatalogItemDTO
from request_composer.domain.entities.client_profile import ClientProfile
from request_composer.domain.entities.composition_state import CompositionState
from request_composer.domain.entities.selection import Instance, SelectionEntry


class ClientProfileDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    name_project: str = Field(default="", alias="nameProject")
    location: str = ""
    identification: str = ""
    phone: str = ""
    email: str = ""
    description: str = ""
    status: str = "pendiente"

    def to_entity(self) -> ClientProfile:
        return ClientProfile(**self.model_dump())


class InstanceDTO(BaseModel):
    id: str
    additional_info: dict[str, Any] = Field(default_factory=dict)


class SelectionEntryDTO(BaseModel):
    id: str
    item: ServiceCatalogItemDTO
    quantity: int
    instances: list[InstanceDTO] = Field(default_factory=list)
    category: str | None = None

    def to_entity(self) -> SelectionEntry:
        return SelectionEntry(
            id=self.id,
            item=self.item.to_entity(),
            quantity=self.quantity,
            instances=tuple(Instance(id=i.id, additional_info=dict(i.additional_info)) for i in self.instances),
            category=self.category,
        )


class CompositionSnapshotDTO(BaseModel):
    """Stored snapshot. Absent keys fall back to the initial state's values."""

    model_config = ConfigDict(extra="ignore")

    client_profile: ClientProfileDTO = Field(default_factory=ClientProfileDTO)
    selections: list[SelectionEntryDTO] = Field(default_factory=list)
    loading: bool = False
    error: str | None = None
    form_is_valid: bool = False

    def to_state(self) -> CompositionState:
        return CompositionState(
            client_profile=self.client_profile.to_entity(),
            selections=tuple(entry.to_entity() for entry in self.selections),
            loading=self.loading,
            error=self.error,
            form_is_valid=self.form_is_valid,
        )
