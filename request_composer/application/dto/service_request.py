from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WireFormData(BaseModel):
    name: str
    name_project: str
    location: str
    identification: str
    phone: str
    email: str
    description: str
    status: str | None = None


class WireItem(BaseModel):
    code: str
    name: str


class WireInstance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    additional_info: dict[str, Any] = Field(default_factory=dict, alias="additionalInfo")


class WireSelectedService(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item: WireItem
    quantity: int
    additional_info: dict[str, Any] | None = Field(default=None, alias="additionalInfo")
    instances: list[WireInstance] | None = None


class ServiceRequestPayload(BaseModel):
    """Body of POST/PUT /service-requests."""

    model_config = ConfigDict(populate_by_name=True)

    form_data: WireFormData = Field(alias="formData")
    selected_services: list[WireSelectedService] = Field(default_factory=list, alias="selectedServices")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ServiceRequestResponseDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    request_id: int | None = None
    message: str | None = None
