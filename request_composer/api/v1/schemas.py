from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from request_composer.application.dto.snapshot import SelectionEntryDTO


class MergeMode(str, Enum):
    merge = "merge"
    replace = "replace"


class ProfileUpdateSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    name_project: str | None = Field(default=None, alias="nameProject")
    location: str | None = None
    identification: str | None = None
    phone: str | None = None
    email: str | None = None
    description: str | None = None
    status: str | None = None


class AddSelectionRequestSchema(BaseModel):
    code: str
    quantity: int = Field(default=1, ge=1)
    category: str | None = None


class AddSelectionResponseSchema(BaseModel):
    service_id: str


class QuantityRequestSchema(BaseModel):
    quantity: int


class AdditionalInfoRequestSchema(BaseModel):
    additional_info: dict[str, Any] = Field(default_factory=dict)


class ImportRequestSchema(BaseModel):
    source_id: str | None = None
    mode: MergeMode = MergeMode.merge
    selections: list[SelectionEntryDTO] = Field(default_factory=list)


class SubmitRequestSchema(BaseModel):
    request_id: int | None = None


class SubmissionResponseSchema(BaseModel):
    success: bool
    outcome: str
    message: str | None = None
    request_id: int | None = None
    remote_persisted: bool
    warning: str | None = None


class WarningResponseSchema(BaseModel):
    warning: str | None = None


class SyncResponseSchema(BaseModel):
    replayed: int
    failed: int
    skipped_offline: bool
    unremoved: int = 0
