from __future__ import annotations

from dataclasses import dataclass, field


FIELD_TYPES = ("text", "number", "select", "select-multiple", "checkbox", "radio", "date")


@dataclass(frozen=True)
class FieldDependency:
    field: str
    value: str


@dataclass(frozen=True)
class AdditionalFieldSchema:
    field: str
    type: str  # one of FIELD_TYPES
    label: str = ""
    required: bool = False
    options: tuple[str, ...] = ()
    depends_on: FieldDependency | None = None
    question: str | None = None


@dataclass(frozen=True)
class ServiceCatalogItem:
    id: int | str
    code: str
    name: str
    additional_info: tuple[AdditionalFieldSchema, ...] = ()


@dataclass(frozen=True)
class ServiceCategory:
    id: int | str
    code: str
    category: str
    items: tuple[ServiceCatalogItem, ...] = field(default_factory=tuple)
