from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from request_composer.domain.entities.service_catalog import ServiceCatalogItem


AdditionalValue = Union[str, int, float, bool, list[str]]


@dataclass(frozen=True)
class Instance:
    id: str
    additional_info: dict[str, AdditionalValue] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectionEntry:
    id: str
    item: ServiceCatalogItem
    quantity: int  # always len(instances) once the reducer has seen the entry
    instances: tuple[Instance, ...] = ()
    category: str | None = None
