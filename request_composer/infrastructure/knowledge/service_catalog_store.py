from __future__ import annotations

from collections.abc import Iterable

from request_composer.application.ports.service_catalog import ServiceCatalogPort
from request_composer.domain.entities.service_catalog import ServiceCatalogItem, ServiceCategory
from request_composer.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, categories: Iterable[ServiceCategory] | None = None) -> None:
        self._categories = list(categories if categories is not None else SERVICE_CATALOG)
        self._items = {item.code.upper(): item for category in self._categories for item in category.items}

    def list_categories(self) -> list[ServiceCategory]:
        return list(self._categories)

    def get_item(self, code: str) -> ServiceCatalogItem | None:
        normalized_code = code.strip().upper()
        return self._items.get(normalized_code)
