from __future__ import annotations

from abc import ABC, abstractmethod

from request_composer.domain.entities.service_catalog import ServiceCatalogItem, ServiceCategory


class ServiceCatalogPort(ABC):
    @abstractmethod
    def list_categories(self) -> list[ServiceCategory]:
        """All service categories with their items."""
        raise NotImplementedError

    @abstractmethod
    def get_item(self, code: str) -> ServiceCatalogItem | None:
        """Get catalog item by service code."""
        raise NotImplementedError
