from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from request_composer.application.dto.catalog import ServiceCatalogResponseDTO
from request_composer.application.exceptions import CatalogUnavailableError
from request_composer.application.ports.service_catalog import ServiceCatalogPort
from request_composer.domain.entities.service_catalog import ServiceCatalogItem, ServiceCategory


CATALOG_PATH = "/service-requests/services/all"


class HttpServiceCatalog(ServiceCatalogPort):
    """Catalog fetched once from the API and cached for the session."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._categories: list[ServiceCategory] | None = None
        self._logger = logging.getLogger(__name__)

    def refresh(self) -> list[ServiceCategory]:
        try:
            response = self._client.get(CATALOG_PATH)
            response.raise_for_status()
            payload = ServiceCatalogResponseDTO.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            self._logger.error("Error fetching services", extra={"url": CATALOG_PATH, "error": str(e)})
            raise CatalogUnavailableError(f"Could not load service catalog: {e}") from e

        self._categories = payload.extract_categories()
        self._logger.info("Service catalog loaded", extra={"categories": len(self._categories)})
        return self._categories

    def list_categories(self) -> list[ServiceCategory]:
        if self._categories is None:
            return self.refresh()
        return self._categories

    def get_item(self, code: str) -> ServiceCatalogItem | None:
        normalized_code = code.strip().upper()
        for category in self.list_categories():
            for item in category.items:
                if item.code.upper() == normalized_code:
                    return item
        return None
