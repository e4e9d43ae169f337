from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from request_composer.application.ports.service_catalog import ServiceCatalogPort
from request_composer.application.utils.field_rules import REQUIRED_FIELDS_BY_CODE, instance_issues, profile_issues
from request_composer.domain.entities.composition_state import CompositionState
from request_composer.domain.entities.service_catalog import ServiceCatalogItem


@dataclass(frozen=True)
class ValidationReport:
    profile_issues: list[str] = field(default_factory=list)
    selection_issues: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.profile_issues and not self.selection_issues

    def summary(self, limit: int = 3) -> str:
        issues = self.profile_issues + self.selection_issues
        if not issues:
            return ""
        text = "; ".join(issues[:limit])
        if len(issues) > limit:
            text += f" (+{len(issues) - limit} more)"
        return f"Incomplete request: {text}"


class ValidateCompositionUseCase:
    """Required-field and shape checks. Advisory only: results never block submission."""

    def __init__(
        self,
        catalog: ServiceCatalogPort | None = None,
        required_by_code: Mapping[str, tuple[str, ...]] = REQUIRED_FIELDS_BY_CODE,
    ) -> None:
        self._catalog = catalog
        self._required_by_code = required_by_code
        self._logger = logging.getLogger(__name__)

    def _schema_item(self, item: ServiceCatalogItem) -> ServiceCatalogItem:
        # selections restored from a record may carry items without their field schema
        if item.additional_info or self._catalog is None:
            return item
        try:
            return self._catalog.get_item(item.code) or item
        except Exception as e:
            self._logger.warning("Catalog lookup failed", extra={"service": item.code, "error": str(e)})
            return item

    def execute(self, state: CompositionState) -> ValidationReport:
        selection_problems: list[str] = []
        if not state.selections:
            selection_problems.append("select at least one service")

        for entry in state.selections:
            item = self._schema_item(entry.item)
            for index, instance in enumerate(entry.instances, start=1):
                for issue in instance_issues(item, instance.additional_info, self._required_by_code):
                    selection_problems.append(f"{entry.item.code} #{index}: {issue}")

        report = ValidationReport(
            profile_issues=profile_issues(state.client_profile),
            selection_issues=selection_problems,
        )
        if not report.is_valid:
            self._logger.info(
                "Composition has validation warnings",
                extra={
                    "profile_issues": len(report.profile_issues),
                    "selection_issues": len(report.selection_issues),
                },
            )
        return report
