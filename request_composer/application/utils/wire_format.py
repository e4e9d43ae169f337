from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from request_composer.application.dto.service_request import (
    ServiceRequestPayload,
    WireFormData,
    WireInstance,
    WireItem,
    WireSelectedService,
)
from request_composer.domain.entities.client_profile import ClientProfile
from request_composer.domain.entities.selection import SelectionEntry

logger = logging.getLogger(__name__)

FIRST_ONLY = "first_only"
ALL_INSTANCES = "all_instances"
WIRE_STRATEGIES = (FIRST_ONLY, ALL_INSTANCES)


def _selected_service(entry: SelectionEntry, strategy: str) -> WireSelectedService:
    item = WireItem(code=entry.item.code, name=entry.item.name)
    if strategy == ALL_INSTANCES and len(entry.instances) > 1:
        return WireSelectedService(
            item=item,
            quantity=entry.quantity,
            instances=[WireInstance(additional_info=dict(i.additional_info)) for i in entry.instances],
        )

    # legacy format carries one answer map per selection
    if len(entry.instances) > 1:
        logger.debug(
            "Only the first instance is transmitted",
            extra={"service_id": entry.id, "dropped_instances": len(entry.instances) - 1},
        )
    first = dict(entry.instances[0].additional_info) if entry.instances else {}
    return WireSelectedService(item=item, quantity=entry.quantity, additional_info=first)


def build_payload(
    profile: ClientProfile,
    selections: Iterable[SelectionEntry],
    strategy: str = FIRST_ONLY,
) -> ServiceRequestPayload:
    if strategy not in WIRE_STRATEGIES:
        raise ValueError(f"Unknown wire instance strategy: {strategy!r}")
    return ServiceRequestPayload(
        form_data=WireFormData(
            name=profile.name,
            name_project=profile.name_project,
            location=profile.location,
            identification=profile.identification,
            phone=profile.phone,
            email=profile.email,
            description=profile.description,
            status=profile.status or None,
        ),
        selected_services=[_selected_service(entry, strategy) for entry in selections],
    )


def transform_to_api_format(
    profile: ClientProfile,
    selections: Iterable[SelectionEntry],
    strategy: str = FIRST_ONLY,
) -> dict[str, Any]:
    """Map the internal composition to the body expected by /service-requests."""
    return build_payload(profile, selections, strategy).to_wire()
