from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from pydantic import ValidationError

from request_composer.application.dto.snapshot import CompositionSnapshotDTO
from request_composer.domain.entities.composition_state import CompositionState
from request_composer.domain.entities.selection import SelectionEntry
from request_composer.domain.entities.service_catalog import ServiceCatalogItem


def serialize_item(item: ServiceCatalogItem) -> dict[str, Any]:
    """Serialize a catalog item to the camelCase shape the catalog endpoint uses."""
    return {
        "id": item.id,
        "code": item.code,
        "name": item.name,
        "additionalInfo": [
            {
                "field": f.field,
                "type": f.type,
                "label": f.label,
                "required": f.required,
                "options": list(f.options),
                "dependsOn": asdict(f.depends_on) if f.depends_on else None,
                "question": f.question,
            }
            for f in item.additional_info
        ],
    }


def serialize_selection(entry: SelectionEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "item": serialize_item(entry.item),
        "quantity": entry.quantity,
        "instances": [
            {"id": instance.id, "additional_info": dict(instance.additional_info)}
            for instance in entry.instances
        ],
        "category": entry.category,
    }


def serialize_state(state: CompositionState) -> dict[str, Any]:
    """Serialize CompositionState to a JSON-ready dict."""
    return {
        "client_profile": asdict(state.client_profile),
        "selections": [serialize_selection(entry) for entry in state.selections],
        "loading": state.loading,
        "error": state.error,
        "form_is_valid": state.form_is_valid,
    }


def dump_state(state: CompositionState) -> str:
    return json.dumps(serialize_state(state), ensure_ascii=False)


def load_state(blob: str | bytes) -> CompositionState:
    """Parse a stored snapshot. Raises ValueError on malformed JSON or shape."""
    try:
        return CompositionSnapshotDTO.model_validate_json(blob).to_state()
    except ValidationError as e:
        raise ValueError(f"Invalid composition snapshot: {e.error_count()} error(s)") from e
