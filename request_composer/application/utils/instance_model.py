from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any
from uuid import uuid4

from request_composer.domain.entities.composition_state import CompositionState
from request_composer.domain.entities.selection import AdditionalValue, Instance, SelectionEntry


def new_instance_id() -> str:
    return str(uuid4())


def sanitize_additional_info(info: Mapping[str, Any] | None) -> dict[str, AdditionalValue]:
    """Drop unanswered keys. A None map becomes an empty one."""
    if not info:
        return {}
    return {key: value for key, value in info.items() if value is not None}


def create_instances(quantity: int, id_factory: Callable[[], str] = new_instance_id) -> tuple[Instance, ...]:
    return tuple(Instance(id=id_factory(), additional_info={}) for _ in range(max(1, int(quantity))))


def reconcile(
    existing: Iterable[Instance],
    quantity: int,
    id_factory: Callable[[], str] = new_instance_id,
) -> tuple[Instance, ...]:
    """
    Resize an instance list to `quantity`.
    Survivors keep their order and answers; growth appends fresh empty
    instances, shrinking drops from the tail. Quantities below 1 clamp to 1.
    """
    target = max(1, int(quantity))
    kept = tuple(existing)[:target]
    missing = target - len(kept)
    if missing <= 0:
        return kept
    return kept + tuple(Instance(id=id_factory(), additional_info={}) for _ in range(missing))


def normalize_entry(entry: SelectionEntry) -> SelectionEntry:
    """Return an entry whose quantity matches its (sanitized) instances."""
    if entry.instances:
        instances = tuple(
            Instance(id=instance.id, additional_info=sanitize_additional_info(instance.additional_info))
            for instance in entry.instances
        )
    else:
        instances = create_instances(entry.quantity)
    return SelectionEntry(
        id=entry.id,
        item=entry.item,
        quantity=len(instances),
        instances=instances,
        category=entry.category,
    )


def check_invariants(state: CompositionState) -> list[str]:
    """List every quantity/instance-count mismatch and every null answer."""
    violations: list[str] = []
    seen: set[str] = set()
    for entry in state.selections:
        if entry.id in seen:
            violations.append(f"selection {entry.id}: duplicate id")
        seen.add(entry.id)
        if entry.quantity != len(entry.instances):
            violations.append(
                f"selection {entry.id}: quantity {entry.quantity} != {len(entry.instances)} instances"
            )
        for instance in entry.instances:
            for key, value in instance.additional_info.items():
                if value is None:
                    violations.append(f"selection {entry.id} instance {instance.id}: '{key}' is null")
    return violations
