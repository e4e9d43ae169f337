from __future__ import annotations

import logging
from collections.abc import Iterable

from request_composer.domain.entities.selection import SelectionEntry


MERGE_MODES = ("merge", "replace")


class RemovalSet:
    """
    Ids the user explicitly deselected during the current session.
    Only the merge resolver reads it; it is never persisted.
    """

    def __init__(self, source_id: str | None = None) -> None:
        self._ids: set[str] = set()
        self._source_id = source_id
        self._logger = logging.getLogger(__name__)

    @property
    def source_id(self) -> str | None:
        return self._source_id

    def add(self, *ids: object) -> None:
        for value in ids:
            if value is not None:
                self._ids.add(str(value))

    def discard(self, *ids: object) -> None:
        for value in ids:
            if value is not None:
                self._ids.discard(str(value))

    def clear(self) -> None:
        self._ids.clear()

    def switch_source(self, source_id: str | None) -> bool:
        """Clear the set when the source record changes. Returns True if it did."""
        if source_id == self._source_id:
            return False
        self._logger.info(
            "Source switched, clearing removals",
            extra={"source_id": source_id, "previous_source_id": self._source_id, "cleared": len(self._ids)},
        )
        self._source_id = source_id
        self._ids.clear()
        return True

    def __contains__(self, value: object) -> bool:
        return value is not None and str(value) in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(sorted(self._ids))


def _is_removed(entry: SelectionEntry, removed: RemovalSet | Iterable[object]) -> bool:
    if isinstance(removed, RemovalSet):
        return entry.id in removed or entry.item.id in removed
    removed_keys = {str(value) for value in removed}
    return str(entry.id) in removed_keys or str(entry.item.id) in removed_keys


def merge_selections(
    current: Iterable[SelectionEntry],
    incoming: Iterable[SelectionEntry],
    removed: RemovalSet | Iterable[object],
    mode: str = "merge",
) -> tuple[SelectionEntry, ...]:
    """
    Reconcile an externally sourced selection list into the current one.

    "replace" is the first load of a record being edited: incoming wins outright.
    "merge" appends incoming entries that are neither present already nor
    explicitly removed by the user, so a re-import never resurrects a removal.
    """
    logger = logging.getLogger(__name__)
    current = tuple(current)
    incoming = tuple(incoming)

    if mode not in MERGE_MODES:
        raise ValueError(f"Unknown merge mode: {mode!r}")

    if mode == "replace":
        logger.info("Replacing selections from source", extra={"count": len(incoming)})
        return incoming

    if not incoming:
        logger.info("No selections to merge from source")
        return current

    present = {entry.id for entry in current}
    merged = list(current)
    for entry in incoming:
        if entry.id in present:
            logger.info("Selection already present", extra={"service_id": entry.id, "service": entry.item.code})
            continue
        if _is_removed(entry, removed):
            logger.info(
                "Ignoring selection removed by user",
                extra={"service_id": entry.id, "service": entry.item.code},
            )
            continue
        merged.append(entry)
        present.add(entry.id)
        logger.info("Added selection from source", extra={"service_id": entry.id, "service": entry.item.code})

    return tuple(merged)
