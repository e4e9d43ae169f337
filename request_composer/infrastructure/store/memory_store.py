from __future__ import annotations

from dataclasses import replace

from request_composer.application.ports.offline_queue import OfflineQueuePort
from request_composer.application.ports.snapshot_store import SnapshotStorePort
from request_composer.domain.entities.offline_request import OfflineQueueEntry


class MemorySnapshotStore(SnapshotStorePort):
    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self._blobs.get(key)

    def write(self, key: str, blob: str) -> None:
        self._blobs[key] = blob

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)


class MemoryOfflineQueue(OfflineQueuePort):
    def __init__(self) -> None:
        self._entries: dict[int, OfflineQueueEntry] = {}
        self._next_id = 1

    def enqueue(self, entry: OfflineQueueEntry) -> int:
        entry_id = self._next_id
        self._next_id += 1
        self._entries[entry_id] = replace(entry, id=entry_id)
        return entry_id

    def pending(self) -> list[OfflineQueueEntry]:
        return [self._entries[k] for k in sorted(self._entries)]

    def remove(self, entry_id: int) -> None:
        self._entries.pop(entry_id, None)
