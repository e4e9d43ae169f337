from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from request_composer.application.exceptions import OfflineStorageError
from request_composer.application.ports.offline_queue import OfflineQueuePort
from request_composer.domain.entities.offline_request import OfflineQueueEntry


class JsonOfflineQueue(OfflineQueuePort):
    """Pending requests in a single JSON file, rewritten atomically on every change."""

    def __init__(self, path: str = "./data/offline/pending-requests.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _load(self) -> dict[str, Any]:
        """Load queue data from JSON file, return default if missing."""
        if not self._path.exists():
            return {"next_id": 1, "requests": [], "version": 1}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (ValueError, IOError) as e:
            # ValueError covers both JSONDecodeError and UnicodeDecodeError
            raise OfflineStorageError(f"Could not read offline queue: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("requests", []), list):
            raise OfflineStorageError("Offline queue file is not a queue document")
        if "next_id" not in data:
            data["next_id"] = max((r.get("id", 0) for r in data.get("requests", [])), default=0) + 1
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Save queue data to JSON file atomically."""
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except (OSError, TypeError, ValueError) as e:
            temp_path.unlink(missing_ok=True)
            raise OfflineStorageError(f"Could not save offline queue: {e}") from e

    def enqueue(self, entry: OfflineQueueEntry) -> int:
        with self._lock:
            data = self._load()
            entry_id = int(data["next_id"])
            data["next_id"] = entry_id + 1
            data.setdefault("requests", []).append(
                {
                    "id": entry_id,
                    "url": entry.url,
                    "method": entry.method,
                    "data": entry.payload,
                    "timestamp": entry.timestamp,
                }
            )
            self._save(data)
        self._logger.info("Request queued offline", extra={"url": entry.url, "method": entry.method, "entry_id": entry_id})
        return entry_id

    def pending(self) -> list[OfflineQueueEntry]:
        with self._lock:
            data = self._load()
        return [
            OfflineQueueEntry(
                id=r.get("id"),
                url=r["url"],
                method=r["method"],
                payload=r.get("data"),
                timestamp=r.get("timestamp", ""),
            )
            for r in data.get("requests", [])
        ]

    def remove(self, entry_id: int) -> None:
        with self._lock:
            data = self._load()
            data["requests"] = [r for r in data.get("requests", []) if r.get("id") != entry_id]
            self._save(data)
