from __future__ import annotations

import re
import threading
from pathlib import Path

from request_composer.application.ports.snapshot_store import SnapshotStorePort


class JsonSnapshotStore(SnapshotStorePort):
    def __init__(self, data_dir: str = "./data/snapshots") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _get_file_path(self, key: str) -> Path:
        """Get the file path for a snapshot key."""
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self._data_dir / f"{safe_key}.json"

    def read(self, key: str) -> str | None:
        file_path = self._get_file_path(key)
        with self._lock:
            if not file_path.exists():
                return None
            return file_path.read_text(encoding="utf-8")

    def write(self, key: str, blob: str) -> None:
        """Save snapshot atomically."""
        file_path = self._get_file_path(key)
        temp_path = file_path.with_suffix(".json.tmp")

        with self._lock:
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    f.write(blob)
                # Atomic rename
                temp_path.replace(file_path)
            except Exception:
                if temp_path.exists():
                    temp_path.unlink(missing_ok=True)
                raise

    def delete(self, key: str) -> None:
        with self._lock:
            self._get_file_path(key).unlink(missing_ok=True)
