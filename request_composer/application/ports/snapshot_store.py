from abc import ABC, abstractmethod


class SnapshotStorePort(ABC):
    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the stored blob for key, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def write(self, key: str, blob: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError
