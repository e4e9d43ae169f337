from abc import ABC, abstractmethod

from request_composer.domain.entities.offline_request import OfflineQueueEntry


class OfflineQueuePort(ABC):
    @abstractmethod
    def enqueue(self, entry: OfflineQueueEntry) -> int:
        """Append entry durably. Returns the id assigned to it."""
        raise NotImplementedError

    @abstractmethod
    def pending(self) -> list[OfflineQueueEntry]:
        """All entries not yet replayed, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, entry_id: int) -> None:
        raise NotImplementedError
