from __future__ import annotations

import logging
from dataclasses import dataclass

from request_composer.application.exceptions import (
    OfflineStorageError,
    SubmissionRejectedError,
    SubmissionUpstreamError,
)
from request_composer.application.ports.connectivity import ConnectivityPort
from request_composer.application.ports.offline_queue import OfflineQueuePort
from request_composer.application.ports.submission_transport import SubmissionTransportPort


@dataclass(frozen=True)
class SyncReport:
    replayed: int = 0
    failed: int = 0
    skipped_offline: bool = False
    unremoved: int = 0  # sent, but still in the queue


class SyncPendingRequestsUseCase:
    """
    Replay queued requests in order. Entries are deleted only after the
    remote side accepted them; failures stay queued for the next pass.
    Duplicate replays are not detected here.
    """

    def __init__(
        self,
        queue: OfflineQueuePort,
        transport: SubmissionTransportPort,
        connectivity: ConnectivityPort,
    ) -> None:
        self._queue = queue
        self._transport = transport
        self._connectivity = connectivity
        self._logger = logging.getLogger(__name__)

    def execute(self) -> SyncReport:
        if not self._connectivity.is_online():
            self._logger.warning("Cannot sync: no internet connection")
            return SyncReport(skipped_offline=True)

        try:
            entries = self._queue.pending()
        except OfflineStorageError as e:
            self._logger.error("Offline queue unreadable", extra={"error": str(e)})
            return SyncReport()

        replayed = 0
        failed = 0
        failed_removals = 0
        for entry in entries:
            try:
                self._transport.send(entry.method, entry.url, entry.payload)
            except SubmissionRejectedError as e:
                failed += 1
                if e.status_code == 401:
                    self._logger.error("Authentication error while syncing", extra={"url": entry.url, "reason": str(e)})
                elif e.status_code == 429:
                    self._logger.error("Rate limit exceeded while syncing", extra={"url": entry.url, "reason": str(e)})
                else:
                    self._logger.error("Failed to sync request", extra={"url": entry.url, "reason": str(e)})
                continue
            except SubmissionUpstreamError as e:
                failed += 1
                self._logger.error("Failed to sync request", extra={"url": entry.url, "reason": str(e)})
                continue

            replayed += 1
            if entry.id is None:
                continue
            try:
                self._queue.remove(entry.id)
            except OfflineStorageError as e:
                # sent but still queued; the next pass will send it again
                failed_removals += 1
                self._logger.error(
                    "Could not remove synced request from queue",
                    extra={"url": entry.url, "entry_id": entry.id, "error": str(e)},
                )

        self._logger.info(
            "Offline queue synced",
            extra={"replayed": replayed, "failed": failed, "unremoved": failed_removals},
        )
        return SyncReport(replayed=replayed, failed=failed, unremoved=failed_removals)
