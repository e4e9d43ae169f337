from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from request_composer.application.dto.composition_actions import Reset, SetError, SetFormValidity, SetLoading
from request_composer.application.dto.service_request import ServiceRequestResponseDTO
from request_composer.application.exceptions import (
    OfflineStorageError,
    SubmissionRejectedError,
    SubmissionUpstreamError,
)
from request_composer.application.ports.connectivity import ConnectivityPort
from request_composer.application.ports.offline_queue import OfflineQueuePort
from request_composer.application.ports.submission_transport import SubmissionTransportPort
from request_composer.application.use_cases.composition_store import CompositionStore
from request_composer.application.use_cases.session_persistence import SessionPersistenceGateway
from request_composer.application.use_cases.validate_composition import ValidateCompositionUseCase
from request_composer.application.utils.transient_notice import TransientNotice
from request_composer.application.utils.wire_format import FIRST_ONLY, transform_to_api_format
from request_composer.domain.entities.offline_request import OfflineQueueEntry
from request_composer.domain.entities.submission import SubmissionPhase, SubmissionResult


SERVICE_REQUESTS_PATH = "/service-requests"
OFFLINE_MESSAGE = "The request was saved locally and will be sent when the connection is restored."
DEFAULT_REJECTION_PATTERNS = ("should not exist", "is not allowed", "invalid field")


class SubmitServiceRequestUseCase:
    """
    Validate, transform and send the current composition.

    The pipeline never leaves the caller stuck: every failure is turned into a
    transient warning plus a reported success. SubmissionResult.remote_persisted
    tells whether the request actually reached the remote store.
    """

    def __init__(
        self,
        store: CompositionStore,
        transport: SubmissionTransportPort,
        connectivity: ConnectivityPort,
        offline_queue: OfflineQueuePort,
        validator: ValidateCompositionUseCase,
        notice: TransientNotice,
        persistence: SessionPersistenceGateway | None = None,
        wire_strategy: str = FIRST_ONLY,
        rejection_patterns: Sequence[str] = DEFAULT_REJECTION_PATTERNS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._transport = transport
        self._connectivity = connectivity
        self._offline_queue = offline_queue
        self._validator = validator
        self._notice = notice
        self._persistence = persistence
        self._wire_strategy = wire_strategy
        self._rejection_patterns = tuple(p.lower() for p in rejection_patterns)
        self._clock = clock
        self._phase = SubmissionPhase.idle
        self._last_outcome: SubmissionPhase | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def phase(self) -> SubmissionPhase:
        return self._phase

    @property
    def last_outcome(self) -> SubmissionPhase | None:
        return self._last_outcome

    def validate(self) -> bool:
        """Run the advisory checks. Always returns True."""
        self._run_validation()
        return True

    def _run_validation(self) -> str | None:
        # advisory: a broken check must not stop the send
        try:
            report = self._validator.execute(self._store.state)
        except Exception as e:
            self._logger.exception("Validation failed, continuing without it", extra={"error": str(e)})
            return None
        self._store.dispatch(SetFormValidity(report.is_valid))
        if report.is_valid:
            return None
        warning = report.summary()
        self._notice.show(warning)
        return warning

    def execute(self, request_id: int | None = None) -> SubmissionResult:
        """Submit a new request, or update `request_id` when editing an existing one."""
        method, url = ("PUT", f"{SERVICE_REQUESTS_PATH}/{request_id}") if request_id else ("POST", SERVICE_REQUESTS_PATH)
        self._store.dispatch(SetLoading(True))
        self._store.dispatch(SetError(None))
        try:
            self._phase = SubmissionPhase.validating
            validation_warning = self._run_validation()

            state = self._store.state
            payload = transform_to_api_format(state.client_profile, state.selections, self._wire_strategy)

            if not self._is_online():
                return self._finish(self._queue_offline(method, url, payload))

            self._phase = SubmissionPhase.submitting
            try:
                body = self._transport.send(method, url, payload)
            except SubmissionUpstreamError as e:
                if not self._is_online():
                    self._logger.info("Connection lost while submitting", extra={"url": url})
                    return self._finish(self._queue_offline(method, url, payload))
                return self._finish(self._soft_success(f"The request could not be sent: {e}"))
            except SubmissionRejectedError as e:
                return self._finish(self._soft_success(self._describe_rejection(str(e))))

            try:
                response = ServiceRequestResponseDTO.model_validate(body)
            except ValidationError:
                return self._finish(self._soft_success("The server returned an unexpected response"))

            if not response.success:
                return self._finish(self._soft_success(self._describe_rejection(response.message or "")))

            self._complete_locally()
            self._logger.info(
                "Service request submitted",
                extra={"outcome": SubmissionPhase.succeeded.value, "request_id": response.request_id, "url": url},
            )
            return self._finish(
                SubmissionResult(
                    success=True,
                    outcome=SubmissionPhase.succeeded,
                    message=response.message,
                    request_id=response.request_id,
                    remote_persisted=True,
                    warning=validation_warning,
                )
            )
        except Exception as e:
            self._logger.exception("Unexpected error while submitting", extra={"url": url, "error": str(e)})
            return self._finish(self._soft_success("The request could not be processed"))
        finally:
            self._store.dispatch(SetLoading(False))
            self._phase = SubmissionPhase.idle

    def _finish(self, result: SubmissionResult) -> SubmissionResult:
        self._last_outcome = result.outcome
        return result

    def _is_online(self) -> bool:
        try:
            return self._connectivity.is_online()
        except Exception as e:
            self._logger.warning("Connectivity check failed, assuming offline", extra={"error": str(e)})
            return False

    def _complete_locally(self) -> None:
        self._store.dispatch(Reset())
        if self._persistence is not None:
            self._persistence.clear()

    def _queue_offline(self, method: str, url: str, payload: dict[str, Any]) -> SubmissionResult:
        queued_at = self._clock()
        entry = OfflineQueueEntry(
            url=url,
            method=method,
            payload=payload,
            timestamp=datetime.fromtimestamp(queued_at, tz=timezone.utc).isoformat(),
        )
        try:
            self._offline_queue.enqueue(entry)
        except OfflineStorageError as e:
            self._logger.error("Offline queue unavailable", extra={"url": url, "error": str(e)})
            return self._soft_success("The request could not be saved for later sending")

        self._complete_locally()
        self._logger.info("Service request queued offline", extra={"outcome": SubmissionPhase.queued_offline.value, "url": url})
        return SubmissionResult(
            success=True,
            outcome=SubmissionPhase.queued_offline,
            message=OFFLINE_MESSAGE,
            request_id=int(queued_at * 1000),
            remote_persisted=False,
        )

    def is_field_rejection(self, message: str) -> bool:
        lowered = message.lower()
        return any(pattern in lowered for pattern in self._rejection_patterns)

    def _describe_rejection(self, message: str) -> str:
        if message and self.is_field_rejection(message):
            return f"Some fields were not accepted: {message}"
        return message or "The request was not accepted"

    def _soft_success(self, warning: str) -> SubmissionResult:
        self._notice.show(warning)
        self._store.dispatch(SetError(warning))
        self._logger.warning(
            "Submission reported as success with warnings",
            extra={"outcome": SubmissionPhase.succeeded_with_warnings.value, "reason": warning},
        )
        return SubmissionResult(
            success=True,
            outcome=SubmissionPhase.succeeded_with_warnings,
            message=warning,
            remote_persisted=False,
            warning=warning,
        )
