from __future__ import annotations

import logging
from typing import Any

import httpx

from request_composer.application.exceptions import SubmissionRejectedError, SubmissionUpstreamError
from request_composer.application.ports.submission_transport import SubmissionTransportPort


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    message = body.get("message") if isinstance(body, dict) else None
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    if message:
        return str(message)
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class ServiceRequestsClient(SubmissionTransportPort):
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def send(self, method: str, url: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            resp = self._client.request(method, url, json=payload)
        except httpx.HTTPError as e:
            self._logger.error("Service request transport failed", extra={"url": url, "method": method, "error": str(e)})
            raise SubmissionUpstreamError(str(e)) from e

        if resp.status_code >= 400:
            error_message = _error_message(resp)
            self._logger.error(
                "Service request failed",
                extra={
                    "status": resp.status_code,
                    "url": url,
                    "method": method,
                    "error_message": error_message,
                },
            )
            if resp.status_code >= 500:
                raise SubmissionUpstreamError(f"HTTP {resp.status_code}: {error_message}")
            raise SubmissionRejectedError(error_message, status_code=resp.status_code)

        if not resp.content:
            return {"success": True}
        try:
            data = resp.json()
        except ValueError as e:
            raise SubmissionUpstreamError("Service request endpoint returned non-JSON body") from e
        if not isinstance(data, dict):
            raise SubmissionUpstreamError("Service request endpoint returned an unexpected body")
        return data
