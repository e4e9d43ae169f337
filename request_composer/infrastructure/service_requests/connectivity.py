from __future__ import annotations

import logging

import httpx

from request_composer.application.ports.connectivity import ConnectivityPort


class HttpConnectivityProbe(ConnectivityPort):
    """Online means the API host answered at all, whatever the status code."""

    def __init__(self, probe_url: str, timeout: float = 3.0, client: httpx.Client | None = None) -> None:
        self._probe_url = probe_url
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def is_online(self) -> bool:
        try:
            self._client.head(self._probe_url)
        except httpx.TransportError as e:
            self._logger.info("Connectivity probe failed", extra={"url": self._probe_url, "error": str(e)})
            return False
        return True


class StaticConnectivity(ConnectivityPort):
    def __init__(self, online: bool = True) -> None:
        self.online = online

    def is_online(self) -> bool:
        return self.online
