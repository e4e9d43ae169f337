from abc import ABC, abstractmethod
from typing import Any


class SubmissionTransportPort(ABC):
    @abstractmethod
    def send(self, method: str, url: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Send a request to the service request API and return the decoded body.
        Raises SubmissionUpstreamError on transport failure or 5xx,
        SubmissionRejectedError on 4xx.
        """
        raise NotImplementedError
