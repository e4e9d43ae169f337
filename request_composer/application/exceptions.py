class SubmissionUpstreamError(RuntimeError):
    """Raised when the service request endpoint fails (timeouts, network errors, 5xx)."""
    pass


class SubmissionRejectedError(RuntimeError):
    """Raised when the service request endpoint answers but refuses the payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class OfflineStorageError(RuntimeError):
    """Raised when a request cannot be written to or read from the offline queue."""
    pass


class CatalogUnavailableError(RuntimeError):
    """Raised when the service catalog cannot be fetched or parsed."""
    pass
