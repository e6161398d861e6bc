"""Exception hierarchy for storage-client."""

from typing import Any, Optional


class StorageClientError(Exception):
    """Base exception for all storage-client errors."""

    pass


class ValidationError(StorageClientError):
    """Raised when attributes fail validation, before any request is made."""

    pass


class FileNotFound(StorageClientError):
    """Raised when a local file cannot be opened for upload or download."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        message = f"File not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class TransportError(StorageClientError):
    """Raised when the HTTP exchange fails.

    ``status_code`` is ``None`` for network level failures (connection
    errors, timeouts); otherwise it is the non-2xx status returned by the
    server, with ``body`` holding the decoded error payload when there is one.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ParseError(StorageClientError):
    """Raised when a response body does not have the expected shape."""

    pass


class StreamConsumedError(StorageClientError):
    """Raised when a lazy download is iterated more than once."""

    pass
