"""Core utilities and shared components for storage-client."""

from .config import settings
from .exceptions import (
    FileNotFound,
    ParseError,
    StorageClientError,
    StreamConsumedError,
    TransportError,
    ValidationError,
)
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "StorageClientError",
    "ValidationError",
    "FileNotFound",
    "TransportError",
    "ParseError",
    "StreamConsumedError",
    "get_logger",
    "get_tracer",
]
