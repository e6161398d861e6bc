"""Client library for bucket and object storage over a REST API.

This package maps bucket and object operations (create, list, update,
empty and delete buckets; upload, download, move, copy, list and remove
objects; signed URLs) onto single HTTP requests against a Supabase Storage
compatible API.

Key Features:
    - Validation of bucket attributes before any request is sent
    - Typed, immutable Bucket and StorageObject entities
    - Streamed uploads and lazy, single-pass downloads
    - Pluggable transport (httpx by default) for testing
    - CLI interface

Recommended Usage:
    Use the Storage facade for most operations:

    >>> from storage_client import ClientConfig, Storage
    >>> config = ClientConfig(base_url="https://project.supabase.co", api_key="key")
    >>> with Storage.from_config(config) as storage:
    ...     buckets = storage.list_buckets()

Advanced Usage:
    Call the handlers directly for one request at a time:

    >>> from storage_client.handlers import object_handler
    >>> from storage_client import StorageClient
"""

__version__ = "0.1.0"

from .attributes import (
    BucketCreateAttrs,
    BucketUpdateAttrs,
    create_changeset,
    update_changeset,
)
from .client import ClientConfig, StorageClient
from .core.exceptions import (
    FileNotFound,
    ParseError,
    StorageClientError,
    StreamConsumedError,
    TransportError,
    ValidationError,
)
from .schemas import (
    Bucket,
    ObjectOptions,
    OperationResult,
    SearchOptions,
    SortBy,
    StorageObject,
)
from .storage import Storage, StorageBehaviour
from .transport import HttpxTransport, LazyDownload, Transport

__all__ = [
    # Facade
    "Storage",
    "StorageBehaviour",
    # Connection
    "ClientConfig",
    "StorageClient",
    "HttpxTransport",
    "Transport",
    "LazyDownload",
    # Entities and options
    "Bucket",
    "StorageObject",
    "ObjectOptions",
    "SearchOptions",
    "SortBy",
    "OperationResult",
    # Attributes
    "BucketCreateAttrs",
    "BucketUpdateAttrs",
    "create_changeset",
    "update_changeset",
    # Errors
    "StorageClientError",
    "ValidationError",
    "FileNotFound",
    "TransportError",
    "ParseError",
    "StreamConsumedError",
]
