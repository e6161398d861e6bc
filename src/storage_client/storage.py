"""High level bucket and object operations.

:class:`Storage` holds a :class:`~storage_client.client.StorageClient` and
forwards to the stateless handlers, validating attributes first and
re-fetching entities after writes so callers always get fresh, immutable
values back.

Usage:
    >>> from storage_client import ClientConfig, Storage
    >>> storage = Storage.from_config(
    ...     ClientConfig(base_url="https://project.supabase.co", api_key="key")
    ... )
    >>> bucket = storage.create_bucket({"id": "avatars"})
    >>> storage.upload_object(bucket, "users/1.png", "./avatar.png")

Buckets and objects can be passed either as entities or as their identifier
strings (bucket id/name, object path).
"""

import os
import tempfile
from contextlib import contextmanager
from typing import IO, Any, Iterable, Iterator, Mapping, Optional, Protocol, Union
from urllib.parse import urljoin

from storage_client.attributes import create_changeset, update_changeset
from storage_client.client import ClientConfig, StorageClient
from storage_client.core import get_logger
from storage_client.core.exceptions import FileNotFound
from storage_client.handlers import bucket_handler, object_handler
from storage_client.schemas import (
    Bucket,
    ObjectOptions,
    OperationResult,
    SearchOptions,
    StorageObject,
)
from storage_client.transport import LazyDownload, Transport

logger = get_logger(__name__)

BucketRef = Union[Bucket, str]
ObjectRef = Union[StorageObject, str]


class StorageBehaviour(Protocol):
    """Operations offered by a storage facade; implement it for test doubles."""

    def list_buckets(self) -> list[Bucket]: ...

    def retrieve_bucket_info(self, bucket_id: str) -> Bucket: ...

    def create_bucket(self, attrs: Mapping[str, Any]) -> Bucket: ...

    def update_bucket(self, bucket: Bucket, attrs: Mapping[str, Any]) -> Bucket: ...

    def empty_bucket(self, bucket: BucketRef) -> OperationResult: ...

    def delete_bucket(self, bucket: BucketRef) -> OperationResult: ...

    def remove_object(self, bucket: BucketRef, obj: ObjectRef) -> OperationResult: ...

    def remove_objects(
        self, bucket: BucketRef, objects: Iterable[ObjectRef]
    ) -> OperationResult: ...

    def move_object(
        self, bucket: BucketRef, obj: ObjectRef, to: str
    ) -> OperationResult: ...

    def copy_object(
        self, bucket: BucketRef, obj: ObjectRef, to: str
    ) -> OperationResult: ...

    def retrieve_object_info(self, bucket: BucketRef, wildcard: str) -> StorageObject: ...

    def list_objects(
        self,
        bucket: BucketRef,
        prefix: str = "",
        options: Optional[SearchOptions] = None,
    ) -> list[StorageObject]: ...

    def upload_object(
        self,
        bucket: BucketRef,
        path: str,
        file: str,
        options: Optional[ObjectOptions] = None,
    ) -> StorageObject: ...

    def download_object(self, bucket: BucketRef, wildcard: str) -> bytes: ...

    def download_object_lazy(self, bucket: BucketRef, wildcard: str) -> LazyDownload: ...

    def save_object(self, path: str, bucket: BucketRef, wildcard: str) -> int: ...

    def save_object_stream(self, path: str, bucket: BucketRef, wildcard: str) -> int: ...

    def create_signed_url(self, bucket: BucketRef, path: str, expires_in: int) -> str: ...

    def create_signed_upload_url(self, bucket: BucketRef, path: str) -> str: ...


def _bucket_id(bucket: BucketRef) -> str:
    return bucket.id if isinstance(bucket, Bucket) else bucket


def _bucket_name(bucket: BucketRef) -> str:
    return bucket.name if isinstance(bucket, Bucket) else bucket


def _object_path(obj: ObjectRef) -> str:
    return obj.path if isinstance(obj, StorageObject) else obj


class Storage:
    """Facade over the bucket and object handlers."""

    def __init__(self, client: StorageClient):
        self.client = client

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: Optional[Transport] = None
    ) -> "Storage":
        return cls(StorageClient(config, transport))

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Storage":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Buckets

    def list_buckets(self) -> list[Bucket]:
        """Retrieve all buckets in the project."""
        return bucket_handler.list_buckets(self.client)

    def retrieve_bucket_info(self, bucket_id: str) -> Bucket:
        """Retrieve a bucket by id."""
        return bucket_handler.retrieve_info(self.client, bucket_id)

    def create_bucket(self, attrs: Mapping[str, Any]) -> Bucket:
        """Create a bucket and return it as stored by the server.

        Attributes:
            id: the bucket id, required
            name: display name, defaults to ``id``
            public: whether the bucket is public, defaults to ``False``
            file_size_limit: maximum object size in bytes
            allowed_mime_types: accepted MIME types, defaults to all

        Raises:
            ValidationError: If the attributes are invalid; no request is sent
        """
        params = create_changeset(attrs)
        bucket_handler.create(self.client, params)
        return self.retrieve_bucket_info(params.id)

    def update_bucket(self, bucket: Bucket, attrs: Mapping[str, Any]) -> Bucket:
        """Update ``public``, ``file_size_limit`` or ``allowed_mime_types``.

        A bucket's ``id`` and ``name`` cannot change; delete and recreate the
        bucket instead.
        """
        params = update_changeset(bucket, attrs)
        bucket_handler.update(self.client, bucket.id, params)
        return self.retrieve_bucket_info(bucket.id)

    def empty_bucket(self, bucket: BucketRef) -> OperationResult:
        """Delete every object in the bucket."""
        return bucket_handler.empty(self.client, _bucket_id(bucket))

    def delete_bucket(self, bucket: BucketRef) -> OperationResult:
        """Delete the bucket and all of its objects."""
        return bucket_handler.delete(self.client, _bucket_id(bucket))

    # Objects

    def remove_object(self, bucket: BucketRef, obj: ObjectRef) -> OperationResult:
        return object_handler.remove(self.client, _bucket_name(bucket), _object_path(obj))

    def remove_objects(
        self, bucket: BucketRef, objects: Iterable[ObjectRef]
    ) -> OperationResult:
        """Remove several objects in one request.

        ``DELETED`` only means the request succeeded; it does not say which of
        the paths existed.
        """
        paths = [_object_path(obj) for obj in objects]
        return object_handler.remove_list(self.client, _bucket_name(bucket), paths)

    def move_object(self, bucket: BucketRef, obj: ObjectRef, to: str) -> OperationResult:
        return object_handler.move(
            self.client, _bucket_name(bucket), _object_path(obj), to
        )

    def copy_object(self, bucket: BucketRef, obj: ObjectRef, to: str) -> OperationResult:
        return object_handler.copy(
            self.client, _bucket_name(bucket), _object_path(obj), to
        )

    def retrieve_object_info(self, bucket: BucketRef, wildcard: str) -> StorageObject:
        return object_handler.get_info(self.client, _bucket_name(bucket), wildcard)

    def list_objects(
        self,
        bucket: BucketRef,
        prefix: str = "",
        options: Optional[SearchOptions] = None,
    ) -> list[StorageObject]:
        """List objects under ``prefix``, newest first unless ``options`` says otherwise."""
        return object_handler.list_objects(
            self.client, _bucket_name(bucket), prefix, options
        )

    def upload_object(
        self,
        bucket: BucketRef,
        path: str,
        file: str,
        options: Optional[ObjectOptions] = None,
    ) -> StorageObject:
        """Upload a local file; it is streamed, not read into memory."""
        file = os.path.abspath(os.path.expanduser(file))
        return object_handler.create_file(
            self.client, _bucket_name(bucket), path, file, options
        )

    def download_object(self, bucket: BucketRef, wildcard: str) -> bytes:
        return object_handler.get(self.client, _bucket_name(bucket), wildcard)

    def download_object_lazy(self, bucket: BucketRef, wildcard: str) -> LazyDownload:
        """Stream an object; the request is made when iteration starts."""
        return object_handler.get_lazy(self.client, _bucket_name(bucket), wildcard)

    def save_object(self, path: str, bucket: BucketRef, wildcard: str) -> int:
        """Download an object and write it to ``path``; returns bytes written."""
        content = self.download_object(bucket, wildcard)
        with _open_destination(path) as handle:
            handle.write(content)
        logger.info("Object saved", path=path, size=len(content))
        return len(content)

    def save_object_stream(self, path: str, bucket: BucketRef, wildcard: str) -> int:
        """Stream an object to ``path`` chunk by chunk; returns bytes written."""
        stream = self.download_object_lazy(bucket, wildcard)
        written = 0
        with _open_destination(path) as handle:
            for chunk in stream:
                handle.write(chunk)
                written += len(chunk)
        logger.info("Object saved", path=path, size=written)
        return written

    def create_signed_url(self, bucket: BucketRef, path: str, expires_in: int) -> str:
        """Create an absolute signed download URL valid for ``expires_in`` seconds."""
        signed = object_handler.create_signed_url(
            self.client, _bucket_name(bucket), path, expires_in
        )
        return self._absolute_url(signed)

    def create_signed_upload_url(self, bucket: BucketRef, path: str) -> str:
        """Create an absolute signed URL for a single upload to ``path``."""
        signed = object_handler.create_signed_upload_url(
            self.client, _bucket_name(bucket), path
        )
        return self._absolute_url(signed)

    def _absolute_url(self, relative: str) -> str:
        return urljoin(self.client.config.storage_url + "/", relative.lstrip("/"))


@contextmanager
def _open_destination(path: str) -> Iterator[IO[bytes]]:
    """Write to a temporary file beside ``path`` and move it into place.

    The target is only replaced once the block finishes without error, so a
    failed download leaves an existing file untouched.
    """
    target = os.path.abspath(os.path.expanduser(path))
    try:
        handle = tempfile.NamedTemporaryFile(
            dir=os.path.dirname(target), prefix=".download-", delete=False
        )
    except OSError as e:
        raise FileNotFound(target, e.strerror) from e

    try:
        with handle:
            yield handle
    except BaseException:
        os.unlink(handle.name)
        raise

    try:
        os.replace(handle.name, target)
    except OSError as e:
        os.unlink(handle.name)
        raise FileNotFound(target, e.strerror) from e
