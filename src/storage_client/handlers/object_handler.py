"""Object requests within a bucket.

Responsibilities:
    - Upload a local file (streamed, never read fully into memory)
    - Move and copy objects inside a bucket
    - Retrieve object metadata and list objects under a prefix
    - Remove one or many objects
    - Create signed download and upload URLs
    - Download object content, buffered or lazily

Bucket arguments are bucket names; object arguments are paths inside the
bucket. Signed URLs are returned as the server sends them, relative to the
storage API URL.
"""

from typing import Iterable, Optional

from storage_client import endpoints
from storage_client.client import StorageClient
from storage_client.core import get_logger
from storage_client.schemas import (
    ObjectOptions,
    OperationResult,
    SearchOptions,
    StorageObject,
)
from storage_client.transport import LazyDownload

from .parsing import extract_field, parse_many, parse_one

logger = get_logger(__name__)


def create_file(
    client: StorageClient,
    bucket: str,
    object_path: str,
    file_path: str,
    options: Optional[ObjectOptions] = None,
) -> StorageObject:
    """Upload ``file_path`` to ``object_path`` in ``bucket``.

    Args:
        client: Storage client context
        bucket: Bucket name
        object_path: Destination path inside the bucket
        file_path: Local file to upload
        options: Upload headers; defaults to ``ObjectOptions()``

    Returns:
        The uploaded object as reported by the server

    Raises:
        FileNotFound: If ``file_path`` cannot be opened
        TransportError: If the upload request fails
    """
    options = options or ObjectOptions()
    url = client.retrieve_storage_url(endpoints.file_upload(bucket, object_path))
    headers = client.apply_client_headers(options.to_headers())

    logger.info(
        "Uploading object",
        bucket=bucket,
        path=object_path,
        upsert=options.upsert,
    )
    body = client.transport.upload("POST", url, file_path, headers)

    uploaded = parse_one(StorageObject, body)
    if uploaded.bucket_id is None:
        uploaded = uploaded.model_copy(update={"bucket_id": bucket})
    return uploaded


def move(
    client: StorageClient, bucket: str, source: str, destination: str
) -> OperationResult:
    """Rename an object inside a bucket."""
    url = client.retrieve_storage_url(endpoints.file_move())
    headers = client.apply_client_headers()

    client.transport.post(url, _relocation_body(bucket, source, destination), headers)
    logger.info("Object moved", bucket=bucket, source=source, destination=destination)
    return OperationResult.MOVED


def copy(
    client: StorageClient, bucket: str, source: str, destination: str
) -> OperationResult:
    """Duplicate an object inside a bucket, leaving the source untouched."""
    url = client.retrieve_storage_url(endpoints.file_copy())
    headers = client.apply_client_headers()

    client.transport.post(url, _relocation_body(bucket, source, destination), headers)
    logger.info("Object copied", bucket=bucket, source=source, destination=destination)
    return OperationResult.COPIED


def _relocation_body(bucket: str, source: str, destination: str) -> dict[str, str]:
    return {"bucket_id": bucket, "source_key": source, "destination_key": destination}


def get_info(client: StorageClient, bucket: str, wildcard: str) -> StorageObject:
    """Retrieve metadata for one object; ``wildcard`` may span nested folders."""
    url = client.retrieve_storage_url(endpoints.file_info(bucket, wildcard))
    headers = client.apply_client_headers()

    body = client.transport.get(url, None, headers, resolve_json=True)
    return parse_one(StorageObject, body)


def list_objects(
    client: StorageClient,
    bucket: str,
    prefix: str = "",
    search: Optional[SearchOptions] = None,
) -> list[StorageObject]:
    """List objects under ``prefix``.

    Results are ordered by ``search.sort_by``, newest first by default.
    """
    search = search or SearchOptions()
    url = client.retrieve_storage_url(endpoints.file_list(bucket))
    headers = client.apply_client_headers()
    body = {"prefix": prefix, **search.to_body()}

    data = client.transport.post(url, body, headers)
    objects = parse_many(StorageObject, data)

    logger.info(
        "Objects listed", bucket=bucket, prefix=prefix, object_count=len(objects)
    )
    return objects


def remove(client: StorageClient, bucket: str, path: str) -> OperationResult:
    """Remove a single object."""
    return remove_list(client, bucket, [path])


def remove_list(
    client: StorageClient, bucket: str, paths: Iterable[str]
) -> OperationResult:
    """Remove several objects in one request.

    The server answers with the objects it actually deleted, but this only
    reports success of the request as a whole: paths that did not exist are
    not distinguished from removed ones.
    """
    paths = list(paths)
    url = client.retrieve_storage_url(endpoints.file_remove(bucket))
    headers = client.apply_client_headers()

    client.transport.delete(url, {"prefixes": paths}, headers)
    logger.info("Objects removed", bucket=bucket, path_count=len(paths))
    return OperationResult.DELETED


def create_signed_url(
    client: StorageClient, bucket: str, path: str, expires_in: int
) -> str:
    """Create a signed download URL valid for ``expires_in`` seconds.

    Returns:
        The ``signedURL`` from the response, relative to the storage API URL

    Raises:
        ParseError: If the response has no ``signedURL``
    """
    url = client.retrieve_storage_url(endpoints.file_signed_url(bucket, path))
    headers = client.apply_client_headers()

    data = client.transport.post(url, {"expiresIn": expires_in}, headers)
    return extract_field(data, "signedURL")


def create_signed_upload_url(client: StorageClient, bucket: str, path: str) -> str:
    """Create a signed URL that allows a single upload to ``path``.

    Returns:
        The ``url`` from the response, relative to the storage API URL
    """
    url = client.retrieve_storage_url(endpoints.file_upload_url(bucket, path))
    headers = client.apply_client_headers()

    data = client.transport.post(url, None, headers)
    return extract_field(data, "url")


def get(client: StorageClient, bucket: str, wildcard: str) -> bytes:
    """Download an object fully into memory."""
    url = client.retrieve_storage_url(endpoints.file_download(bucket, wildcard))
    headers = client.apply_client_headers()

    content = client.transport.get(url, None, headers, resolve_json=False)
    logger.info("Object downloaded", bucket=bucket, path=wildcard, size=len(content))
    return content


def get_lazy(client: StorageClient, bucket: str, wildcard: str) -> LazyDownload:
    """Return a single-pass stream of the object's bytes.

    No request is made until the stream is first iterated.
    """
    url = client.retrieve_storage_url(endpoints.file_download(bucket, wildcard))
    headers = client.apply_client_headers()
    transport = client.transport

    return LazyDownload(lambda: transport.stream(url, headers), url)
