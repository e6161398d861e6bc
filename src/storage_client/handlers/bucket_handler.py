"""Bucket requests: list, retrieve, create, update, empty and delete.

These functions take already validated attributes (see
:mod:`storage_client.attributes`) and do not re-fetch after a write; the
:class:`~storage_client.storage.Storage` facade does that.

Errors from the transport are propagated unchanged.
"""

from typing import Any

from storage_client import endpoints
from storage_client.attributes import BucketCreateAttrs, BucketUpdateAttrs
from storage_client.client import StorageClient
from storage_client.core import get_logger
from storage_client.schemas import Bucket, OperationResult

from .parsing import parse_many, parse_one

logger = get_logger(__name__)


def list_buckets(client: StorageClient) -> list[Bucket]:
    """Retrieve every bucket in the project."""
    url = client.retrieve_storage_url(endpoints.bucket_path())
    headers = client.apply_client_headers()

    body = client.transport.get(url, None, headers, resolve_json=True)
    buckets = parse_many(Bucket, body)

    logger.info("Buckets listed", bucket_count=len(buckets))
    return buckets


def retrieve_info(client: StorageClient, bucket_id: str) -> Bucket:
    """Retrieve a single bucket by id."""
    url = client.retrieve_storage_url(endpoints.bucket_path_with_id(bucket_id))
    headers = client.apply_client_headers()

    body = client.transport.get(url, None, headers, resolve_json=True)
    return parse_one(Bucket, body)


def create(client: StorageClient, attrs: BucketCreateAttrs) -> Any:
    """Create a bucket; returns the raw response body."""
    url = client.retrieve_storage_url(endpoints.bucket_path())
    headers = client.apply_client_headers()

    body = client.transport.post(url, attrs.to_body(), headers)
    logger.info("Bucket created", bucket_id=attrs.id, public=attrs.public)
    return body


def update(client: StorageClient, bucket_id: str, attrs: BucketUpdateAttrs) -> Any:
    """Update the mutable attributes of a bucket; returns the raw response body."""
    url = client.retrieve_storage_url(endpoints.bucket_path_with_id(bucket_id))
    headers = client.apply_client_headers()

    body = client.transport.put(url, attrs.to_body(), headers)
    logger.info("Bucket updated", bucket_id=bucket_id)
    return body


def empty(client: StorageClient, bucket_id: str) -> OperationResult:
    """Delete every object in a bucket, keeping the bucket itself."""
    url = client.retrieve_storage_url(endpoints.bucket_path_to_empty(bucket_id))
    headers = client.apply_client_headers()

    client.transport.post(url, None, headers)
    logger.info("Bucket emptied", bucket_id=bucket_id)
    return OperationResult.EMPTIED


def delete(client: StorageClient, bucket_id: str) -> OperationResult:
    """Delete a bucket. The server removes its objects as well."""
    url = client.retrieve_storage_url(endpoints.bucket_path_with_id(bucket_id))
    headers = client.apply_client_headers()

    client.transport.delete(url, None, headers)
    logger.info("Bucket deleted", bucket_id=bucket_id)
    return OperationResult.DELETED
