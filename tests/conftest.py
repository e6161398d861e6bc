"""Test configuration and fixtures for storage-client."""

import pytest

from storage_client import ClientConfig, Storage, StorageClient

BASE_URL = "https://project.supabase.co"
STORAGE_URL = f"{BASE_URL}/storage/v1"


@pytest.fixture
def config():
    """Client configuration pointing at a fake project."""
    return ClientConfig(base_url=BASE_URL, api_key="anon-key")


@pytest.fixture
def client(config):
    """Storage client using the default httpx transport."""
    with StorageClient(config) as storage_client:
        yield storage_client


@pytest.fixture
def storage(client):
    """Storage facade over the default client."""
    return Storage(client)


@pytest.fixture
def bucket_payload():
    """Bucket as returned by the API."""
    return {
        "id": "avatars",
        "name": "avatars",
        "owner": "",
        "public": False,
        "file_size_limit": None,
        "allowed_mime_types": None,
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": "2024-01-01T00:00:00.000Z",
    }


@pytest.fixture
def object_payload():
    """Object as returned by the info and list endpoints."""
    return {
        "id": "4f1b5c2e-0000-4000-8000-000000000001",
        "name": "a.png",
        "bucket_id": "avatars",
        "owner": "user-1",
        "created_at": "2024-01-02T00:00:00.000Z",
        "updated_at": "2024-01-02T00:00:00.000Z",
        "last_accessed_at": "2024-01-02T00:00:00.000Z",
        "metadata": {
            "size": 1024,
            "mimetype": "image/png",
            "cacheControl": "max-age=3600",
            "eTag": '"abc123"',
            "lastModified": "2024-01-02T00:00:00.000Z",
        },
    }


@pytest.fixture
def sample_file(tmp_path):
    """Create a local file to upload."""
    path = tmp_path / "a.png"
    path.write_bytes(b"\x89PNG" + b"0" * 2048)
    return path
