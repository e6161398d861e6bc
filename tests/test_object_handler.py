"""Tests for object requests."""

import json

import pytest

from storage_client import (
    ClientConfig,
    FileNotFound,
    ObjectOptions,
    OperationResult,
    ParseError,
    SearchOptions,
    StorageClient,
    StreamConsumedError,
)
from storage_client.handlers import object_handler

STORAGE_URL = "https://project.supabase.co/storage/v1"


class RecordingTransport:
    """Transport double that records calls and returns canned bodies."""

    def __init__(self, response=None):
        self.response = response
        self.calls = []

    def _record(self, verb, url, body, headers):
        self.calls.append({"verb": verb, "url": url, "body": body, "headers": headers})
        return self.response

    def get(self, url, body=None, headers=None, resolve_json=True):
        return self._record("GET", url, body, headers)

    def post(self, url, body=None, headers=None):
        return self._record("POST", url, body, headers)

    def put(self, url, body=None, headers=None):
        return self._record("PUT", url, body, headers)

    def delete(self, url, body=None, headers=None):
        return self._record("DELETE", url, body, headers)

    def upload(self, method, url, file_path, headers=None):
        return self._record(f"UPLOAD {method}", url, file_path, headers)

    def stream(self, url, headers=None):
        self._record("STREAM", url, None, headers)
        yield b"chunk"


@pytest.fixture
def recording_client():
    config = ClientConfig(base_url="https://project.supabase.co", api_key="anon-key")
    transport = RecordingTransport(response={"message": "ok"})
    return StorageClient(config, transport), transport


class TestUpload:
    """Test object uploads."""

    def test_default_headers(self, client, httpx_mock, sample_file):
        """Test the default options produce the documented headers."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/avatars/a.png",
            json={"Key": "avatars/a.png", "Id": "obj-1"},
        )

        obj = object_handler.create_file(client, "avatars", "a.png", str(sample_file))

        request = httpx_mock.get_request()
        assert request.headers["cache-control"] == "max-age=3600"
        assert request.headers["content-type"] == "text/plain;charset=UTF-8"
        assert request.headers["x-upsert"] == "false"
        assert obj.path == "a.png"
        assert obj.bucket_id == "avatars"

    def test_custom_options(self, client, httpx_mock, sample_file):
        """Test custom options override the headers."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/avatars/users/a.png",
            json={"Key": "avatars/users/a.png"},
        )
        options = ObjectOptions(cache_control=60, content_type="image/png", upsert=True)

        object_handler.create_file(
            client, "avatars", "users/a.png", str(sample_file), options
        )

        request = httpx_mock.get_request()
        assert request.headers["cache-control"] == "max-age=60"
        assert request.headers["content-type"] == "image/png"
        assert request.headers["x-upsert"] == "true"

    def test_file_handed_to_transport(self, recording_client, sample_file):
        """Test the handler passes the file path, not its contents."""
        client, transport = recording_client
        transport.response = {"Key": "avatars/a.png"}

        object_handler.create_file(client, "avatars", "a.png", str(sample_file))

        (call,) = transport.calls
        assert call["verb"] == "UPLOAD POST"
        assert call["body"] == str(sample_file)

    def test_missing_file(self, client, httpx_mock, tmp_path):
        """Test a missing source file fails without a request."""
        with pytest.raises(FileNotFound):
            object_handler.create_file(
                client, "avatars", "a.png", str(tmp_path / "missing.png")
            )

        assert httpx_mock.get_requests() == []

    def test_upload_then_info_round_trip(
        self, client, httpx_mock, sample_file, object_payload
    ):
        """Test info fetched after an upload reports the uploaded path."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/avatars/a.png",
            json={"Key": "avatars/a.png"},
        )
        httpx_mock.add_response(
            method="GET",
            url=f"{STORAGE_URL}/object/info/authenticated/avatars/a.png",
            json=object_payload,
        )

        uploaded = object_handler.create_file(
            client, "avatars", "a.png", str(sample_file)
        )
        info = object_handler.get_info(client, "avatars", uploaded.path)

        assert info.path == uploaded.path == "a.png"


class TestRelocation:
    """Test moving and copying objects."""

    @pytest.mark.parametrize(
        ("operation", "endpoint", "marker"),
        [
            (object_handler.move, "move", OperationResult.MOVED),
            (object_handler.copy, "copy", OperationResult.COPIED),
        ],
    )
    def test_relocation(self, client, httpx_mock, operation, endpoint, marker):
        """Test the relocation body and the returned marker."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/{endpoint}",
            json={"message": "Successfully moved"},
        )

        result = operation(client, "avatars", "a.png", "archive/a.png")

        assert result is marker
        assert json.loads(httpx_mock.get_request().read()) == {
            "bucket_id": "avatars",
            "source_key": "a.png",
            "destination_key": "archive/a.png",
        }


class TestListing:
    """Test object info and listing."""

    def test_get_info_nested_path(self, client, httpx_mock, object_payload):
        """Test info for a nested path."""
        payload = {**object_payload, "name": "users/1/a.png"}
        httpx_mock.add_response(
            method="GET",
            url=f"{STORAGE_URL}/object/info/authenticated/avatars/users/1/a.png",
            json=payload,
        )

        obj = object_handler.get_info(client, "avatars", "users/1/a.png")

        assert obj.path == "users/1/a.png"
        assert obj.size == 1024

    def test_list_default_search(self, client, httpx_mock, object_payload):
        """Test the prefix is merged with the default sort and no paging."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/list/avatars",
            json=[object_payload],
        )

        objects = object_handler.list_objects(client, "avatars", "avatars/")

        assert [o.path for o in objects] == ["a.png"]
        assert json.loads(httpx_mock.get_request().read()) == {
            "prefix": "avatars/",
            "sortBy": {"column": "created_at", "order": "desc"},
        }

    def test_list_with_options(self, client, httpx_mock):
        """Test limit and offset are passed through."""
        httpx_mock.add_response(
            method="POST", url=f"{STORAGE_URL}/object/list/avatars", json=[]
        )

        object_handler.list_objects(
            client, "avatars", "", SearchOptions(limit=5, offset=10)
        )

        sent = json.loads(httpx_mock.get_request().read())
        assert sent["limit"] == 5
        assert sent["offset"] == 10
        assert sent["prefix"] == ""

    def test_list_unexpected_shape(self, client, httpx_mock):
        """Test a non-array listing is a parse error."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/list/avatars",
            json={"objects": []},
        )

        with pytest.raises(ParseError):
            object_handler.list_objects(client, "avatars")


class TestRemoval:
    """Test removing objects."""

    def test_remove_same_as_single_element_list(self, recording_client):
        """Test removing one path sends the same request as a one-element list."""
        client, transport = recording_client

        single = object_handler.remove(client, "avatars", "a.png")
        batch = object_handler.remove_list(client, "avatars", ["a.png"])

        assert single is batch is OperationResult.DELETED
        assert transport.calls[0] == transport.calls[1]
        assert transport.calls[0]["verb"] == "DELETE"
        assert transport.calls[0]["url"] == f"{STORAGE_URL}/object/avatars"
        assert transport.calls[0]["body"] == {"prefixes": ["a.png"]}

    def test_remove_list_reports_no_per_path_detail(self, client, httpx_mock, object_payload):
        """Test partial removal still returns the single marker.

        The server lists only the objects it deleted; the result does not
        reveal that "missing.png" did not exist.
        """
        httpx_mock.add_response(
            method="DELETE",
            url=f"{STORAGE_URL}/object/avatars",
            json=[object_payload],
        )

        result = object_handler.remove_list(
            client, "avatars", ["a.png", "missing.png"]
        )

        assert result is OperationResult.DELETED
        assert json.loads(httpx_mock.get_request().read()) == {
            "prefixes": ["a.png", "missing.png"]
        }


class TestSignedUrls:
    """Test signed URL creation."""

    def test_signed_url(self, client, httpx_mock):
        """Test the signedURL field is extracted."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/sign/avatars/a.png",
            json={"signedURL": "/object/sign/avatars/a.png?token=abc"},
        )

        url = object_handler.create_signed_url(client, "avatars", "a.png", 3600)

        assert url == "/object/sign/avatars/a.png?token=abc"
        assert json.loads(httpx_mock.get_request().read()) == {"expiresIn": 3600}

    def test_signed_url_missing_field(self, client, httpx_mock):
        """Test a response without signedURL is a parse error."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/sign/avatars/a.png",
            json={"url": "/elsewhere"},
        )

        with pytest.raises(ParseError, match="signedURL"):
            object_handler.create_signed_url(client, "avatars", "a.png", 3600)

    def test_signed_upload_url(self, client, httpx_mock):
        """Test a signed upload URL is extracted."""
        httpx_mock.add_response(
            method="POST",
            url=f"{STORAGE_URL}/object/upload/sign/avatars/a.png",
            json={"url": "/object/upload/sign/avatars/a.png?token=xyz"},
        )

        url = object_handler.create_signed_upload_url(client, "avatars", "a.png")

        assert url.endswith("token=xyz")


class TestDownload:
    """Test buffered and lazy downloads."""

    def test_get(self, client, httpx_mock):
        """Test a buffered download returns the raw bytes."""
        httpx_mock.add_response(
            method="GET",
            url=f"{STORAGE_URL}/object/authenticated/avatars/a.png",
            content=b"\x89PNG data",
            headers={"content-type": "image/png"},
        )

        assert object_handler.get(client, "avatars", "a.png") == b"\x89PNG data"

    def test_get_lazy_defers_request(self, client, httpx_mock):
        """Test no request is made until the stream is consumed."""
        download = object_handler.get_lazy(client, "avatars", "users/a.png")
        assert httpx_mock.get_requests() == []

        httpx_mock.add_response(
            method="GET",
            url=f"{STORAGE_URL}/object/authenticated/avatars/users/a.png",
            content=b"abc" * 10,
        )

        assert b"".join(download) == b"abc" * 10
        assert len(httpx_mock.get_requests()) == 1

    def test_get_lazy_single_pass(self, recording_client):
        """Test a second consumption fails instead of returning stale bytes."""
        client, transport = recording_client
        download = object_handler.get_lazy(client, "avatars", "a.png")

        assert list(download) == [b"chunk"]
        with pytest.raises(StreamConsumedError):
            list(download)
        assert len(transport.calls) == 1
