"""Tests for endpoint path templates."""

import pytest

from storage_client import endpoints


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        (endpoints.bucket_path(), "/bucket"),
        (endpoints.bucket_path_with_id("avatars"), "/bucket/avatars"),
        (endpoints.bucket_path_to_empty("avatars"), "/bucket/avatars/empty"),
        (endpoints.file_upload_url("avatars", "a.png"), "/object/upload/sign/avatars/a.png"),
        (endpoints.file_move(), "/object/move"),
        (endpoints.file_copy(), "/object/copy"),
        (endpoints.file_upload("avatars", "users/a.png"), "/object/avatars/users/a.png"),
        (
            endpoints.file_info("avatars", "users/1/a.png"),
            "/object/info/authenticated/avatars/users/1/a.png",
        ),
        (endpoints.file_list("avatars"), "/object/list/avatars"),
        (endpoints.file_remove("avatars"), "/object/avatars"),
        (endpoints.file_signed_url("avatars", "a.png"), "/object/sign/avatars/a.png"),
        (
            endpoints.file_download("avatars", "users/a.png"),
            "/object/authenticated/avatars/users/a.png",
        ),
    ],
)
def test_endpoint_paths(path, expected):
    """Test every endpoint template renders the documented path."""
    assert path == expected
