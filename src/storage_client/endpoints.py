"""Relative REST paths of the storage API.

Identifiers are interpolated as given; callers pass already validated bucket
ids and object paths.
"""


def bucket_path() -> str:
    return "/bucket"


def bucket_path_with_id(bucket_id: str) -> str:
    return f"/bucket/{bucket_id}"


def bucket_path_to_empty(bucket_id: str) -> str:
    return f"{bucket_path_with_id(bucket_id)}/empty"


def file_upload_url(bucket: str, path: str) -> str:
    return f"/object/upload/sign/{bucket}/{path}"


def file_move() -> str:
    return "/object/move"


def file_copy() -> str:
    return "/object/copy"


def file_upload(bucket: str, path: str) -> str:
    return f"/object/{bucket}/{path}"


def file_info(bucket: str, wildcard: str) -> str:
    return f"/object/info/authenticated/{bucket}/{wildcard}"


def file_list(bucket: str) -> str:
    return f"/object/list/{bucket}"


def file_remove(bucket: str) -> str:
    return f"/object/{bucket}"


def file_signed_url(bucket: str, path: str) -> str:
    return f"/object/sign/{bucket}/{path}"


def file_download(bucket: str, wildcard: str) -> str:
    return f"/object/authenticated/{bucket}/{wildcard}"
