"""Validation and coercion of bucket attribute sets.

Attributes arrive as plain mappings from callers and leave as pydantic models
ready to serialize into a request body. Any failure surfaces as
:class:`storage_client.core.exceptions.ValidationError` before a request is
issued.

``BucketUpdateAttrs`` deliberately has no ``id`` or ``name`` field: a bucket
cannot be renamed, so those keys never reach the update request body.
"""

from typing import Any, Mapping, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storage_client.core import get_logger
from storage_client.core.exceptions import ValidationError
from storage_client.schemas import Bucket

logger = get_logger(__name__)


def _normalize_mime_types(value: Optional[list[str]]) -> Optional[list[str]]:
    if value is None:
        return None
    # dict.fromkeys keeps first-seen order
    unique = list(dict.fromkeys(v.strip() for v in value if v and v.strip()))
    return unique or None


class BucketCreateAttrs(BaseModel):
    """Attributes accepted when creating a bucket."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Bucket identifier")
    name: Optional[str] = Field(None, description="Display name, defaults to id")
    public: bool = False
    file_size_limit: Optional[int] = Field(None, ge=0)
    allowed_mime_types: Optional[list[str]] = None

    @field_validator("allowed_mime_types")
    @classmethod
    def _mime_types(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return _normalize_mime_types(value)

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("id"):
            data = {**data, "name": data["id"]}
        return data

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class BucketUpdateAttrs(BaseModel):
    """Mutable subset of bucket attributes."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    public: bool = False
    file_size_limit: Optional[int] = Field(None, ge=0)
    allowed_mime_types: Optional[list[str]] = None

    @field_validator("allowed_mime_types")
    @classmethod
    def _mime_types(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return _normalize_mime_types(value)

    def to_body(self) -> dict[str, Any]:
        # None is meaningful here: it clears a limit or a MIME restriction
        return self.model_dump()


def _format_errors(exc: pydantic.ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error["loc"]) or "attrs"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def create_changeset(attrs: Mapping[str, Any]) -> BucketCreateAttrs:
    """Validate attributes for a new bucket.

    Args:
        attrs: Mapping with ``id`` (required), and optionally ``name``,
            ``public``, ``file_size_limit`` and ``allowed_mime_types``

    Returns:
        Normalized attributes; ``name`` falls back to ``id``

    Raises:
        ValidationError: If ``id`` is missing or empty, a value is out of
            range, or an unknown attribute is given
    """
    try:
        params = BucketCreateAttrs.model_validate(dict(attrs))
    except pydantic.ValidationError as e:
        error_msg = f"Invalid bucket attributes: {_format_errors(e)}"
        logger.warning(error_msg)
        raise ValidationError(error_msg) from e

    logger.debug("Bucket create attributes validated", bucket_id=params.id)
    return params


def update_changeset(bucket: Bucket, attrs: Mapping[str, Any]) -> BucketUpdateAttrs:
    """Validate an update against the current state of ``bucket``.

    Attributes not present in ``attrs`` keep the bucket's current value.
    ``id`` and ``name`` are not part of the update set and are dropped.

    Raises:
        ValidationError: If a value is out of range
    """
    ignored = sorted({"id", "name"} & set(attrs))
    if ignored:
        logger.warning(
            "Immutable bucket attributes ignored", bucket_id=bucket.id, keys=ignored
        )

    current = {
        "public": bucket.public,
        "file_size_limit": bucket.file_size_limit,
        "allowed_mime_types": bucket.allowed_mime_types,
    }
    try:
        params = BucketUpdateAttrs.model_validate({**current, **dict(attrs)})
    except pydantic.ValidationError as e:
        error_msg = f"Invalid bucket attributes: {_format_errors(e)}"
        logger.warning(error_msg, bucket_id=bucket.id)
        raise ValidationError(error_msg) from e

    return params
