"""Entity and option schemas for storage-client."""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


class OperationResult(str, Enum):
    """Fixed success markers for calls whose response carries no entity."""

    EMPTIED = "emptied"
    DELETED = "deleted"
    MOVED = "moved"
    COPIED = "copied"


class Bucket(BaseModel):
    """A named container for objects."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="Bucket identifier")
    name: str = Field(..., description="Display name, defaults to the id")
    owner: Optional[str] = Field(None, description="Owner id")
    public: bool = Field(False, description="Whether the bucket is public")
    file_size_limit: Optional[int] = Field(
        None, description="Maximum object size in bytes"
    )
    allowed_mime_types: Optional[list[str]] = Field(
        None, description="Allowed MIME types, None allows every type"
    )
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("id"):
            data = {**data, "name": data["id"]}
        return data


class StorageObject(BaseModel):
    """An object stored in a bucket, as described by the server.

    Listing and info responses name the object with ``name`` and nest its
    size and content type under ``metadata``; upload responses only carry
    ``Key`` (``"<bucket>/<path>"``) and ``Id``. Both shapes are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    path: str = Field(..., validation_alias=AliasChoices("path", "name"))
    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "Id"))
    bucket_id: Optional[str] = None
    owner: Optional[str] = None
    version: Optional[str] = None
    size: Optional[int] = None
    mime_type: Optional[str] = None
    cache_control: Optional[str] = None
    etag: Optional[str] = None
    last_modified: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_accessed_at: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)

        if "Key" in data and "name" not in data and "path" not in data:
            key = str(data["Key"])
            bucket, _, path = key.partition("/")
            data["path"] = path or bucket
            if path:
                data.setdefault("bucket_id", bucket)

        meta = data.get("metadata") or {}
        data.setdefault("size", meta.get("size"))
        data.setdefault("mime_type", data.get("content_type") or meta.get("mimetype"))
        data.setdefault("cache_control", meta.get("cacheControl"))
        data.setdefault("etag", meta.get("eTag"))
        data.setdefault("last_modified", meta.get("lastModified"))
        return data


class ObjectOptions(BaseModel):
    """Headers applied to an upload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    cache_control: int = Field(3600, ge=0, description="max-age in seconds")
    content_type: str = Field("text/plain;charset=UTF-8")
    upsert: bool = Field(False, description="Overwrite an existing object")

    def to_headers(self) -> dict[str, str]:
        return {
            "cache-control": f"max-age={self.cache_control}",
            "content-type": self.content_type,
            "x-upsert": "true" if self.upsert else "false",
        }


class SortBy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    column: str = "created_at"
    order: Literal["asc", "desc"] = "desc"


class SearchOptions(BaseModel):
    """Options for listing objects under a prefix."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    limit: Optional[int] = Field(None, ge=0)
    offset: Optional[int] = Field(None, ge=0)
    sort_by: SortBy = Field(default_factory=SortBy, alias="sortBy")

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
