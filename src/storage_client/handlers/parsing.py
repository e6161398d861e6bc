"""Typed parsing of response bodies."""

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from storage_client.core.exceptions import ParseError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_one(model: type[ModelT], data: Any) -> ModelT:
    """Validate a single JSON object into ``model``.

    Raises:
        ParseError: If ``data`` does not match the model
    """
    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object for {model.__name__}, got {type(data).__name__}"
        )
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ParseError(f"Unexpected {model.__name__} payload: {e}") from e


def parse_many(model: type[ModelT], data: Any) -> list[ModelT]:
    """Validate a JSON array of objects into a list of ``model``."""
    if not isinstance(data, list):
        raise ParseError(
            f"Expected a JSON array of {model.__name__}, got {type(data).__name__}"
        )
    return [parse_one(model, item) for item in data]


def extract_field(data: Any, field: str) -> Any:
    """Return ``data[field]``, raising ParseError when it is missing or empty."""
    if not isinstance(data, dict) or not data.get(field):
        raise ParseError(f"Response is missing the '{field}' field")
    return data[field]
