"""Validation of identities and paging input taken from requests."""

import re
from typing import Any, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from symbol_vault.constants import MAX_IDENTITY, MIN_IDENTITY
from symbol_vault.exceptions import InvalidRequest

ModelT = TypeVar("ModelT", bound=BaseModel)

# ASCII digits only, at most as many as MAX_IDENTITY has
DIGITS_RE = re.compile(rf"[0-9]{{1,{len(str(MAX_IDENTITY))}}}")


def parse_identity(value: Any, name: str = "id") -> int:
    """
    Parse a post/user identity and check it fits a positive 32-bit integer.

    Args:
        value: Raw value from the path or query string
        name: Field name used in the error message

    Returns:
        The identity as an int

    Raises:
        InvalidRequest: If the value is not an integer in [1, 2147483647]
    """
    if isinstance(value, bool):
        raise InvalidRequest(f"{name} must be a positive integer")
    if isinstance(value, int):
        identity = value
    else:
        text = str(value).strip()
        if not DIGITS_RE.fullmatch(text):
            raise InvalidRequest(f"{name} must be a positive integer")
        identity = int(text)

    if not MIN_IDENTITY <= identity <= MAX_IDENTITY:
        raise InvalidRequest(
            f"{name} must be between {MIN_IDENTITY} and {MAX_IDENTITY}"
        )
    return identity


def parse_offset(value: Any) -> int:
    """Parse a catalog page offset: a non-negative integer."""
    if isinstance(value, bool):
        raise InvalidRequest("offset must be a non-negative integer")
    text = str(value).strip()
    if not DIGITS_RE.fullmatch(text):
        raise InvalidRequest("offset must be a non-negative integer")
    offset = int(text)
    if offset > MAX_IDENTITY:
        raise InvalidRequest(f"offset must be at most {MAX_IDENTITY}")
    return offset


def build_model(model: Type[ModelT], **data: Any) -> ModelT:
    """Validate request data into a schema, reporting problems as InvalidRequest."""
    try:
        return model(**data)
    except ValidationError as e:
        raise InvalidRequest(describe_validation_errors(e.errors()))


def describe_validation_errors(errors: Sequence[dict]) -> str:
    """One-line summary of pydantic/FastAPI validation errors."""
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request"
