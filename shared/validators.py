"""
Input validators: framework-agnostic, pure functions.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_email_adapter = TypeAdapter(EmailStr)


def is_blank(value: Any) -> bool:
    """Return True if *value* is None or a string holding only whitespace."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def is_utf8(value: str) -> bool:
    """Return False for strings that cannot be encoded (lone surrogates from JSON)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_email(email: str) -> bool:
    """Return True if *email* is a syntactically valid address (no DNS lookup)."""
    try:
        _email_adapter.validate_python(email)
    except PydanticValidationError:
        return False
    return True


def validate_object_id(value: Any) -> bool:
    """Return True if *value* is a well-formed BSON ObjectId (or its hex string)."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)


def validate_password_length(password: str, min_length: int = 8, max_length: int = 20) -> bool:
    """Return True if the stripped *password* length is within [min_length, max_length]."""
    return min_length <= len(password.strip()) <= max_length
