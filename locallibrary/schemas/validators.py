"""Reusable field sanitizers/validators for submitted catalog forms.

Each helper returns a ``BeforeValidator`` that normalizes raw form input and
raises ``PydanticCustomError`` with a user-facing message on the first rule
the value breaks. Rules for a single field stop at the first failure.
"""
from datetime import date
from typing import Any, Optional

from markupsafe import escape
from pydantic import BeforeValidator
from pydantic_core import PydanticCustomError


def sanitize(value: Any) -> str:
    """Trim and HTML-escape a raw form value."""
    if value is None:
        return ""
    return str(escape(str(value).strip()))


def text(
    message: str,
    *,
    min_length: int = 1,
    max_length: Optional[int] = None,
    alphanumeric: Optional[str] = None,
    too_long: Optional[str] = None,
) -> BeforeValidator:
    """Required free-text field: trimmed, length-checked, escaped."""

    def validate(value: Any) -> str:
        value = "" if value is None else str(value).strip()
        if len(value) < min_length:
            raise PydanticCustomError("required", message)
        if alphanumeric and not (value.isascii() and value.isalnum()):
            raise PydanticCustomError("alphanumeric", alphanumeric)
        escaped = str(escape(value))
        # The escaped text is what gets stored, so it must fit the column.
        if max_length is not None and len(escaped) > max_length:
            raise PydanticCustomError("too_long", too_long or message)
        return escaped

    return BeforeValidator(validate)


def optional_date(message: str) -> BeforeValidator:
    """Optional ISO-8601 calendar date; empty input means not provided."""

    def validate(value: Any) -> Optional[date]:
        if not value:
            return None
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value).strip())
        except ValueError:
            raise PydanticCustomError("date", message) from None

    return BeforeValidator(validate)


def reference(message: str) -> BeforeValidator:
    """Single required record reference submitted as an ID."""

    def validate(value: Any) -> int:
        try:
            return int(str(value).strip())
        except (TypeError, ValueError):
            raise PydanticCustomError("reference", message) from None

    return BeforeValidator(validate)


def reference_list(message: str) -> BeforeValidator:
    """Multi-valued reference; one value becomes a list, absence an empty list."""

    def validate(value: Any) -> list[int]:
        if value is None or value == "":
            return []
        if not isinstance(value, (list, tuple, set)):
            value = [value]
        try:
            return sorted({int(str(item).strip()) for item in value})
        except ValueError:
            raise PydanticCustomError("reference", message) from None

    return BeforeValidator(validate)


def choice(choices: type, message: str, default: Any) -> BeforeValidator:
    """Value from an enumeration; empty input selects ``default``."""

    def validate(value: Any) -> Any:
        if value is None or str(value).strip() == "":
            return default
        try:
            return choices(str(value).strip())
        except ValueError:
            raise PydanticCustomError("choice", message) from None

    return BeforeValidator(validate)
