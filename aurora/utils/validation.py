"""Request payload parsing helpers.

Each helper raises :class:`aurora.errors.ValidationError` with a
``{field: message}`` details mapping so routes can stay linear.
"""

from datetime import datetime, timezone
from typing import Any, Iterable

from flask import request

from aurora.errors import ValidationError


def require_json() -> dict:
    """Return the request JSON body or fail if it is missing."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(details={"body": "Request body is required"})
    return data


def require_text(data: dict, field: str, max_length: int | None = None) -> str:
    """Return a stripped, non-empty string field."""
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(details={field: f"{field} is required"})
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            details={field: f"{field} must be at most {max_length} characters"}
        )
    return value


def optional_text(data: dict, field: str) -> str | None:
    """Return a stripped string field, or None when absent, null or blank."""
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(details={field: f"{field} must be a string"})
    return value.strip() or None


def optional_choice(
    data: dict, field: str, choices: Iterable[str], default: Any = None
) -> Any:
    """Return ``data[field]`` if present and one of ``choices``."""
    if data.get(field) is None:
        return default
    allowed = list(choices)
    value = data[field]
    if value not in allowed:
        raise ValidationError(
            details={field: f"{field} must be one of: {', '.join(allowed)}"}
        )
    return value


def parse_datetime(value: Any, field: str) -> datetime | None:
    """Parse an ISO-8601 string into a naive UTC datetime."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(details={field: f"{field} must be an ISO-8601 date"})
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            details={field: f"{field} must be an ISO-8601 date"}
        ) from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
