"""Utility functions."""

from aurora.utils.auth import current_user_id, get_current_user
from aurora.utils.response import error_response, success_response, unauthorized
from aurora.utils.validation import (
    optional_choice,
    optional_text,
    parse_datetime,
    require_json,
    require_text,
)

__all__ = [
    "current_user_id",
    "get_current_user",
    "success_response",
    "error_response",
    "unauthorized",
    "require_json",
    "require_text",
    "optional_choice",
    "optional_text",
    "parse_datetime",
]
