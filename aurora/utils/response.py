"""API response helpers."""

from typing import Any

from flask import jsonify


def success_response(
    data: Any = None, message: str | None = None, status_code: int = 200
):
    """Create a success response."""
    response = {"success": True}

    if data is not None:
        response["data"] = data

    if message is not None:
        response["message"] = message

    return jsonify(response), status_code


def error_response(
    code: str, message: str, details: dict | None = None, status_code: int = 400
):
    """Create an error response."""
    response = {"success": False, "error": {"code": code, "message": message}}

    if details is not None:
        response["error"]["details"] = details

    return jsonify(response), status_code


def unauthorized(message: str = "Unauthorized"):
    """401 Unauthorized response."""
    return error_response("UNAUTHORIZED", message, status_code=401)
