"""
JSON envelope shared by every API response.

    Success:  {"success": true, "reservation": {...}, "message": "..."}
    Error:    {"success": false, "error": "...", "current_status": "..."}

Payloads travel as named top-level keys (reservation, link, availableOptions),
never nested under a generic "data" key.
"""

from flask import jsonify
from typing import Any


def api_success(message: str | None = None, status: int = 200, **payload: Any) -> tuple:
    """
    Build a success response.

    Args:
        message: Optional human-readable confirmation.
        status: HTTP status code (201 for creations).
        **payload: Top-level response keys, e.g. reservation=..., totalAvailable=...

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}
    if message:
        response['message'] = message
    response.update(payload)
    return jsonify(response), status


def api_error(error: str, status: int = 400, **details: Any) -> tuple:
    """
    Build an error response.

    Args:
        error: Error message.
        status: HTTP status code.
        **details: Extra context from the raised error (e.g. reservations=2, links=1).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}
    response.update(details)
    return jsonify(response), status
