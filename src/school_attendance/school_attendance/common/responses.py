from __future__ import annotations

from flask import jsonify

from ..core.exceptions import DomainError, InferenceServiceError, NotFoundError, ValidationError


def ok(message: str = "", http_status: int = 200, **payload):
    return jsonify({"success": True, "message": message, **payload}), http_status


def fail(message: str, http_status: int, **payload):
    return jsonify({"success": False, "message": message, **payload}), http_status


def domain_error(exc: DomainError):
    """Map a domain exception onto a JSON error response."""

    if isinstance(exc, InferenceServiceError):
        return fail("Attendance validation is temporarily unavailable, please try again.", 503, retryable=True)
    if isinstance(exc, NotFoundError):
        return fail(str(exc), 404)
    if isinstance(exc, ValidationError):
        return fail(str(exc), 400)
    return fail(str(exc), 422)
