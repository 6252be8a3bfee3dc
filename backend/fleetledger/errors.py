# Overview: Application exception taxonomy and its JSON rendering.

from __future__ import annotations

from flask import jsonify


class AppError(Exception):
    """Base class for errors that map onto a 4xx response."""
    status_code = 400
    label = "Bad request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.label, "message": self.message}


class ValidationError(AppError, ValueError):
    """400-level input problem. Carries the first failing field."""
    label = "Validation failed"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["field"] = self.field
        return body


class ConstraintViolation(AppError, ValueError):
    """Unique constraint conflict (duplicate username)."""
    label = "Constraint violation"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["field"] = self.field
        return body


class NotFound(AppError):
    status_code = 404
    label = "Not found"


class Forbidden(AppError):
    status_code = 403
    label = "Forbidden"


class Unauthenticated(AppError):
    status_code = 401
    label = "Authentication required"


def error_response(exc: AppError):
    return jsonify(exc.to_dict()), exc.status_code
