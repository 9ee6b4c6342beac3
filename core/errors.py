"""
core/errors.py -- Domain error taxonomy.

Every user-visible failure is one of these exceptions. Each carries the HTTP
status and machine-readable code it maps to, so services stay free of FastAPI
imports and api/main.py renders them with a single exception handler.

None of these are retried; they are terminal for the request.
"""

from __future__ import annotations


class ClassifiedsError(Exception):
    """Base class for errors that surface to API clients as-is."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Conflict(ClassifiedsError):
    """Signup for an email that already has an account."""

    status_code = 400
    code = "conflict"
    message = "User already exists."


class InvalidCredentials(ClassifiedsError):
    """Password login failed.

    Deliberately undifferentiated: unknown email and wrong password produce
    the same error so the response does not reveal which accounts exist.
    """

    status_code = 400
    code = "invalid_credentials"
    message = "Invalid credentials."


class InvalidToken(ClassifiedsError):
    """A third-party identity token was rejected."""

    status_code = 403
    code = "invalid_token"
    message = "Invalid Google token."


class Unauthenticated(ClassifiedsError):
    """No session token on a protected route."""

    status_code = 401
    code = "unauthorized"
    message = "Authentication required."


class Forbidden(ClassifiedsError):
    """Session token present but invalid, expired, or tampered."""

    status_code = 403
    code = "forbidden"
    message = "Invalid or expired session token."
