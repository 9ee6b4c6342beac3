"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The session token travels in the Authorization header as the raw JWT:

    Authorization: eyJhbGciOi...

A "Bearer " prefix is tolerated and stripped, so standard HTTP clients work
too.

get_current_user_id() is the gate for protected routes:
  - no token              -> Unauthenticated (401)
  - token fails to verify -> Forbidden (403)
  - otherwise             -> the embedded user id, also stored on
                             request.state.user_id

The gate trusts the signed claim and does not look the user up; accounts are
never deleted, so a valid signature implies an existing user.

Layer rule: no imports from api/ or ads/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.service import AuthService
from auth.tokens import TokenIssuer
from core.errors import Forbidden, Unauthenticated


def get_token(request: Request) -> str | None:
    """Return the session token from the Authorization header, or None."""
    header = request.headers.get("Authorization", "").strip()
    if header[:7].lower() == "bearer ":
        header = header[7:].strip()
    return header or None


def get_current_user_id(request: Request) -> int:
    """Require a valid session token. Raises 401 if absent, 403 if invalid.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user_id: int = Depends(get_current_user_id)): ...
    """
    token = get_token(request)
    if token is None:
        raise Unauthenticated()
    tokens: TokenIssuer = request.app.state.token_issuer
    payload = tokens.decode(token)
    if payload is None:
        raise Forbidden()
    request.state.user_id = payload["user_id"]
    return payload["user_id"]


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service
