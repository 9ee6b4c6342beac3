"""
api/routes/auth.py -- Account endpoints.

Routes:
  POST /auth/signup  -- create a password account; 201, no token
  POST /auth/login   -- password login; returns a session token
  POST /auth/google  -- exchange a Google ID token for a session token

All three are public. Failures are raised as core.errors exceptions and
rendered by the handlers in api/main.py:
  signup: 400 conflict
  login:  400 invalid_credentials (same error for unknown email and wrong password)
  google: 403 invalid_token

Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from api.models import CredentialsRequest, GoogleLoginRequest, MessageResponse, TokenResponse
from auth.dependencies import get_auth_service
from auth.service import AuthService

router = APIRouter()


@router.post("/auth/signup", response_model=MessageResponse, status_code=201)
def signup(body: CredentialsRequest, service: AuthService = Depends(get_auth_service)) -> MessageResponse:
    """Register an email/password account. Log in separately to get a token."""
    service.signup(body.email, body.password)
    return MessageResponse(message="User created")


@router.post("/auth/login", response_model=TokenResponse)
def login(
    body: CredentialsRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Authenticate with email and password; return a session token."""
    token = service.login(body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return TokenResponse(token=token)


@router.post("/auth/google", response_model=TokenResponse)
def google_login(
    body: GoogleLoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Verify a Google ID token; create the account on first sign-in; return a session token."""
    token = service.login_with_google(body.token)
    response.headers["Cache-Control"] = "no-store"
    return TokenResponse(token=token)
