"""
API request and response models for the classifieds REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
ads/models.py, which own the internal domain representation. Route handlers
map between the two.

Listing fields are camelCase on the wire (userId, createdAt) to match the
JSON shape existing clients consume; Python attributes stay snake_case.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ads.models import Ad

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /auth/signup and POST /auth/login."""

    email: str
    password: str


class GoogleLoginRequest(BaseModel):
    """Request body for POST /auth/google -- token is a Google ID token."""

    token: str


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class TokenResponse(BaseModel):
    """A freshly issued session token. Send it back as the Authorization header."""

    model_config = ConfigDict(frozen=True)

    token: str


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


class AdCreate(BaseModel):
    """Request body for POST /ads.

    No content rules: any string, empty, or missing value is accepted. Unknown
    keys (including a client-supplied userId) are ignored.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None


class AdResponse(BaseModel):
    """A stored listing as returned by POST /ads, GET /ads, and GET /me/ads."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    title: Optional[str]
    description: Optional[str]
    location: Optional[str]
    user_id: int
    created_at: str

    @classmethod
    def from_ad(cls, ad: Ad) -> "AdResponse":
        """Build an AdResponse from a domain Ad -- the mapping lives beside the output model."""
        return cls(
            id=ad.id,
            title=ad.title,
            description=ad.description,
            location=ad.location,
            user_id=ad.user_id,
            created_at=ad.created_at,
        )


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
