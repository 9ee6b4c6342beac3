"""
tests/conftest.py -- Shared test fixtures for the classifieds API.

This module provides:
  - shared_memory_url(): a per-test named shared-memory SQLite URL
  - google_signing_key / make_google_token: a local RSA key standing in for
    Google's JWKS, and a factory for ID tokens signed with it
  - user_store / ad_store / auth_service / listing_service: unit-test wiring
  - api_client: TestClient over the real app with a patched lifespan

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for api_client because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread. The named URI format shares one in-memory instance across
all connections in the same process.

bcrypt runs at its minimum cost (4 rounds) throughout; hashing behaviour is
identical, only slower at production cost.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

import pytest
from authlib.jose import JsonWebKey, JsonWebToken
from fastapi.testclient import TestClient

from ads.service import ListingService
from ads.store import AdStore
from api.main import app
from auth.google import GoogleVerifier
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer

TEST_SECRET = "test-secret-key-with-at-least-32-characters"
GOOGLE_AUDIENCE = "test-client-id.apps.googleusercontent.com"
GOOGLE_KID = "test-signing-key"


def shared_memory_url(prefix: str) -> str:
    """Return a unique named shared-memory SQLite URL."""
    return f"sqlite:///file:{prefix}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


# ---------------------------------------------------------------------------
# Google ID tokens
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def google_signing_key():
    """RSA private key playing the role of Google's current signing key."""
    return JsonWebKey.generate_key("RSA", 2048, is_private=True)


@pytest.fixture(scope="session")
def google_jwks(google_signing_key) -> dict:
    """The public half of google_signing_key, shaped like Google's certs response."""
    public = google_signing_key.as_dict(is_private=False)
    public["kid"] = GOOGLE_KID
    return {"keys": [public]}


@pytest.fixture(scope="session")
def google_verifier(google_jwks) -> GoogleVerifier:
    """GoogleVerifier that trusts google_jwks instead of fetching Google's certs."""
    key_set = JsonWebKey.import_key_set(google_jwks)
    return GoogleVerifier(GOOGLE_AUDIENCE, key_loader=lambda: key_set)


@pytest.fixture(scope="session")
def make_google_token(google_signing_key) -> Callable[..., str]:
    """Factory for signed ID tokens. Every claim can be overridden per test.

    Passing email=None omits the email claim entirely.
    """
    encoder = JsonWebToken(["RS256"])

    def _make(
        email: str | None = "google.user@example.com",
        *,
        aud: str = GOOGLE_AUDIENCE,
        iss: str = "https://accounts.google.com",
        email_verified=True,
        expires_in: int = 3600,
        key=None,
    ) -> str:
        now = int(time.time())
        claims = {
            "iss": iss,
            "aud": aud,
            "sub": "110169484474386276334",
            "email_verified": email_verified,
            "iat": now,
            "exp": now + expires_in,
        }
        if email is not None:
            claims["email"] = email
        token = encoder.encode({"alg": "RS256", "kid": GOOGLE_KID}, claims, key or google_signing_key)
        return token.decode("ascii")

    return _make


# ---------------------------------------------------------------------------
# Unit-test wiring
# ---------------------------------------------------------------------------


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET, expire_seconds=3600)


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def ad_store() -> Generator[AdStore, None, None]:
    store = AdStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def auth_service(user_store, hasher, token_issuer, google_verifier) -> AuthService:
    return AuthService(user_store, hasher, token_issuer, google_verifier)


@pytest.fixture
def listing_service(ad_store) -> ListingService:
    return ListingService(ad_store)


# ---------------------------------------------------------------------------
# Integration client
# ---------------------------------------------------------------------------


def _patch_lifespan(auth_service: AuthService, listing_service: ListingService, ad_store: AdStore):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-built test services into app.state so TestClient routes see
    isolated in-memory stores and the local Google key set instead of
    Settings-driven production wiring.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = auth_service.users
        app.state.ad_store = ad_store
        app.state.token_issuer = auth_service.tokens
        app.state.auth_service = auth_service
        app.state.listing_service = listing_service
        yield

    return test_lifespan


@pytest.fixture
def api_client(google_verifier) -> Generator[tuple[TestClient, TokenIssuer], None, None]:
    """Yield (client, token_issuer) over the real app with fresh stores per test.

    The token issuer is the one the app verifies with, so tests can decode
    returned tokens or mint their own.
    """
    db_url = shared_memory_url("api")
    user_store = UserStore(db_url)
    ad_store = AdStore(db_url)
    tokens = TokenIssuer(TEST_SECRET, expire_seconds=3600)
    auth_service = AuthService(user_store, PasswordHasher(rounds=4), tokens, google_verifier)
    listing_service = ListingService(ad_store)

    original_lifespan = app.router.lifespan_context
    app.router.lifespan_context = _patch_lifespan(auth_service, listing_service, ad_store)
    try:
        with TestClient(app, raise_server_exceptions=True) as client:
            yield client, tokens
    finally:
        app.router.lifespan_context = original_lifespan
        ad_store.close()
        user_store.close()
