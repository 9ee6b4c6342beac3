"""
auth/google.py -- Google ID token verification (authlib JOSE).

POST /auth/google receives an ID token that a browser obtained from Google
Sign-In. The server never sees a client secret or an authorization code; it
only has to prove the token is genuine and addressed to this application:

  1. Signature -- RS256 against Google's published JWKS. Only RS256 is
     accepted, so an attacker cannot downgrade to HS256 using a public key
     as the HMAC secret.
  2. iss       -- accounts.google.com or https://accounts.google.com.
  3. aud       -- must equal the configured GOOGLE_CLIENT_ID.
  4. exp       -- must be in the future (authlib JWTClaims.validate()).
  5. email     -- present, with email_verified true. An unverified email could
                  be a victim's address added by an attacker.

Every failure of the above raises InvalidToken. A failure to fetch the JWKS is
an infrastructure problem, not a bad token: it is logged and re-raised so the
caller sees a 500 rather than a misleading 403.

Layer rule: no imports from api/ or ads/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import requests
from authlib.jose import JsonWebKey, JsonWebToken, KeySet
from authlib.jose.errors import JoseError

from core.config import GOOGLE_CERTS_URL
from core.errors import InvalidToken

logger = logging.getLogger("classifieds.auth.google")

GOOGLE_ISSUERS = ["accounts.google.com", "https://accounts.google.com"]

_jwt = JsonWebToken(["RS256"])

# Module-level session shared across verifier calls for connection pooling.
# max_redirects=3 -- the certs endpoint is a known public URL.
_session = requests.Session()
_session.max_redirects = 3


def fetch_google_keys(certs_url: str = GOOGLE_CERTS_URL) -> KeySet:
    """Download Google's current signing keys as an authlib KeySet."""
    try:
        resp = _session.get(certs_url, timeout=10)
        resp.raise_for_status()
        return JsonWebKey.import_key_set(resp.json())
    except requests.RequestException as e:
        logger.warning("Google JWKS fetch failed: %s", e)
        raise


class GoogleVerifier:
    """Validates Google ID tokens against one expected audience.

    key_loader defaults to fetching the live JWKS on every call; tests pass a
    loader returning a locally generated key set.
    """

    def __init__(
        self,
        audience: str,
        certs_url: str = GOOGLE_CERTS_URL,
        key_loader: Callable[[], KeySet] | None = None,
    ) -> None:
        self.audience = audience
        self._key_loader = key_loader or (lambda: fetch_google_keys(certs_url))

    def verify(self, identity_token: str) -> dict:
        """Return the verified claims of identity_token, or raise InvalidToken."""
        keys = self._key_loader()
        try:
            claims = _jwt.decode(
                identity_token,
                keys,
                claims_options={
                    "iss": {"essential": True, "values": GOOGLE_ISSUERS},
                    "aud": {"essential": True, "value": self.audience},
                    "exp": {"essential": True},
                    "email": {"essential": True},
                },
            )
            claims.validate()
        except (JoseError, ValueError) as e:
            # ValueError covers undecodable segments and an unknown key id.
            logger.info("Google ID token rejected: %s", e)
            raise InvalidToken() from e

        if claims.get("email_verified") not in (True, "true"):
            logger.info("Google ID token rejected: email not verified")
            raise InvalidToken()
        return dict(claims)

    def verified_email(self, identity_token: str) -> str:
        """Shortcut for the one claim AuthService needs."""
        return self.verify(identity_token)["email"]
