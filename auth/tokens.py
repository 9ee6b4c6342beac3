"""
auth/tokens.py -- Session JWT issue and verification.

python-jose with HS256. Tokens carry the user id (as the integer user_id claim
and as the string sub claim), iat, and -- unless expiry is disabled -- exp.
Verification returns None on any failure; the token gate turns that into 403.

The signing secret and lifetime are constructor arguments, built from Settings
in the application lifespan. Nothing here reads configuration at import time.

Layer rule: no imports from api/ or ads/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

logger = logging.getLogger("classifieds.auth")

_ALGORITHM = "HS256"


class TokenIssuer:
    """Signs and validates bearer session tokens.

    Usage:
        tokens = TokenIssuer(settings.secret_key, settings.token_expire_seconds)
        token = tokens.issue(user_id=42)
        tokens.decode(token)["user_id"]  # 42
    """

    def __init__(self, secret_key: str, expire_seconds: int = 0) -> None:
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(self, user_id: int) -> str:
        """Encode a signed JWT for user_id.

        expire_seconds == 0 omits the exp claim, so the token stays valid until
        the secret changes.
        """
        now = datetime.now(timezone.utc)
        payload: dict = {
            "sub": str(user_id),
            "user_id": user_id,
            "iat": now,
        }
        if self.expire_seconds > 0:
            payload["exp"] = now + timedelta(seconds=self.expire_seconds)
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def decode(self, token: str) -> dict | None:
        """Decode and verify a JWT. Returns the payload dict or None on any failure.

        A token that verifies but lacks an integer user_id is treated the same
        as a forged one.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError:
            return None
        user_id = payload.get("user_id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            logger.warning("Rejected session token without a valid user_id claim")
            return None
        return payload
