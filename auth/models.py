"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors ads/models.py --
dataclasses own domain shape; stores and services do the work.

Layer rule: no imports from api/ or ads/.
"""

from __future__ import annotations

from dataclasses import dataclass

# Stored as password_hash for accounts created through Google sign-in. It is
# not a bcrypt hash, and authenticate() rejects it before any comparison.
OAUTH_PASSWORD_SENTINEL = "!google-oauth"


@dataclass
class User:
    """An account identified by email.

    password_hash holds OAUTH_PASSWORD_SENTINEL for accounts created by Google
    sign-in -- such accounts can never complete a password login.
    """

    email: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None

    @property
    def is_oauth_only(self) -> bool:
        return self.password_hash == OAUTH_PASSWORD_SENTINEL
