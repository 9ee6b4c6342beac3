"""
auth/passwords.py -- bcrypt password hashing.

Using bcrypt directly rather than passlib[bcrypt] because passlib's internal
wrap-bug detection creates a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error.

The cost factor is injected (Settings.bcrypt_rounds) so tests can run at the
minimum cost of 4 while production uses 10 or more.
"""

from __future__ import annotations

import bcrypt


class PasswordHasher:
    """Salted one-way hash and verify for low-entropy secrets."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._dummy_hash = self.hash("classifieds_timing_dummy")

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of the given plaintext password.

        Passwords longer than 72 bytes are truncated by bcrypt (a known
        bcrypt limitation), so two such passwords sharing a 72-byte prefix
        hash identically.
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plain.encode("utf-8")[:72], salt).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if the plaintext password matches the bcrypt hash.

        Anything that is not a well-formed bcrypt hash (including the OAuth
        sentinel) never verifies.
        """
        try:
            return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
        except ValueError:
            return False

    @property
    def dummy_hash(self) -> str:
        """A throwaway hash at the same cost, for timing equalization.

        Computed up front so even the first login for an unknown email costs
        one bcrypt verify, the same as a wrong password.
        """
        return self._dummy_hash
