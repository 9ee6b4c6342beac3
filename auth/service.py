"""
auth/service.py -- Signup, password login, and Google sign-in.

AuthService owns the account rules; it receives every collaborator through
its constructor (UserStore, PasswordHasher, TokenIssuer, GoogleVerifier), all
built from Settings in the application lifespan.

Security notes:
  Timing equalization: authenticate() always runs bcrypt, against a dummy hash
  when the email is unknown or belongs to a Google-only account, so response
  time does not reveal whether an account exists.

  Undifferentiated failure: unknown email and wrong password both raise the
  same InvalidCredentials.

  Google-only accounts store OAUTH_PASSWORD_SENTINEL instead of a hash.
  authenticate() checks for it explicitly rather than relying on bcrypt
  failing to parse it.

Layer rule: no imports from api/ or ads/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.google import GoogleVerifier
from auth.models import OAUTH_PASSWORD_SENTINEL, User
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.errors import Conflict, InvalidCredentials, InvalidToken

logger = logging.getLogger("classifieds.auth")


class AuthService:
    """Account operations: signup, login, login_with_google."""

    def __init__(
        self,
        users: UserStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        google: GoogleVerifier | None = None,
    ) -> None:
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.google = google

    # ------------------------------------------------------------------
    # Password accounts
    # ------------------------------------------------------------------

    def signup(self, email: str, password: str) -> int:
        """Create a password account and return its id. No token is issued.

        Raises Conflict if the email is taken, including when a concurrent
        signup wins the race between the existence check and the insert.
        """
        if self.users.get_by_email(email) is not None:
            raise Conflict()
        user = User(email=email, password_hash=self.hasher.hash(password))
        try:
            user_id = self.users.create_user(user)
        except IntegrityError as exc:
            raise Conflict() from exc
        logger.info("Account created (user_id=%d)", user_id)
        return user_id

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the User whose password matches, or None.

        Always runs bcrypt whether or not the user exists:
        - Unknown email / Google-only account: bcrypt runs against the dummy hash
        - Wrong password: bcrypt runs against the real hash
        """
        user = self.users.get_by_email(email)
        if user is None or user.is_oauth_only:
            # Equalize timing -- do NOT return early before running bcrypt
            self.hasher.verify(password, self.hasher.dummy_hash)
            return None
        if not self.hasher.verify(password, user.password_hash):
            return None
        return user

    def login(self, email: str, password: str) -> str:
        """Return a session token for valid credentials; raise InvalidCredentials otherwise."""
        user = self.authenticate(email, password)
        if user is None:
            raise InvalidCredentials()
        return self.tokens.issue(user.id)

    # ------------------------------------------------------------------
    # Google sign-in
    # ------------------------------------------------------------------

    def login_with_google(self, identity_token: str) -> str:
        """Exchange a Google ID token for a session token.

        The first sign-in for an unseen verified email creates the account;
        later sign-ins (and existing password accounts with the same email)
        reuse it.
        """
        if self.google is None:
            logger.warning("Google sign-in attempted but GOOGLE_CLIENT_ID is not configured")
            raise InvalidToken()
        email = self.google.verified_email(identity_token)
        user = self._get_or_create_oauth_user(email)
        return self.tokens.issue(user.id)

    def _get_or_create_oauth_user(self, email: str) -> User:
        user = self.users.get_by_email(email)
        if user is not None:
            return user
        try:
            user_id = self.users.create_user(User(email=email, password_hash=OAUTH_PASSWORD_SENTINEL))
        except IntegrityError:
            # A concurrent first sign-in inserted the row; use theirs.
            user = self.users.get_by_email(email)
            if user is None:
                raise
            return user
        logger.info("Account created via Google sign-in (user_id=%d)", user_id)
        return User(id=user_id, email=email, password_hash=OAUTH_PASSWORD_SENTINEL)
