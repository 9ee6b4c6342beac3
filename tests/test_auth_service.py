"""Unit tests for auth/service.py -- signup, password login, Google sign-in.

Covers:
- duplicate signup -> Conflict (including the insert race)
- login success embeds the created user id; failures are indistinguishable
- Google sign-in creates exactly one account per verified email and reuses it
- Google-only accounts can never complete a password login
"""

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import OAUTH_PASSWORD_SENTINEL, User
from auth.service import AuthService
from core.errors import Conflict, InvalidCredentials, InvalidToken


class TestSignupAndLogin:
    def test_signup_then_login_returns_token_for_that_user(self, auth_service: AuthService) -> None:
        user_id = auth_service.signup("a@x.com", "pw1")
        token = auth_service.login("a@x.com", "pw1")
        assert auth_service.tokens.decode(token)["user_id"] == user_id

    def test_signup_stores_hash_not_password(self, auth_service: AuthService) -> None:
        auth_service.signup("a@x.com", "pw1")
        stored = auth_service.users.get_by_email("a@x.com")
        assert stored.password_hash != "pw1"
        assert auth_service.hasher.verify("pw1", stored.password_hash)

    def test_duplicate_signup_conflicts(self, auth_service: AuthService) -> None:
        auth_service.signup("a@x.com", "pw1")
        with pytest.raises(Conflict):
            auth_service.signup("a@x.com", "different")
        assert auth_service.users.count_users() == 1

    def test_concurrent_duplicate_signup_conflicts(self, auth_service: AuthService, monkeypatch) -> None:
        """Both requests pass the existence check; the UNIQUE constraint decides."""
        auth_service.signup("a@x.com", "pw1")
        monkeypatch.setattr(auth_service.users, "get_by_email", lambda email: None)
        with pytest.raises(Conflict) as exc_info:
            auth_service.signup("a@x.com", "pw2")
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    def test_wrong_password_rejected(self, auth_service: AuthService) -> None:
        auth_service.signup("a@x.com", "pw1")
        with pytest.raises(InvalidCredentials):
            auth_service.login("a@x.com", "pw2")

    def test_unknown_email_and_wrong_password_are_indistinguishable(self, auth_service: AuthService) -> None:
        auth_service.signup("a@x.com", "pw1")
        with pytest.raises(InvalidCredentials) as wrong_pw:
            auth_service.login("a@x.com", "nope")
        with pytest.raises(InvalidCredentials) as no_user:
            auth_service.login("ghost@x.com", "nope")
        assert str(wrong_pw.value) == str(no_user.value)
        assert wrong_pw.value.code == no_user.value.code

    def test_email_match_is_exact(self, auth_service: AuthService) -> None:
        auth_service.signup("a@x.com", "pw1")
        with pytest.raises(InvalidCredentials):
            auth_service.login("A@X.com", "pw1")


class TestGoogleLogin:
    def test_first_login_creates_one_user(self, auth_service: AuthService, make_google_token) -> None:
        token = auth_service.login_with_google(make_google_token("new@example.com"))
        user = auth_service.users.get_by_email("new@example.com")
        assert user is not None
        assert user.is_oauth_only
        assert auth_service.tokens.decode(token)["user_id"] == user.id
        assert auth_service.users.count_users() == 1

    def test_second_login_reuses_user(self, auth_service: AuthService, make_google_token) -> None:
        first = auth_service.login_with_google(make_google_token("new@example.com"))
        second = auth_service.login_with_google(make_google_token("new@example.com"))
        assert auth_service.tokens.decode(first)["user_id"] == auth_service.tokens.decode(second)["user_id"]
        assert auth_service.users.count_users() == 1

    def test_existing_password_account_is_reused(self, auth_service: AuthService, make_google_token) -> None:
        user_id = auth_service.signup("both@example.com", "pw1")
        token = auth_service.login_with_google(make_google_token("both@example.com"))
        assert auth_service.tokens.decode(token)["user_id"] == user_id
        # The password still works afterwards.
        auth_service.login("both@example.com", "pw1")

    def test_google_account_cannot_password_login(self, auth_service: AuthService, make_google_token) -> None:
        auth_service.login_with_google(make_google_token("g@example.com"))
        for attempt in ("", "google-oauth", OAUTH_PASSWORD_SENTINEL):
            with pytest.raises(InvalidCredentials):
                auth_service.login("g@example.com", attempt)

    def test_google_account_login_verifies_against_dummy_hash(
        self, auth_service: AuthService, make_google_token, monkeypatch
    ) -> None:
        auth_service.login_with_google(make_google_token("g@example.com"))
        seen = []
        monkeypatch.setattr(auth_service.hasher, "verify", lambda plain, hashed: seen.append(hashed) or False)
        assert auth_service.authenticate("g@example.com", OAUTH_PASSWORD_SENTINEL) is None
        assert seen == [auth_service.hasher.dummy_hash]

    def test_invalid_token_creates_nothing(self, auth_service: AuthService, make_google_token) -> None:
        with pytest.raises(InvalidToken):
            auth_service.login_with_google(make_google_token("x@example.com", aud="wrong"))
        assert auth_service.users.count_users() == 0

    def test_unconfigured_google_rejects(self, user_store, hasher, token_issuer, make_google_token) -> None:
        service = AuthService(user_store, hasher, token_issuer, google=None)
        with pytest.raises(InvalidToken):
            service.login_with_google(make_google_token())

    def test_concurrent_first_login_resolves_to_one_row(
        self, auth_service: AuthService, make_google_token, monkeypatch
    ) -> None:
        """Another request inserts the row between our lookup and our insert."""
        real_get = auth_service.users.get_by_email
        winner_id = auth_service.users.create_user(User(email="race@example.com", password_hash=OAUTH_PASSWORD_SENTINEL))
        calls = []

        def racing_get(email):
            calls.append(email)
            return None if len(calls) == 1 else real_get(email)

        monkeypatch.setattr(auth_service.users, "get_by_email", racing_get)
        token = auth_service.login_with_google(make_google_token("race@example.com"))
        assert auth_service.tokens.decode(token)["user_id"] == winner_id
        assert auth_service.users.count_users() == 1
