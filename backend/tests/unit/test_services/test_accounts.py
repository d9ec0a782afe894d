"""
Unit Tests for the Account Service

Tests cover:
- Password validation rules for signup and reset
- Pre-verified account creation
- Sign in (role lookup, rejected credentials)
- Sign out, password reset request and reset
- Admin promotion
"""

from unittest.mock import MagicMock, patch

import pytest
from supabase import AuthError

from factories import ADMIN_ID, MEMBER_ID
from navcrypto.errors import AuthenticationError, ValidationFailedError
from navcrypto.services import accounts


class FakeAuthError(AuthError):
    """AuthError with a stable constructor for tests."""

    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


def _signed_in(user_id, email="trader@example.com", metadata=None):
    user = MagicMock()
    user.id = user_id
    user.email = email
    user.user_metadata = metadata or {}
    session = MagicMock(access_token="access", refresh_token="refresh", expires_in=3600)
    return MagicMock(user=user, session=session)


# ============================================================================
# TEST: Validation
# ============================================================================

class TestPasswordRules:

    def test_signup_mismatch_checked_first(self):
        with pytest.raises(ValidationFailedError, match="do not match"):
            accounts.validate_signup_password("abc", "xyz")

    def test_signup_min_length(self):
        with pytest.raises(ValidationFailedError, match="at least 6"):
            accounts.validate_signup_password("abc", "abc")
        accounts.validate_signup_password("abcdef", "abcdef")

    def test_reset_length_checked_first(self):
        with pytest.raises(ValidationFailedError, match="at least 8"):
            accounts.validate_reset_password("short", "other")
        with pytest.raises(ValidationFailedError, match="do not match"):
            accounts.validate_reset_password("longenough", "different")


# ============================================================================
# TEST: Account creation
# ============================================================================

class TestCreateVerifiedUser:

    def test_creates_confirmed_user(self, fake_db):
        fake_db.auth.admin.create_user.return_value = _signed_in("new-id", "new@example.com")

        user = accounts.create_verified_user(fake_db, " new@example.com ", "secret123", " New Trader ")

        assert user == {"id": "new-id", "email": "new@example.com"}
        fake_db.auth.admin.create_user.assert_called_once_with({
            "email": "new@example.com",
            "password": "secret123",
            "email_confirm": True,
            "user_metadata": {"full_name": "New Trader"},
        })

    def test_missing_fields(self, fake_db):
        with pytest.raises(ValidationFailedError, match="required"):
            accounts.create_verified_user(fake_db, "new@example.com", "secret123", "  ")
        fake_db.auth.admin.create_user.assert_not_called()

    def test_auth_server_rejects(self, fake_db):
        fake_db.auth.admin.create_user.side_effect = FakeAuthError("User already registered")

        with pytest.raises(ValidationFailedError, match="already registered"):
            accounts.create_verified_user(fake_db, "trader@example.com", "secret123", "Sam")


# ============================================================================
# TEST: Sign in / out
# ============================================================================

class TestSignIn:

    def test_role_comes_from_profile(self, fake_db):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.return_value = _signed_in(ADMIN_ID, "admin@example.com")

        with patch("navcrypto.services.accounts.create_auth_client", return_value=auth_client):
            result = accounts.sign_in(fake_db, "admin@example.com", "secret123")

        assert result.user_id == ADMIN_ID
        assert result.role == "admin"
        assert result.full_name == "Alex Admin"
        assert result.tokens.access_token == "access"
        assert result.tokens.refresh_token == "refresh"

    def test_missing_profile_defaults_to_user(self, fake_db):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.return_value = _signed_in("no-profile")

        with patch("navcrypto.services.accounts.create_auth_client", return_value=auth_client):
            result = accounts.sign_in(fake_db, "x@example.com", "secret123")

        assert result.role == "user"

    def test_full_name_falls_back_to_metadata(self, fake_db):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.return_value = _signed_in("no-profile", metadata={"full_name": "Jo Chart"})

        with patch("navcrypto.services.accounts.create_auth_client", return_value=auth_client):
            result = accounts.sign_in(fake_db, "x@example.com", "secret123")

        assert result.full_name == "Jo Chart"

    def test_rejected_credentials(self, fake_db):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.side_effect = FakeAuthError("Invalid login credentials")

        with patch("navcrypto.services.accounts.create_auth_client", return_value=auth_client):
            with pytest.raises(AuthenticationError, match="Invalid login credentials"):
                accounts.sign_in(fake_db, "trader@example.com", "wrong")

    def test_register_validates_before_creating(self, fake_db):
        with pytest.raises(ValidationFailedError):
            accounts.register(fake_db, "new@example.com", "secret123", "secret124", "New")

        fake_db.auth.admin.create_user.assert_not_called()

    def test_sign_out_swallows_revocation_errors(self, fake_db):
        fake_db.auth.admin.sign_out.side_effect = Exception("network down")

        accounts.sign_out(fake_db, "access")
        accounts.sign_out(fake_db, None)

        fake_db.auth.admin.sign_out.assert_called_once_with("access")


# ============================================================================
# TEST: Password reset
# ============================================================================

class TestPasswordReset:

    def test_request_uses_reset_page(self):
        auth_client = MagicMock()
        settings = MagicMock(password_reset_url="https://navcrypto.test/reset-password")

        with patch("navcrypto.services.accounts.create_auth_client", return_value=auth_client), \
                patch("navcrypto.services.accounts.get_settings", return_value=settings):
            accounts.request_password_reset(" trader@example.com ")

        auth_client.auth.reset_password_for_email.assert_called_once_with(
            "trader@example.com",
            {"redirect_to": "https://navcrypto.test/reset-password"},
        )

    def test_request_requires_email(self):
        with pytest.raises(ValidationFailedError):
            accounts.request_password_reset("")

    def test_reset_updates_password(self, fake_db):
        fake_db.auth.get_user.return_value = _signed_in(MEMBER_ID)

        accounts.reset_password(fake_db, "recovery-token", "newpassword", "newpassword")

        fake_db.auth.admin.update_user_by_id.assert_called_once_with(MEMBER_ID, {"password": "newpassword"})

    def test_invalid_recovery_token(self, fake_db):
        fake_db.auth.get_user.side_effect = FakeAuthError("invalid JWT")

        with pytest.raises(AuthenticationError, match="Invalid or expired reset link"):
            accounts.reset_password(fake_db, "bad-token", "newpassword", "newpassword")


def test_promote_to_admin_upserts_profile(fake_db):
    accounts.promote_to_admin(fake_db, MEMBER_ID, "trader@example.com", "Sam Trader")

    profile = next(p for p in fake_db.rows("profiles") if p["id"] == MEMBER_ID)
    assert profile["role"] == "admin"
    assert profile["plan"] == "enterprise"
