"""Account Service

Authentication flows backed by Supabase Auth:
    - create_verified_user: account creation with the email pre-confirmed
    - register: full signup form (validation + creation + sign in)
    - sign_in / sign_out
    - request_password_reset / reset_password

Profiles are created by the `handle_new_user` database trigger when the auth
user is created, so nothing here inserts into `profiles` except the admin
bootstrap (`promote_to_admin`).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from supabase import AuthError, Client

from ..auth.session import SessionTokens, fetch_profile, tokens_from_session
from ..config import get_settings
from ..db.supabase_client import PROFILES, create_auth_client
from ..errors import AuthenticationError, ValidationFailedError
from ..models import Plan, Role

logger = logging.getLogger(__name__)

MIN_SIGNUP_PASSWORD_LENGTH = 6
MIN_RESET_PASSWORD_LENGTH = 8

INVALID_RESET_LINK = "Invalid or expired reset link. Please request a new password reset."


@dataclass
class SignInResult:
    user_id: str
    email: Optional[str]
    role: str
    tokens: SessionTokens
    full_name: Optional[str] = None


def _auth_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or "Authentication failed"


def create_verified_user(client: Client, email: str, password: str, full_name: str) -> Dict[str, Any]:
    """Create an auth user whose email is already confirmed.

    Raises:
        ValidationFailedError: Missing fields or the auth server refused the user
    """
    if not (email or "").strip() or not password or not (full_name or "").strip():
        raise ValidationFailedError("Email, password, and full name are required")

    try:
        response = client.auth.admin.create_user({
            "email": email.strip(),
            "password": password,
            "email_confirm": True,
            "user_metadata": {"full_name": full_name.strip()},
        })
    except AuthError as e:
        logger.info(f"Signup rejected for {email}: {_auth_message(e)}")
        raise ValidationFailedError(_auth_message(e))

    user = response.user
    logger.info(f"Created pre-verified account {user.id}")
    return {"id": user.id, "email": user.email}


def validate_signup_password(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise ValidationFailedError("Passwords do not match")
    if len(password) < MIN_SIGNUP_PASSWORD_LENGTH:
        raise ValidationFailedError(
            f"Password must be at least {MIN_SIGNUP_PASSWORD_LENGTH} characters"
        )


def validate_reset_password(password: str, confirm_password: str) -> None:
    # Length is checked before the match on the reset form
    if len(password) < MIN_RESET_PASSWORD_LENGTH:
        raise ValidationFailedError(
            f"Password must be at least {MIN_RESET_PASSWORD_LENGTH} characters long"
        )
    if password != confirm_password:
        raise ValidationFailedError("Passwords do not match")


def sign_in(client: Client, email: str, password: str) -> SignInResult:
    """Sign in with email and password.

    The password grant runs on a throwaway auth client; the role lookup uses
    the service client.

    Raises:
        AuthenticationError: Credentials rejected
    """
    try:
        response = create_auth_client().auth.sign_in_with_password({
            "email": email,
            "password": password,
        })
    except AuthError as e:
        raise AuthenticationError(_auth_message(e))

    if not response.session or not response.user:
        raise AuthenticationError("Invalid login credentials")

    profile = fetch_profile(client, response.user.id)
    role = (profile or {}).get("role") or Role.USER.value
    metadata = getattr(response.user, "user_metadata", None) or {}
    return SignInResult(
        user_id=response.user.id,
        email=response.user.email,
        role=role,
        tokens=tokens_from_session(response.session),
        full_name=(profile or {}).get("full_name") or metadata.get("full_name"),
    )


def register(
    client: Client,
    email: str,
    password: str,
    confirm_password: str,
    full_name: str,
) -> SignInResult:
    """Validate the signup form, create the account and sign the user in."""
    validate_signup_password(password, confirm_password)
    create_verified_user(client, email, password, full_name)
    return sign_in(client, email, password)


def sign_out(client: Client, access_token: Optional[str]) -> None:
    """Revoke the session server-side. Failures are logged, never raised."""
    if not access_token:
        return
    try:
        client.auth.admin.sign_out(access_token)
    except Exception as e:
        logger.warning(f"Sign out could not revoke session: {e}")


def request_password_reset(email: str) -> None:
    """Send the password reset email pointing at the frontend reset page."""
    if not (email or "").strip():
        raise ValidationFailedError("Email is required")
    try:
        create_auth_client().auth.reset_password_for_email(
            email.strip(),
            {"redirect_to": get_settings().password_reset_url},
        )
    except AuthError as e:
        raise ValidationFailedError(_auth_message(e))


def reset_password(client: Client, access_token: str, password: str, confirm_password: str) -> None:
    """Set a new password for the user holding a recovery access token."""
    validate_reset_password(password, confirm_password)

    try:
        response = client.auth.get_user(access_token) if access_token else None
    except AuthError:
        response = None
    if not response or not response.user:
        raise AuthenticationError(INVALID_RESET_LINK)

    try:
        client.auth.admin.update_user_by_id(response.user.id, {"password": password})
    except AuthError as e:
        raise ValidationFailedError(_auth_message(e))
    logger.info(f"Password reset for user {response.user.id}")


def promote_to_admin(client: Client, user_id: str, email: str, full_name: str) -> None:
    """Upsert a profile row with admin role and the enterprise plan."""
    client.table(PROFILES).upsert({
        "id": user_id,
        "email": email,
        "full_name": full_name,
        "role": Role.ADMIN.value,
        "plan": Plan.ENTERPRISE.value,
    }).execute()
