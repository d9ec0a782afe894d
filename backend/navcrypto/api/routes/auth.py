"""
Auth API Routes

Session endpoints backed by Supabase Auth. Successful sign in stores the
session tokens in httponly cookies; the same tokens are accepted as a
Bearer header by every protected route.

Endpoints:
- POST /api/auth/signup: Create a pre-verified account (no session)
- POST /api/auth/register: Signup form (create account + sign in)
- POST /api/auth/login: Sign in with email and password
- POST /api/auth/logout: Sign out and clear session cookies
- POST /api/auth/forgot-password: Send the password reset email
- POST /api/auth/reset-password: Set a new password from a recovery link
- GET /api/auth/me: Current user and profile
- GET /api/auth/route-access: Role gate decision for a page path
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from typing import Any, Dict, Optional
import logging

from supabase import Client

from ...auth.session import (
    CurrentUser,
    clear_session_cookies,
    extract_tokens,
    fetch_profile,
    get_current_user,
    get_optional_user,
    home_for_role,
    resolve_route_access,
    set_session_cookies,
)
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...services import accounts
from .schemas import (
    AuthResponse,
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    RouteAccessResponse,
    SessionUser,
    SignupRequest,
    SignupResponse,
    SignupUser,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(result: accounts.SignInResult, full_name: Optional[str] = None) -> AuthResponse:
    return AuthResponse(
        user=SessionUser(id=result.user_id, email=result.email, full_name=full_name, role=result.role),
        redirect=home_for_role(result.role),
    )


# ============================================================================
# Account Creation
# ============================================================================

@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields or rejected by Supabase Auth"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)
async def signup(
    request_data: SignupRequest,
    client: Client = Depends(get_supabase),
) -> SignupResponse:
    """
    Create an account whose email is already confirmed.

    The profile row is created by the database trigger on auth.users.
    """
    try:
        user = accounts.create_verified_user(
            client,
            request_data.email or "",
            request_data.password or "",
            request_data.full_name or "",
        )
        return SignupResponse(user=SignupUser(**user))

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Signup failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Form validation failed"},
        401: {"model": ErrorResponse, "description": "Account created but sign in failed"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)
async def register(
    request_data: RegisterRequest,
    response: Response,
    client: Client = Depends(get_supabase),
) -> AuthResponse:
    """Signup form: validate, create the account, sign in and set cookies."""
    try:
        result = accounts.register(
            client,
            request_data.email or "",
            request_data.password,
            request_data.confirm_password,
            request_data.full_name or "",
        )
        set_session_cookies(response, result.tokens)
        logger.info(f"User {result.user_id} registered")
        return _auth_response(result, (request_data.full_name or "").strip() or None)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Registration failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred"
        )


# ============================================================================
# Session Endpoints
# ============================================================================

@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)
async def login(
    request_data: LoginRequest,
    response: Response,
    client: Client = Depends(get_supabase),
) -> AuthResponse:
    """
    Sign in and set the session cookies.

    Returns:
        AuthResponse whose `redirect` is /admin for admins, /dashboard otherwise
    """
    try:
        result = accounts.sign_in(client, request_data.email, request_data.password)
        set_session_cookies(response, result.tokens)
        logger.info(f"User {result.user_id} signed in ({result.role})")
        return _auth_response(result, result.full_name)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Login failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred"
        )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    client: Client = Depends(get_supabase),
) -> MessageResponse:
    """Revoke the session (best effort) and clear cookies."""
    accounts.sign_out(client, user.access_token if user else None)
    clear_session_cookies(response)
    return MessageResponse(message="Signed out", redirect="/")


# ============================================================================
# Password Reset
# ============================================================================

@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Email missing or rejected"},
    }
)
async def forgot_password(request_data: ForgotPasswordRequest) -> MessageResponse:
    try:
        accounts.request_password_reset(request_data.email)
        return MessageResponse(message="Check your email for a password reset link.")

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Password reset request failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred"
        )


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Password validation failed"},
        401: {"model": ErrorResponse, "description": "Invalid or expired reset link"},
    }
)
async def reset_password(
    request_data: ResetPasswordRequest,
    request: Request,
    client: Client = Depends(get_supabase),
) -> MessageResponse:
    """
    Set a new password.

    The recovery access token comes from the body, a Bearer header or the
    session cookie, in that order.
    """
    try:
        access_token = request_data.access_token or extract_tokens(request)[0]
        accounts.reset_password(
            client,
            access_token or "",
            request_data.password,
            request_data.confirm_password,
        )
        return MessageResponse(message="Password updated successfully", redirect="/login")

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Password reset failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred"
        )


# ============================================================================
# Current User & Route Gate
# ============================================================================

@router.get("/me", responses={401: {"model": ErrorResponse, "description": "Not authenticated"}})
async def me(
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> Dict[str, Any]:
    profile = fetch_profile(client, user.id)
    return {
        "status": "success",
        "user": SessionUser(id=user.id, email=user.email, full_name=user.full_name, role=user.role).model_dump(),
        "profile": profile,
    }


@router.get("/route-access", response_model=RouteAccessResponse)
async def route_access(
    path: str = Query(..., description="Page path, e.g. /admin/signals"),
    user: Optional[CurrentUser] = Depends(get_optional_user),
) -> RouteAccessResponse:
    """Tell the frontend whether a page may be shown or where to redirect."""
    redirect = resolve_route_access(path, user.id if user else None, user.role if user else None)
    return RouteAccessResponse(path=path, allowed=redirect is None, redirect=redirect)
