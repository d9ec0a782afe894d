"""
API Routes Package

Routes are split by domain; every router carries its own /api/... prefix.

Modules:
- health: Health check endpoint
- auth: Sign up, sign in, sign out, password reset, session info, page gate
- public: Pricing, FAQ, newsletter signup, support tickets
- dashboard: Member overview, signals, courses, progress, settings
- admin_*: Admin consoles (signals, content, users, AI agents, newsletter,
  support, analytics)
- schemas: Shared Pydantic models (request/response schemas)

Usage:
    from navcrypto.api.routes import router
    app.include_router(router)
"""

from fastapi import APIRouter

# Import all domain routers
from .health import router as health_router
from .auth import router as auth_router
from .public import router as public_router
from .dashboard import router as dashboard_router
from .admin_signals import router as admin_signals_router
from .admin_content import router as admin_content_router
from .admin_users import router as admin_users_router
from .admin_ai_agents import router as admin_ai_agents_router
from .admin_newsletter import router as admin_newsletter_router
from .admin_support import router as admin_support_router
from .admin_analytics import router as admin_analytics_router

# Create main router that aggregates all domain routers
router = APIRouter()

router.include_router(health_router)
router.include_router(auth_router)
router.include_router(public_router)
router.include_router(dashboard_router)
router.include_router(admin_signals_router)
router.include_router(admin_content_router)
router.include_router(admin_users_router)
router.include_router(admin_ai_agents_router)
router.include_router(admin_newsletter_router)
router.include_router(admin_support_router)
router.include_router(admin_analytics_router)

from .schemas import (
    ErrorResponse,
    MessageResponse,
    DeleteResponse,
    HealthResponse,
)

__all__ = [
    "router",
    "health_router",
    "auth_router",
    "public_router",
    "dashboard_router",
    "admin_signals_router",
    "admin_content_router",
    "admin_users_router",
    "admin_ai_agents_router",
    "admin_newsletter_router",
    "admin_support_router",
    "admin_analytics_router",
    # Common
    "ErrorResponse",
    "MessageResponse",
    "DeleteResponse",
    "HealthResponse",
]
