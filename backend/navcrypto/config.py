"""Application Settings

Settings are read from environment variables. A local `.env` file is loaded
first so development machines don't need exported variables.

Environment Variables:
    - SUPABASE_URL: Project URL (https://xxx.supabase.co)
    - SUPABASE_SERVICE_KEY: Service role key (backend only)
    - SUPABASE_ANON_KEY: Public anon key used for user auth calls
    - SITE_URL: Frontend base URL (password reset links point here)
    - CORS_ORIGINS: Comma separated list of allowed origins
    - SESSION_COOKIE_SECURE: "true" to mark session cookies Secure
    - LOG_LEVEL / LOG_FILE: Logging configuration
    - STREAM_POLL_INTERVAL / STREAM_HEARTBEAT_INTERVAL: SSE feed timing
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional
import os

from dotenv import load_dotenv

load_dotenv()


DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass
class Settings:
    """Runtime configuration for the NavCrypto backend."""

    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    site_url: str = "http://localhost:3000"
    cors_origins: List[str] = field(default_factory=list)
    session_cookie_secure: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None
    stream_poll_interval: float = 2.0
    stream_heartbeat_interval: float = 30.0

    @property
    def auth_key(self) -> Optional[str]:
        """Key used for end-user auth calls (anon key, service key as fallback)."""
        return self.supabase_anon_key or self.supabase_service_key

    @property
    def password_reset_url(self) -> str:
        return f"{self.site_url.rstrip('/')}/reset-password"


def load_settings() -> Settings:
    """Build Settings from the current environment (uncached)."""
    origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY"),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY"),
        site_url=os.getenv("SITE_URL", "http://localhost:3000"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        session_cookie_secure=_env_bool("SESSION_COOKIE_SECURE"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE") or None,
        stream_poll_interval=_env_float("STREAM_POLL_INTERVAL", 2.0),
        stream_heartbeat_interval=_env_float("STREAM_HEARTBEAT_INTERVAL", 30.0),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return load_settings()
