"""Unit tests for environment-driven settings."""

import pytest

from navcrypto.config import load_settings


def test_defaults(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_KEY", "SUPABASE_ANON_KEY", "SITE_URL", "CORS_ORIGINS",
                 "SESSION_COOKIE_SECURE", "LOG_LEVEL", "LOG_FILE", "STREAM_POLL_INTERVAL"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.supabase_url is None
    assert settings.cors_origins == ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:3000"]
    assert settings.session_cookie_secure is False
    assert settings.log_level == "INFO"
    assert settings.stream_poll_interval == 2.0
    assert settings.password_reset_url == "http://localhost:3000/reset-password"


def test_from_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service")
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    monkeypatch.setenv("SITE_URL", "https://navcrypto.example/")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, ,https://b.example")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.auth_key == "service"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.session_cookie_secure is True
    assert settings.log_level == "DEBUG"
    assert settings.password_reset_url == "https://navcrypto.example/reset-password"


def test_bad_interval(monkeypatch):
    monkeypatch.setenv("STREAM_POLL_INTERVAL", "soon")

    with pytest.raises(ValueError, match="STREAM_POLL_INTERVAL"):
        load_settings()
