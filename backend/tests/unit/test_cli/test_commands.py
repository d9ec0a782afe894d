"""
Tests for the navcrypto CLI.

Uses Typer's CliRunner; Supabase calls are patched out.
"""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from navcrypto.cli import admin_sql, app, parse_admin_spec, temporary_password
from navcrypto.errors import ValidationFailedError

runner = CliRunner()


class TestHelpers:

    def test_parse_admin_spec(self):
        assert parse_admin_spec("ops@example.com:Ops Lead") == ("ops@example.com", "Ops Lead")
        assert parse_admin_spec(" ops@example.com ") == ("ops@example.com", "ops")

    def test_temporary_password(self):
        password = temporary_password()

        assert password.startswith("NavCrypto!")
        assert len(password) == len("NavCrypto!") + 8

    def test_admin_sql_escapes_quotes(self):
        sql = admin_sql(["o'brien@example.com"])

        assert "WHERE email = 'o''brien@example.com';" in sql
        assert sql.splitlines()[-1].startswith("SELECT id, email")


class TestAdminSqlCommand:

    def test_prints_one_update_per_email(self):
        result = runner.invoke(app, ["admin-sql", "a@example.com", "b@example.com"])

        assert result.exit_code == 0
        assert result.stdout.count("UPDATE profiles SET role = 'admin', plan = 'enterprise'") == 2


class TestCreateAdmins:

    @pytest.fixture
    def service_key(self):
        with patch("navcrypto.cli.get_settings", return_value=MagicMock(supabase_service_key="key")):
            yield

    def test_without_service_key_prints_sql(self):
        with patch("navcrypto.cli.get_settings", return_value=MagicMock(supabase_service_key=None)), \
                patch("navcrypto.cli.get_supabase_client") as mock_client:
            result = runner.invoke(app, ["create-admins", "ops@example.com"])

        assert result.exit_code == 0
        assert "SUPABASE_SERVICE_KEY not found" in result.stdout
        assert "WHERE email = 'ops@example.com';" in result.stdout
        mock_client.assert_not_called()

    def test_creates_and_promotes(self, service_key):
        client = MagicMock()
        with patch("navcrypto.cli.get_supabase_client", return_value=client), \
                patch("navcrypto.cli.create_verified_user", return_value={"id": "u1", "email": "ops@example.com"}) as create, \
                patch("navcrypto.cli.promote_to_admin") as promote:
            result = runner.invoke(app, ["create-admins", "ops@example.com:Ops Lead"])

        assert result.exit_code == 0
        assert "Created ops@example.com" in result.stdout
        assert "NavCrypto!" in result.stdout
        assert create.call_args.args[3] == "Ops Lead"
        promote.assert_called_once_with(client, "u1", "ops@example.com", "Ops Lead")

    def test_failure_continues_and_exits_nonzero(self, service_key):
        outcomes = [ValidationFailedError("User already registered"), {"id": "u2", "email": "b@example.com"}]
        with patch("navcrypto.cli.get_supabase_client", return_value=MagicMock()), \
                patch("navcrypto.cli.create_verified_user", side_effect=outcomes), \
                patch("navcrypto.cli.promote_to_admin") as promote:
            result = runner.invoke(app, ["create-admins", "a@example.com", "b@example.com"])

        assert result.exit_code == 1
        assert "Auth error for a@example.com: User already registered" in result.stdout
        assert "Created b@example.com" in result.stdout
        promote.assert_called_once()

    def test_missing_url(self, service_key):
        with patch("navcrypto.cli.get_supabase_client", side_effect=ValueError("SUPABASE_URL is not set")):
            result = runner.invoke(app, ["create-admins", "a@example.com"])

        assert result.exit_code == 1
        assert "SUPABASE_URL is not set" in result.stdout
