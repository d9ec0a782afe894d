"""NavCrypto command line tools.

Commands:
- create-admins: Create pre-verified admin accounts with temporary passwords
- admin-sql: Print the SQL that grants admin access to existing accounts
- serve: Run the API with uvicorn
"""

from typing import List, Tuple
import logging
import secrets
import string

import typer
from rich.console import Console

from .config import get_settings
from .db.supabase_client import get_supabase_client
from .errors import NavCryptoError
from .models import Plan, Role
from .services.accounts import create_verified_user, promote_to_admin

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="navcrypto",
    help="NavCrypto backend administration.",
    no_args_is_help=True,
)

console = Console()

TEMP_PASSWORD_PREFIX = "NavCrypto!"
TEMP_PASSWORD_SUFFIX_LENGTH = 8


def parse_admin_spec(spec: str) -> Tuple[str, str]:
    """Split `email[:Full Name]`; the name defaults to the email's local part."""
    email, _, full_name = spec.partition(":")
    email = email.strip()
    full_name = full_name.strip() or email.split("@")[0]
    return email, full_name


def temporary_password() -> str:
    alphabet = string.ascii_lowercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(TEMP_PASSWORD_SUFFIX_LENGTH))
    return f"{TEMP_PASSWORD_PREFIX}{suffix}"


def admin_sql(emails: List[str]) -> str:
    """SQL that grants admin access to accounts that already signed up."""
    statements = [
        "-- Run in Supabase Dashboard → SQL Editor after the users have signed up",
    ]
    for email in emails:
        quoted = email.replace("'", "''")
        statements.append(
            f"UPDATE profiles SET role = '{Role.ADMIN.value}', plan = '{Plan.ENTERPRISE.value}' "
            f"WHERE email = '{quoted}';"
        )
    statements.append(
        f"SELECT id, email, full_name, role, plan, created_at FROM profiles WHERE role = '{Role.ADMIN.value}';"
    )
    return "\n".join(statements)


@app.command(name="create-admins")
def create_admins(
    admins: List[str] = typer.Argument(..., help="EMAIL or 'EMAIL:Full Name', one per admin"),
) -> None:
    """Create admin accounts with the email already confirmed."""
    specs = [parse_admin_spec(spec) for spec in admins]

    if not get_settings().supabase_service_key:
        console.print("[yellow]⚠ SUPABASE_SERVICE_KEY not found.[/yellow]")
        console.print("Ask each user to sign up, then run this SQL instead:\n")
        console.print(admin_sql([email for email, _ in specs]), markup=False, soft_wrap=True)
        return

    try:
        client = get_supabase_client()
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    failures = 0
    for email, full_name in specs:
        console.print(f"Creating admin: {email}...")
        password = temporary_password()
        try:
            user = create_verified_user(client, email, password, full_name)
            promote_to_admin(client, user["id"], email, full_name)
        except NavCryptoError as e:
            console.print(f"  [red]✗ Auth error for {email}: {e.message}[/red]")
            failures += 1
            continue
        except Exception as e:
            logger.debug("Admin creation failed", exc_info=True)
            console.print(f"  [red]✗ Profile error for {email}: {e}[/red]")
            failures += 1
            continue

        console.print(f"  [green]✓ Created {email}[/green]")
        console.print(f"    [dim]Temporary password:[/dim] {password}", markup=True, highlight=False)
        console.print("    [dim](User should reset password on first login)[/dim]\n")

    if failures:
        raise typer.Exit(code=1)


@app.command(name="admin-sql")
def print_admin_sql(
    emails: List[str] = typer.Argument(..., help="Emails of accounts to promote"),
) -> None:
    """Print UPDATE statements that grant admin role and the enterprise plan."""
    console.print(admin_sql(emails), markup=False, highlight=False, soft_wrap=True)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run("navcrypto.main:app", host=host, port=port, reload=reload, log_level="info")


if __name__ == "__main__":
    app()
