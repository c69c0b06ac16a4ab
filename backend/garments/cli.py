# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/garments/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (idempotent; prefer `flask db upgrade` outside dev).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Account inspection/bootstrap:
# - python -m flask accounts list [--search ali]
#   List accounts with role and status.
# - python -m flask accounts create --email admin@garments.local --name "Admin" --role admin
#   Create (or refresh) an account; admins start approved, everyone else pending.
# - python -m flask accounts set-status manager@garments.local approved
#   Approve or suspend an account.

import click
from flask.cli import with_appcontext

from .errors import ServiceError
from .extensions import db
from .models import ACCOUNT_ROLES, ACCOUNT_STATUSES
from .services import account_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create any tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Schema ready.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask accounts create' to add an admin.")


@click.group('accounts')
def accounts_group():
    """Account inspection and bootstrap commands."""


@accounts_group.command('list')
@click.option('--search', default=None, help='Filter by name or email substring')
@with_appcontext
def list_accounts_cli(search):
    """List all accounts with their role and status."""
    accounts = account_service.list_accounts(search)

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Email':<35} {'Name':<25} {'Role':<10} {'Status'}")
    click.echo("="*90)

    for account in accounts:
        click.echo(f"{account.id:<5} {account.email:<35} {account.name:<25} {account.role:<10} {account.status}")

    click.echo("="*90 + "\n")


@accounts_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--name', default='', help='Display name')
@click.option('--role', type=click.Choice(list(ACCOUNT_ROLES)), prompt=True, help='Role')
@click.option('--status', type=click.Choice(list(ACCOUNT_STATUSES)), default=None,
              help='Override the initial approval status')
@with_appcontext
def create_account_cli(email, name, role, status):
    """
    Create an account, or refresh the profile of an existing one.

    An existing account keeps its role; pass --status to change its status.
    """
    try:
        account, created = account_service.register_account({"email": email, "name": name, "role": role})
        if status and account.status != status:
            account = account_service.update_account(account.id, {"status": status}, actor_email="cli")
    except ServiceError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    verb = "Created" if created else "Updated"
    click.echo(f"PASS {verb} account: {account.email} (role={account.role}, status={account.status})")


@accounts_group.command('set-status')
@click.argument('email')
@click.argument('status', type=click.Choice(list(ACCOUNT_STATUSES)))
@with_appcontext
def set_status_cli(email, status):
    """Set an account's approval status (pending, approved, suspended)."""
    account = account_service.get_account_by_email(email)
    if account is None:
        click.echo(f"FAIL Account '{email}' not found")
        raise SystemExit(1)

    account = account_service.update_account(account.id, {"status": status}, actor_email="cli")
    click.echo(f"PASS {account.email} is now {account.status}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(accounts_group)
