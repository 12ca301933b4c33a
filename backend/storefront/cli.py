# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/storefront/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables, seeds the demo accounts once, initializes the audit log.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system cleanup-sessions
#   Delete expired session tokens.
#
# Inspection:
# - python -m flask users list
#   List all accounts with role and status.
# - python -m flask audit list --limit 20
#   Most recent audit entries, newest first.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .repository import COLLECTION_NAMES
from .services.audit_service import AuditService
from .services.bootstrap_service import DEMO_PASSWORD, DEMO_USERS
from .services.session_service import cleanup_expired_sessions
from .time_utils import ms_to_datetime, to_utc_z


def _store():
    return current_app.extensions["record_store"]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize storage and run the bootstrap.

    Safe to run repeatedly: demo accounts are only seeded the first time,
    and the audit log is only initialized while it is empty.
    """
    from . import init_storage

    click.echo("BUILD  Preparing record store...")
    report = init_storage(current_app)

    if report.users_seeded:
        click.echo(f"PASS Seeded {report.users_seeded} demo accounts (password: {DEMO_PASSWORD})")
        for _, name, username, email, status, _ in DEMO_USERS:
            click.echo(f"   {username:<8} -> {email:<28} {status.value}")
    else:
        click.echo("SKIP Demo accounts already bootstrapped")

    if report.audit_initialized:
        click.echo("PASS Audit log initialized")

    click.echo(f"\nAdmin login: {current_app.config['ADMIN_EMAIL']}")


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

    if current_app.config["STORE_BACKEND"] == "memory":
        click.echo("DELETE  Clearing in-memory collections...")
        store = _store()
        for name in COLLECTION_NAMES:
            store.collection(name).clear()
    else:
        click.echo("DELETE  Dropping all tables...")
        db.drop_all()

        click.echo("BUILD  Creating all tables...")
        db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@system_group.command('cleanup-sessions')
@with_appcontext
def cleanup_sessions():
    """Delete expired session tokens."""
    removed = cleanup_expired_sessions(_store().sessions)
    click.echo(f"PASS Removed {removed} expired sessions")


@click.group('users')
def users_group():
    """Account inspection commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all accounts with their role and status."""
    users = _store().users.list()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<18} {'Username':<28} {'Name':<24} {'Role':<8} {'Status'}")
    click.echo("="*100)

    for user in users:
        click.echo(
            f"{user['id']:<18} {str(user.get('username') or ''):<28} "
            f"{str(user.get('name') or ''):<24} {user.get('role', 'USER'):<8} {user.get('status', 'ACTIVE')}"
        )

    click.echo("="*100 + "\n")


@click.group('audit')
def audit_group():
    """Audit trail inspection."""


@audit_group.command('list')
@click.option('--limit', type=int, default=20, show_default=True, help='Max entries to show')
@with_appcontext
def list_audit(limit):
    """Most recent audit entries, newest first."""
    entries = AuditService(_store()).list()[:limit]

    click.echo("\n" + "="*100)
    click.echo(f"{'When':<22} {'Action':<15} {'Admin':<16} {'Target':<28} Details")
    click.echo("="*100)

    for entry in entries:
        when = to_utc_z(ms_to_datetime(entry.get("timestamp"))) or "-"
        click.echo(
            f"{when:<22} {entry['action']:<15} {entry['adminName']:<16} "
            f"{entry['targetUser']:<28} {entry.get('details', '')}"
        )

    click.echo("="*100 + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(audit_group)
