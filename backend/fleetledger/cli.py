# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/fleetledger/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the default admin user.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
#   List all users with role and last login.
# - python -m flask users create --username ravi --name "Ravi Kumar" --password "secret1" --role MANAGER
#   Create a user (prompts if options are omitted).
#
# Maintenance:
# - python -m flask sessions cleanup --older-than-days 30
#   Delete expired/revoked sessions older than the window.

import click
from flask.cli import with_appcontext

from .errors import AppError
from .extensions import db
from .models import ROLES
from .services import auth_service, session_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create all tables and the default admin user.

    SECURITY: The default admin password comes from DEFAULT_ADMIN_PASSWORD
    ("admin123" unless set). Change it immediately in production!
    """
    click.echo("START Initializing FleetLedger...")
    db.create_all()
    click.echo("PASS Schema ready")

    admin = auth_service.ensure_default_admin()
    if admin:
        click.echo(f"PASS Created default admin: {admin.username} (ID: {admin.id})")
        click.echo("WARN Rotate the default admin password before production use")
    else:
        click.echo("PASS Default admin already exists")


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

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--name', prompt=True, help='Display name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(ROLES, case_sensitive=False), default='MANAGER', show_default=True)
@with_appcontext
def create_user_cli(username, name, password, role):
    """Create a new user."""
    try:
        user = auth_service.create_user(username=username, password=password, name=name, role=role)
    except AppError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Created user {user.username} (ID: {user.id}, role: {user.role})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = auth_service.list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Username':<20} {'Name':<25} {'Role':<10} {'Last login'}")
    click.echo("="*80)

    for user in users:
        last_login = user.last_login_at.strftime("%Y-%m-%d %H:%M") if user.last_login_at else "never"
        click.echo(f"{user.id:<5} {user.username:<20} {user.name:<25} {user.role:<10} {last_login}")


@click.group('sessions')
def sessions_group():
    """Session maintenance commands."""


@sessions_group.command('cleanup')
@click.option('--older-than-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions(older_than_days):
    """Delete expired and revoked sessions."""
    deleted = session_service.cleanup_expired_sessions(older_than_days=older_than_days)
    click.echo(f"PASS Deleted {deleted} session(s)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(sessions_group)
