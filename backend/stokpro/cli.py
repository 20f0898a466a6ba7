# Overview: Flask CLI command groups for seeding, user bootstrap, and maintenance.

# backend/stokpro/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Schema:
# - python -m flask db upgrade
#   Apply every pending migration (Flask-Migrate / Alembic).
#
# Seeds (idempotent):
# - python -m flask seed plans
#   Create or refresh the Basic / Pro / Plus plans.
# - python -m flask seed super-admin
#   Keep exactly one super admin, the one in SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD.
# - python -m flask seed all
#   Both of the above.
#
# Users:
# - python -m flask users list [--tenant-slug acme]
#   List users with tenant, role and status.
# - python -m flask users create --tenant-slug acme --email a@acme.com --name "Ali" --password "Password123" --role tenant_admin
#   Create a user inside a tenant (prompts if options are omitted).
#
# Maintenance:
# - python -m flask quotes expire
#   Mark draft / sent quotes past valid_until as expired.
# - python -m flask maintenance cleanup-sessions
#   Delete expired and invalidated sessions.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Tenant, User
from .constants import TENANT_ROLES
from .errors import StokProError
from .services import auth_service, quote_service, seed_service, session_service


# =============================================================================
# SEEDS
# =============================================================================

@click.group('seed')
def seed_group():
    """Idempotent bootstrap data."""


@seed_group.command('plans')
@with_appcontext
def seed_plans_cli():
    """Create or refresh the default subscription plans."""
    created, updated = seed_service.seed_plans()
    click.echo(f"PASS Plans seeded: {created} created, {updated} updated")


@seed_group.command('super-admin')
@with_appcontext
def seed_super_admin_cli():
    """Create or refresh the platform super admin."""
    user, created = seed_service.seed_super_admin()
    verb = "Created" if created else "Refreshed"
    click.echo(f"PASS {verb} super admin: {user.email}")


@seed_group.command('all')
@click.pass_context
def seed_all_cli(ctx):
    """Run every seed in order."""
    ctx.invoke(seed_plans_cli)
    ctx.invoke(seed_super_admin_cli)


# =============================================================================
# USER MANAGEMENT COMMANDS
# =============================================================================

@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--tenant-slug', prompt=True, help='Slug of the tenant the user belongs to')
@click.option('--email', prompt=True, help='Email address')
@click.option('--name', prompt=True, help='Display name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(TENANT_ROLES), default='user', show_default=True, help='Role')
@with_appcontext
def create_user_cli(tenant_slug, email, name, password, role):
    """
    Create a user inside an existing tenant.

    The platform super admin is managed by `flask seed super-admin`.
    """
    tenant = Tenant.query.filter_by(slug=tenant_slug).first()
    if tenant is None:
        click.echo(f"FAIL Tenant '{tenant_slug}' not found")
        return

    try:
        user = auth_service.create_user(tenant, email, name, password, role=role)
    except StokProError as e:
        click.echo(f"FAIL Failed to create user: {e}")
        return

    click.echo(f"PASS Created user: {user.email} with role '{user.role}'")
    click.echo(f"     Tenant: {tenant.name} ({tenant.slug})")


@users_group.command('list')
@click.option('--tenant-slug', help='Filter by tenant slug')
@with_appcontext
def list_users_cli(tenant_slug):
    """List users with their tenant and role."""
    query = db.session.query(User)
    if tenant_slug:
        query = query.join(Tenant, User.tenant_id == Tenant.id).filter(Tenant.slug == tenant_slug)
    users = query.order_by(User.created_at.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 100)
    click.echo(f"{'Email':<35} {'Tenant':<25} {'Role':<15} {'Status'}")
    click.echo("=" * 100)
    for user in users:
        tenant = user.tenant.slug if user.tenant else "-"
        click.echo(f"{user.email:<35} {tenant:<25} {user.role:<15} {user.status}")
    click.echo("=" * 100 + "\n")


# =============================================================================
# MAINTENANCE
# =============================================================================

@click.group('quotes')
def quotes_group():
    """Quote housekeeping commands."""


@quotes_group.command('expire')
@with_appcontext
def expire_quotes_cli():
    """Mark quotes past their validity date as expired (all tenants)."""
    count = quote_service.mark_expired()
    click.echo(f"PASS Expired {count} quote(s)")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-sessions')
@with_appcontext
def cleanup_sessions_cli():
    """Delete expired and invalidated sessions."""
    deleted = session_service.cleanup_expired_sessions()
    click.echo(f"PASS Deleted {deleted} session(s)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(seed_group)
    app.cli.add_command(users_group)
    app.cli.add_command(quotes_group)
    app.cli.add_command(maintenance_group)
