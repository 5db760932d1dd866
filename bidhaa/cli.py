import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate

from models.user import ADMIN_ROLES
from bidhaa.services.accounts import AccountError, register_admin
from bidhaa.services.catalog import CatalogIntrospectionError, get_registry, reset_registry
from bidhaa.utils.db import transactional


def _is_production() -> bool:
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    return "production" in (env, app_env)


def _assert_safe_for_upgrade():
    # Production upgrades need ALLOW_DB_MIGRATIONS=true
    if _is_production() and (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
        raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("create-admin")
@click.option("--username", required=True)
@click.option("--email", required=True)
@click.option("--password", required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--phone", "phone_number", default=None)
@click.option("--admin-role", type=click.Choice(ADMIN_ROLES), default="super_admin", show_default=True)
@with_appcontext
def create_admin(username, email, password, phone_number, admin_role):
    """Bootstrap a back-office account (the super_admin cap still applies)."""
    try:
        with transactional("Failed to create admin"):
            admin = register_admin(username, email, password, admin_role, phone_number=phone_number)
    except AccountError as e:
        raise click.ClickException(str(e))
    click.echo(f"Created {admin.admin_role} {admin.username} <{admin.email}> (id={admin.id}).")


@click.command("refresh-catalog")
@with_appcontext
def refresh_catalog():
    """Rebuild the cached product-table registry from the live schema."""
    reset_registry()
    try:
        entities = get_registry()
    except CatalogIntrospectionError as e:
        raise click.ClickException(str(e))
    for entity in entities:
        click.echo(f"{entity.table}: title={entity.title_column} searchable={','.join(entity.searchable_columns)}")
    click.echo(f"{len(entities)} product tables registered.")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(create_admin)
    app.cli.add_command(refresh_catalog)
