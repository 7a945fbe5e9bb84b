"""CLI commands for the application."""

import click
from flask.cli import with_appcontext
from codevance.extensions import db
from codevance.tasks.sync_tasks import sync_account_now

@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create database tables."""
    click.echo("Creating database tables...")
    db.create_all()
    click.echo("Database tables created!")

@click.command('sync-account')
@click.argument('account_id')
@with_appcontext
def sync_account_command(account_id):
    """Sync one linked account and wait for the result."""
    report = sync_account_now(account_id)
    if report is None:
        raise click.ClickException(f"Sync for account {account_id} was not started")

    if report.error:
        raise click.ClickException(f"Sync failed: {report.error}")

    click.echo(
        f"Sync finished with {report.outcome.value}: {report.synced_count} problems "
        f"in {report.elapsed:.1f}s"
    )

def register_commands(app):
    """Register CLI commands with the Flask application."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(sync_account_command)
