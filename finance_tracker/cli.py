"""
Admin commands (`flask --app wsgi <command>`).

User deletion is only available here, not over HTTP.
"""
import click
from flask.cli import with_appcontext

from finance_tracker.services import get_services


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create database tables."""
    get_services().database.init_db()
    click.echo('Initialized the database.')


@click.command('delete-user')
@click.argument('username')
@with_appcontext
def delete_user_command(username):
    """Delete a user, their ledger and their refresh tokens."""
    if get_services().store.delete(username):
        click.echo(f'Deleted user {username.lower()}.')
    else:
        raise click.ClickException(f'User {username.lower()} not found.')


def register_commands(app) -> None:
    app.cli.add_command(init_db_command)
    app.cli.add_command(delete_user_command)
