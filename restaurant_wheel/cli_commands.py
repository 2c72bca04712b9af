# restaurant_wheel/cli_commands.py
import click
from flask.cli import with_appcontext

from .errors import WheelError
from .extensions import db
from .services.user_service import UserService


@click.command("create-admin")
@click.argument("email")
@click.option("--name", default=None, help="Display name")
@with_appcontext
def create_admin(email, name):
    """Create an admin user, or promote an existing one."""
    try:
        user = UserService(db.session).create_admin(email, name)
    except WheelError as e:
        db.session.rollback()
        raise click.ClickException(e.message)
    click.echo(f"Admin ready: {user.email} (id {user.id})")


def register_commands(app):
    app.cli.add_command(create_admin)
