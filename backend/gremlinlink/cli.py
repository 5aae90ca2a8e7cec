import click
from flask.cli import with_appcontext

from gremlinlink.extensions import db
from gremlinlink.models import User


@click.command("create-admin")
@click.argument("email")
@click.password_option()
@click.option("--name", default=None)
@with_appcontext
def create_admin(email, password, name):
    """Create an admin account, or reset the password of an existing one."""
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, name=name, role="admin")
        db.session.add(user)

    user.set_password(password)
    user.is_active = True
    db.session.commit()
    click.echo(f"Admin {email} ready")


def register_commands(app):
    app.cli.add_command(create_admin)
