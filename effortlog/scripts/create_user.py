"""Create an account from the command line.

Usage:
    flask --app effortlog.wsgi create-user user@example.com secret123
    python -m effortlog.scripts.create_user user@example.com secret123
"""

from __future__ import annotations

import sys

import click
from flask import Flask
from flask.cli import with_appcontext
from pydantic import ValidationError

from effortlog.core.auth.schemas import RegisterRequest, errors_by_field
from effortlog.core.auth.auth_service import register_user


@click.command("create-user")
@click.argument("email")
@click.argument("password")
@with_appcontext
def create_user_command(email: str, password: str) -> None:
    """Create a user with EMAIL and PASSWORD."""
    try:
        payload = RegisterRequest(email=email, password=password)
    except ValidationError as exc:
        for field, message in errors_by_field(exc).items():
            click.echo(f"{field}: {message}", err=True)
        raise click.Abort()
    try:
        user = register_user(payload)
    except ValueError as exc:
        click.echo(f"Error creating user: {exc}", err=True)
        raise click.Abort()
    click.echo(f"Created user: {user.email}")


def register_commands(app: Flask) -> None:
    app.cli.add_command(create_user_command)


def main(argv: list[str] | None = None) -> int:
    """Entry point for python -m effortlog.scripts.create_user."""
    from effortlog import create_app

    app = create_app()
    with app.app_context():
        try:
            create_user_command.main(args=argv, standalone_mode=False)
        except click.Abort:
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
