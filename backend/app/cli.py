import click
from flask.cli import AppGroup
from app.application.preview.tokens import get_preview_tokens

preview_tokens_cli = AppGroup("preview-tokens", help="Manage preview tokens.")


@preview_tokens_cli.command("prune")
def prune_command():
    """Delete expired preview tokens."""
    count = get_preview_tokens().prune_expired()
    click.echo(f"Pruned {count} expired preview tokens")


def register_cli(app):
    app.cli.add_command(preview_tokens_cli)
