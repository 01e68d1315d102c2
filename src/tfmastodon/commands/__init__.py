"""Built-in sub-commands for the tfmastodon CLI.

Each module defines either a Typer sub-app (``auth_app``, ``app_app``) or a
standalone command function that is registered on the root Typer
application in :func:`tfmastodon.app.main`.
"""

from tfmastodon.commands.apps import app_app
from tfmastodon.commands.auth import auth_app
from tfmastodon.commands.data import account_command, instance_command
from tfmastodon.commands.schema import schema_command

__all__ = ["account_command", "app_app", "auth_app", "instance_command", "schema_command"]
