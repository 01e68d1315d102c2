"""Auth commands -- check app credentials against the instance.

Provides the ``tfmastodon auth`` sub-command group. ``verify`` acquires an
authenticated client the same way the provider does for resources
(explicit token, else a client-credentials exchange) and calls
``/api/v1/apps/verify_credentials``.

Credential options accept ``env:VAR``, ``file:/path``, or a literal value::

    tfmastodon --domain example.social auth verify \\
        --client-id env:MASTODON_CLIENT_ID --client-secret env:MASTODON_CLIENT_SECRET
"""

from __future__ import annotations

from typing import Optional

import typer

from tfmastodon.commands.context import get_provider, handle_errors
from tfmastodon.config import resolve_credential
from tfmastodon.output import print_attributes, success

auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("verify")
def auth_verify(
    ctx: typer.Context,
    client_id: str = typer.Option(..., "--client-id", help="Client id source."),
    client_secret: str = typer.Option(..., "--client-secret", help="Client secret source."),
    access_token: Optional[str] = typer.Option(
        None, "--access-token", help="Use this access token instead of the client-credentials exchange."
    ),
) -> None:
    """Verify application credentials and print the application they belong to."""
    with handle_errors():
        provider = get_provider(ctx)
        client = provider.new_authenticated_client(
            resolve_credential(client_id),
            resolve_credential(client_secret),
            resolve_credential(access_token) if access_token else "",
        )
        app = client.verify_app_credentials()

    success(f"Credentials accepted by {provider.server}.")
    print_attributes(app.model_dump(include={"name", "website", "vapid_key"}), title="application")
