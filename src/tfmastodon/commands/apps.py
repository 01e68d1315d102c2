"""App registration commands -- drive the ``mastodon_register_app`` resource.

Provides the ``tfmastodon app`` sub-command group. Each registered
application is recorded in the state file under a name you choose, so it
can be read back, re-registered, or forgotten later.

Typical workflow::

    tfmastodon --domain example.social app create bot --scope read --scope write
    tfmastodon --domain example.social app read bot
    tfmastodon app list
    tfmastodon --domain example.social app delete bot
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from tfmastodon.commands.context import get_provider, get_state_store, handle_errors
from tfmastodon.exceptions import InvalidUsageError
from tfmastodon.models import RegisterAppState
from tfmastodon.output import print_attributes, success, suggest, warning
from tfmastodon.resources import RegisterAppResource
from tfmastodon.state import StateStore

TYPE_NAME = RegisterAppResource.type_name

app_app = typer.Typer(no_args_is_help=True)


def _plan(
    client_name: Optional[str],
    redirect_uris: Optional[str],
    scopes: Optional[list[str]],
    website: Optional[str],
    prior: Optional[RegisterAppState] = None,
) -> RegisterAppState:
    """Build the planned inputs, keeping prior values for options not given."""
    plan = RegisterAppState(
        client_name=client_name,
        redirect_uris=redirect_uris,
        scopes=scopes or None,
        website=website,
    )
    if prior is None:
        return plan
    inputs = ("client_name", "redirect_uris", "scopes", "website")
    return plan.model_copy(
        update={
            field: getattr(prior, field)
            for field in inputs
            if getattr(plan, field) is None
        }
    )


def _show(state: RegisterAppState, show_secret: bool) -> None:
    attributes: dict[str, Any] = state.model_dump()
    if not show_secret and attributes.get("app_config"):
        attributes["app_config"]["client_secret"] = "(sensitive value)"
    print_attributes(attributes, title=TYPE_NAME)


@app_app.command("create")
def app_create(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name to record the application under in the state file."),
    client_name: Optional[str] = typer.Option(None, "--client-name", help="Application name."),
    redirect_uris: Optional[str] = typer.Option(None, "--redirect-uris", help="Redirect URI."),
    scopes: Optional[list[str]] = typer.Option(None, "--scope", help="OAuth scope (repeatable)."),
    website: Optional[str] = typer.Option(None, "--website", help="Application website."),
    show_secret: bool = typer.Option(False, "--show-secret", help="Print the client secret."),
) -> None:
    """Register a new application and record it in the state file."""
    with handle_errors():
        store = get_state_store(ctx)
        if store.get(TYPE_NAME, name) is not None:
            raise InvalidUsageError(
                f"{TYPE_NAME}.{name} already exists in {store.path}; use 'app update' instead"
            )
        resource = get_provider(ctx).new_resource(TYPE_NAME)
        state = resource.create(_plan(client_name, redirect_uris, scopes, website))
        store.put(TYPE_NAME, name, state)

    success(f"Registered application {state.id} as {TYPE_NAME}.{name}.")
    _show(state, show_secret)
    suggest(f"Check it later: tfmastodon app read {name}")


@app_app.command("read")
def app_read(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name the application is recorded under."),
    show_secret: bool = typer.Option(False, "--show-secret", help="Print the client secret."),
) -> None:
    """Verify a recorded application's credentials against the instance."""
    with handle_errors():
        store = get_state_store(ctx)
        state = _require(store, name)
        resource = get_provider(ctx).new_resource(TYPE_NAME)
        refreshed = resource.read(state)
        if refreshed is None:
            store.remove(TYPE_NAME, name)

    if refreshed is None:
        warning(f"Application {state.id} no longer exists; removed {TYPE_NAME}.{name} from state.")
        return
    _show(refreshed, show_secret)


@app_app.command("update")
def app_update(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name the application is recorded under."),
    client_name: Optional[str] = typer.Option(None, "--client-name", help="Application name."),
    redirect_uris: Optional[str] = typer.Option(None, "--redirect-uris", help="Redirect URI."),
    scopes: Optional[list[str]] = typer.Option(None, "--scope", help="OAuth scope (repeatable)."),
    website: Optional[str] = typer.Option(None, "--website", help="Application website."),
    show_secret: bool = typer.Option(False, "--show-secret", help="Print the client secret."),
) -> None:
    """Re-register a recorded application with changed settings.

    Mastodon cannot edit applications, so this registers a new one and
    replaces the recorded credentials.
    """
    with handle_errors():
        store = get_state_store(ctx)
        prior = _require(store, name)
        resource = get_provider(ctx).new_resource(TYPE_NAME)
        state = resource.update(_plan(client_name, redirect_uris, scopes, website, prior), prior)
        store.put(TYPE_NAME, name, state)

    success(f"Re-registered {TYPE_NAME}.{name} as application {state.id}.")
    _show(state, show_secret)


@app_app.command("delete")
def app_delete(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name the application is recorded under."),
) -> None:
    """Forget a recorded application.

    The application stays registered on the instance; Mastodon offers no
    API to remove it.
    """
    with handle_errors():
        store = get_state_store(ctx)
        state = _require(store, name)
        get_provider(ctx).new_resource(TYPE_NAME).delete(state)
        store.remove(TYPE_NAME, name)

    success(f"Removed {TYPE_NAME}.{name} from state.")


@app_app.command("list")
def app_list(ctx: typer.Context) -> None:
    """List recorded applications with their application ids."""
    with handle_errors():
        store = get_state_store(ctx)
        prefix = f"{TYPE_NAME}."
        recorded = {
            key[len(prefix):]: store.get(TYPE_NAME, key[len(prefix):]).id
            for key in store.names()
            if key.startswith(prefix)
        }

    if not recorded:
        suggest("No applications recorded. Create one: tfmastodon app create NAME")
        return
    print_attributes(recorded, title=TYPE_NAME)


def _require(store: StateStore, name: str) -> RegisterAppState:
    state = store.get(TYPE_NAME, name)
    if state is None:
        raise InvalidUsageError(f"{TYPE_NAME}.{name} not found in {store.path}")
    return state
