"""Shared plumbing for CLI commands.

Commands read the global options stored in ``ctx.obj`` by
:func:`~tfmastodon.app.main_callback` and use these helpers to build a
configured :class:`~tfmastodon.provider.MastodonProvider` and to open the
state file. ``ctx.obj["transport"]``, when present, is handed to the
provider so embedding code can route HTTP through its own httpx transport.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer

from tfmastodon import __version__
from tfmastodon.config import resolve_provider_config
from tfmastodon.exceptions import TfMastodonError
from tfmastodon.output import debug, error
from tfmastodon.provider import MastodonProvider
from tfmastodon.state import DEFAULT_STATE_FILENAME, StateStore


def get_provider(ctx: typer.Context) -> MastodonProvider:
    """Build and configure a provider from the global CLI options.

    The provider is cached on ``ctx.obj`` so every step of one invocation
    shares the same token cache.
    """
    obj = ctx.ensure_object(dict)
    provider = obj.get("provider")
    if provider is None:
        config = resolve_provider_config(
            cli_domain=obj.get("domain"),
            cli_use_https=obj.get("use_https"),
        )
        provider = MastodonProvider(version=__version__, transport=obj.get("transport"))
        provider.configure(config)
        debug(f"tfmastodon provider {provider.version} using Mastodon server {provider.server}")
        obj["provider"] = provider
    return provider


def get_state_store(ctx: typer.Context) -> StateStore:
    """Open the state file named by ``--state`` (default ``./tfmastodon.state.json``)."""
    obj = ctx.ensure_object(dict)
    path = obj.get("state_path") or DEFAULT_STATE_FILENAME
    return StateStore(Path(path))


@contextmanager
def handle_errors() -> Iterator[None]:
    """Print a :class:`TfMastodonError` and exit with its code."""
    try:
        yield
    except TfMastodonError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
