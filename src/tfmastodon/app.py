"""The ``tfmastodon`` command line.

Builds the Typer application, attaches the sub-commands (``schema``,
``account``, ``instance``, ``app``, ``auth``) and exposes :func:`main`, the
console-script entry point from ``pyproject.toml``.

Global options are parsed once in :func:`main_callback`; they select the
output format, configure logging, and leave the connection settings in
``ctx.obj`` for :func:`~tfmastodon.commands.context.get_provider`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from tfmastodon import __version__
from tfmastodon.exit_codes import EXIT_GENERIC_FAILURE

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="tfmastodon",
    help="Read Mastodon accounts and instances, and register OAuth applications.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tfmastodon {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print the version and exit."
    ),
    domain: Optional[str] = typer.Option(
        None, "--domain", "-d", help="Instance domain, e.g. mastodon.social."
    ),
    use_https: Optional[bool] = typer.Option(
        None, "--use-https/--no-https", help="Talk to the instance over https (default) or http."
    ),
    state_path: Optional[str] = typer.Option(
        None, "--state", help="Resource state file (default ./tfmastodon.state.json)."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print data as name<TAB>value lines."),
    no_color: bool = typer.Option(False, "--no-color", help="No colour or markup."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print data, warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug messages and logs."),
) -> None:
    """Mastodon provider operations from the command line."""
    from tfmastodon.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj.update(domain=domain, use_https=use_https, state_path=state_path, verbose=verbose)


def _configure_logging(verbose: bool) -> None:
    """Send ``tfmastodon`` log records to stderr, at DEBUG when verbose."""
    logger = logging.getLogger("tfmastodon")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _register_commands() -> None:
    from tfmastodon.commands import (
        account_command,
        app_app,
        auth_app,
        instance_command,
        schema_command,
    )

    app.command("schema")(schema_command)
    app.command("account")(account_command)
    app.command("instance")(instance_command)
    app.add_typer(app_app, name="app", help="Manage mastodon_register_app resources.")
    app.add_typer(auth_app, name="auth", help="Check application credentials.")


_register_commands()


def _on_sigint(signum: int, frame: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> str:
    """Save the current traceback under the data directory and return its path."""
    from tfmastodon.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    A :class:`~tfmastodon.exceptions.TfMastodonError` that escapes a command
    exits with its ``exit_code``; anything else leaves a crash log and
    exits with :data:`~tfmastodon.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    from tfmastodon.exceptions import TfMastodonError
    from tfmastodon.output import error

    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except TfMastodonError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
