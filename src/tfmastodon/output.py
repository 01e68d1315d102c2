"""Terminal output for the tfmastodon CLI.

Data and diagnostics never share a stream:

* **stdout** carries what a command reads or creates (data source
  attributes, resource state, schemas) so it can be piped into ``jq`` or
  ``cut``.
* **stderr** carries everything addressed to the person at the keyboard:
  confirmations, warnings, errors, next-step hints, debug chatter.

Three renderings are available for data. ``rich`` draws tables and is picked
automatically on a colour-capable TTY, ``plain`` prints ``name<TAB>value``
lines, and ``json`` prints the attribute map as a JSON object. Colour is off
when ``--no-color`` is given, ``NO_COLOR`` is set, or ``TERM=dumb``.

Commands use the module-level functions (:func:`print_attributes`,
:func:`error`, ...), which forward to the :class:`OutputManager` installed by
:func:`~tfmastodon.app.main_callback`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from tfmastodon.models import Attribute, Schema


class OutputFormat(str, Enum):
    """How data is rendered on stdout. ``AUTO`` picks ``RICH`` or ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Render attributes and schemas on stdout, diagnostics on stderr.

    Args:
        format: Data rendering. ``AUTO`` becomes ``RICH`` when stdout is a
            TTY and colour is allowed, otherwise ``PLAIN``.
        no_color: Turn off colour and Rich markup.
        quiet: Drop confirmations and hints. Warnings and errors still print.
        verbose: Print debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._plain_text = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose

        if format is OutputFormat.AUTO:
            rich_ok = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
            format = OutputFormat.RICH if rich_ok and not self._plain_text else OutputFormat.PLAIN
        self._format = format

        self._data_console = Console(
            file=sys.stdout,
            no_color=self._plain_text,
            force_terminal=format is OutputFormat.RICH,
        )
        self._diag_console = Console(file=sys.stderr, no_color=self._plain_text, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # -- stdout ---------------------------------------------------------

    def print_attributes(self, attributes: dict[str, Any], title: Optional[str] = None) -> None:
        """Print the attributes of one data source read or resource state.

        Nested objects such as ``app_config`` are flattened to dotted names
        in the table and plain renderings. *title* is only shown in tables.
        """
        if self._format is OutputFormat.JSON:
            self.print_data(json.dumps(attributes, indent=2, ensure_ascii=False, default=str))
            return

        rows = [(name, _render_value(value)) for name, value in _flatten(attributes)]
        self._emit_rows(rows, ("attribute", "value"), title)

    def print_schema(self, type_name: str, schema: Schema) -> None:
        """Print the attribute schema of the provider, a data source or a resource."""
        if self._format is OutputFormat.JSON:
            payload = {"type_name": type_name, **schema.model_dump(mode="json")}
            self.print_data(json.dumps(payload, indent=2, ensure_ascii=False))
            return

        if self._format is OutputFormat.PLAIN:
            self.print_data(type_name)
        rows = [
            (attr.name, attr.type, _attribute_mode(attr), attr.description)
            for attr in schema.attributes
        ]
        title = f"{type_name} -- {schema.description}" if schema.description else type_name
        self._emit_rows(rows, ("attribute", "type", "mode", "description"), title)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def _emit_rows(
        self,
        rows: list[tuple[str, ...]],
        headers: tuple[str, ...],
        title: Optional[str],
    ) -> None:
        if self._format is OutputFormat.PLAIN:
            for row in rows:
                self.print_data("\t".join(row))
            return

        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*row)
        self._data_console.print(table)

    # -- stderr ---------------------------------------------------------

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diag(message, style="green")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._diag(f"→ {message}", style="dim")

    def warning(self, message: str) -> None:
        self._diag(message, label="Warning:", style="yellow")

    def error(self, message: str) -> None:
        self._diag(message, label="Error:", style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diag(f"[debug] {message}", style="dim")

    def _diag(self, message: str, label: str = "", style: str = "") -> None:
        if self._plain_text:
            text = f"{label} {message}" if label else message
            print(text, file=sys.stderr, flush=True)
            return
        if label:
            self._diag_console.print(f"[{style}]{label}[/{style}] {message}", highlight=False)
        else:
            self._diag_console.print(message, style=style or None, markup=False, highlight=False)


def _color_disabled_by_env() -> bool:
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _flatten(attributes: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    items: list[tuple[str, Any]] = []
    for name, value in attributes.items():
        key = f"{prefix}{name}"
        if isinstance(value, dict):
            items.extend(_flatten(value, prefix=f"{key}."))
        else:
            items.append((key, value))
    return items


def _render_value(value: Any) -> str:
    # Terraform renders booleans lowercase and null as an empty string.
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)


def _attribute_mode(attr: Attribute) -> str:
    if attr.required:
        return "required"
    if attr.optional and attr.computed:
        return "optional, computed"
    return "optional" if attr.optional else "computed"


# -- global instance ------------------------------------------------------

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Tests call this between CLI invocations."""
    global _output
    _output = None


def print_attributes(attributes: dict[str, Any], title: Optional[str] = None) -> None:
    get_output().print_attributes(attributes, title)


def print_schema(type_name: str, schema: Schema) -> None:
    get_output().print_schema(type_name, schema)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
