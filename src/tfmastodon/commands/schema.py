"""``tfmastodon schema`` -- describe the provider, data sources, and resources."""

from __future__ import annotations

from typing import Optional

import typer

from tfmastodon.commands.context import handle_errors
from tfmastodon.exceptions import InvalidUsageError
from tfmastodon.output import print_schema
from tfmastodon.provider import PROVIDER_TYPE_NAME, MastodonProvider


def schema_command(
    type_name: Optional[str] = typer.Argument(
        None, help="Only show this type (e.g. mastodon_register_app)."
    ),
) -> None:
    """Print attribute schemas.

    With no argument, prints the provider block followed by every data
    source and resource.
    """
    schemas = {PROVIDER_TYPE_NAME: MastodonProvider.schema()}
    for name, cls in MastodonProvider.data_sources().items():
        schemas[name] = cls.schema()
    for name, cls in MastodonProvider.resources().items():
        schemas[name] = cls.schema()

    with handle_errors():
        if type_name is not None:
            if type_name not in schemas:
                available = ", ".join(sorted(schemas))
                raise InvalidUsageError(f"Unknown type '{type_name}'. Available: {available}")
            schemas = {type_name: schemas[type_name]}

    for name, schema in schemas.items():
        print_schema(name, schema)
