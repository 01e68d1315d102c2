"""Data source commands -- ``tfmastodon account`` and ``tfmastodon instance``.

Each command reads one data source and prints its attributes::

    tfmastodon --domain example.social account 109302
    tfmastodon --domain example.social --json instance
"""

from __future__ import annotations

import typer

from tfmastodon.commands.context import get_provider, handle_errors
from tfmastodon.datasources import AccountDataSource, InstanceSelfDataSource
from tfmastodon.models import AccountData, InstanceSelfData
from tfmastodon.output import print_attributes


def account_command(
    ctx: typer.Context,
    account_id: str = typer.Argument(help="Account id on the configured instance."),
) -> None:
    """Read the mastodon_account data source."""
    with handle_errors():
        provider = get_provider(ctx)
        data = provider.new_data_source(AccountDataSource.type_name).read(
            AccountData(id=account_id)
        )
    print_attributes(data.model_dump(), title=f"data.{AccountDataSource.type_name}")


def instance_command(ctx: typer.Context) -> None:
    """Read the mastodon_instance_self data source."""
    with handle_errors():
        provider = get_provider(ctx)
        data = provider.new_data_source(InstanceSelfDataSource.type_name).read(
            InstanceSelfData()
        )
    print_attributes(data.model_dump(), title=f"data.{InstanceSelfDataSource.type_name}")
