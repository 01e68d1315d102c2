"""The ``mastodon_account`` data source."""

from __future__ import annotations

from datetime import datetime, timezone

from tfmastodon.datasources.base import DataSource
from tfmastodon.exceptions import DataSourceError, TfMastodonError
from tfmastodon.models import AccountData, Attribute, Schema


class AccountDataSource(DataSource):
    """Read public information about one account by its id.

    The lookup is unauthenticated, so it only sees what the instance shows
    to anonymous visitors.
    """

    type_name = "mastodon_account"

    @classmethod
    def schema(cls) -> Schema:
        return Schema(
            description="Get account info",
            attributes=[
                Attribute(name="id", type="string", description="identifier", required=True),
                Attribute(name="username", type="string", description="Username", computed=True),
                Attribute(
                    name="account",
                    type="string",
                    description="Webfinger account name (acct)",
                    computed=True,
                ),
                Attribute(name="display_name", type="string", description="Display name", computed=True),
                Attribute(name="created_at", type="string", description="Account creation time", computed=True),
                Attribute(name="url", type="string", description="Profile URL", computed=True),
                Attribute(
                    name="discoverable",
                    type="bool",
                    description="Whether the account is listed in the profile directory",
                    computed=True,
                ),
            ],
        )

    def read(self, config: AccountData) -> AccountData:
        client = self.provider.new_unauthenticated_client()
        try:
            account = client.get_account(config.id)
        except TfMastodonError as exc:
            raise DataSourceError(
                f"Unable to read account, got error: {exc}",
                exit_code=exc.exit_code,
                status_code=exc.status_code,
            ) from exc

        return config.model_copy(
            update={
                "username": account.username,
                "account": account.acct,
                "display_name": account.display_name,
                "created_at": format_timestamp(account.created_at),
                "url": account.url,
                "discoverable": bool(account.discoverable),
            }
        )


def format_timestamp(value: datetime) -> str:
    """Render *value* in UTC as ``2019-06-09 00:00:00 +0000 UTC``.

    Fractional seconds are included only when non-zero, with trailing zeros
    trimmed. Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)

    text = value.strftime("%Y-%m-%d %H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    return f"{text} +0000 UTC"
