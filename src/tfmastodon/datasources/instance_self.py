"""The ``mastodon_instance_self`` data source."""

from __future__ import annotations

from tfmastodon.datasources.base import DataSource
from tfmastodon.exceptions import DataSourceError, TfMastodonError
from tfmastodon.models import Attribute, InstanceSelfData, Schema


class InstanceSelfDataSource(DataSource):
    """Read the configured instance's self-description.

    ``id`` is set to the instance URI, which is the only stable identifier
    the endpoint returns.
    """

    type_name = "mastodon_instance_self"

    @classmethod
    def schema(cls) -> Schema:
        return Schema(
            description="Instance self",
            attributes=[
                Attribute(name="id", type="string", description="identifier", computed=True),
                Attribute(name="email", type="string", description="Instance Contact Email", computed=True),
                Attribute(name="thumbnail", type="string", description="Instance Thumbnail", computed=True),
                Attribute(name="title", type="string", description="Instance Title", computed=True),
                Attribute(name="uri", type="string", description="Instance URI", computed=True),
                Attribute(name="version", type="string", description="Instance Version", computed=True),
            ],
        )

    def read(self, config: InstanceSelfData | None = None) -> InstanceSelfData:
        if config is None:
            config = InstanceSelfData()

        client = self.provider.new_unauthenticated_client()
        try:
            instance = client.get_instance()
        except TfMastodonError as exc:
            raise DataSourceError(
                f"Unable to read instance, got error: {exc}",
                exit_code=exc.exit_code,
                status_code=exc.status_code,
            ) from exc

        return config.model_copy(
            update={
                "id": instance.uri,
                "email": instance.email or "",
                "thumbnail": instance.thumbnail or "",
                "title": instance.title,
                "uri": instance.uri,
                "version": instance.version,
            }
        )
