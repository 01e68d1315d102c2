"""The Mastodon provider: configuration, client acquisition, and type registry.

:class:`MastodonProvider` is the long-lived object every data source and
resource shares. It is configured once with a
:class:`~tfmastodon.models.ProviderConfig` and then hands out
:class:`~tfmastodon.client.MastodonClient` handles bound to the configured
server origin.

Authenticated clients go through :meth:`MastodonProvider.new_authenticated_client`,
which checks, in order:

1. an explicit access token supplied by the caller,
2. the provider's cached app token,
3. a fresh client-credentials exchange, whose token is then cached.

The cache is an :class:`~tfmastodon.auth.AccessTokenCache` created by
:meth:`~MastodonProvider.configure` and kept for the provider's lifetime.

See Also:
    :mod:`tfmastodon.datasources` and :mod:`tfmastodon.resources` for the
    types registered here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import httpx

from tfmastodon.auth import AccessTokenCache
from tfmastodon.client import MastodonClient
from tfmastodon.exceptions import ConfigError, InvalidUsageError
from tfmastodon.models import Attribute, ProviderConfig, Schema

if TYPE_CHECKING:
    from tfmastodon.datasources.base import DataSource
    from tfmastodon.resources.base import Resource

logger = logging.getLogger(__name__)

PROVIDER_TYPE_NAME = "mastodon"


class MastodonProvider:
    """Provider instance holding connection settings and the token cache.

    Args:
        version: Provider version string, reported by the CLI.
        transport: Optional httpx transport passed to every client this
            provider builds (tests use :class:`httpx.MockTransport`).

    Example::

        provider = MastodonProvider()
        provider.configure(ProviderConfig(domain="example.social"))
        client = provider.new_authenticated_client(client_id, client_secret)
    """

    def __init__(
        self,
        version: str = "dev",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.version = version
        self._transport = transport
        self._config: Optional[ProviderConfig] = None
        self._token_cache = AccessTokenCache()

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def configure(self, config: ProviderConfig) -> None:
        """Store the connection settings and start with an empty token cache."""
        self._config = config
        self._token_cache = AccessTokenCache()
        logger.debug("Configured provider for %s", config.server)

    @property
    def configured(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> ProviderConfig:
        if self._config is None:
            raise ConfigError("Provider has not been configured")
        return self._config

    @property
    def domain(self) -> str:
        return self.config.domain

    @property
    def scheme(self) -> str:
        return self.config.scheme

    @property
    def server(self) -> str:
        """Server origin, ``scheme://domain``."""
        return self.config.server

    @property
    def transport(self) -> Optional[httpx.BaseTransport]:
        return self._transport

    def get_access_token(self) -> str:
        """Return the cached app access token, or ``""``."""
        return self._token_cache.get()

    # ------------------------------------------------------------------ #
    # Clients
    # ------------------------------------------------------------------ #

    def new_authenticated_client(
        self,
        client_id: str,
        client_secret: str,
        access_token: str = "",
    ) -> MastodonClient:
        """Return a client able to make authenticated calls.

        An explicit *access_token* is used as-is, without touching the cache
        or the network. Otherwise the cached app token is reused. On a cache
        miss the client-credentials exchange runs once, under the cache's
        exchange lock, and its token is cached for every later call.

        The cache holds one token per provider, whichever app obtained it.

        Raises:
            AuthenticationExchangeFailed: The exchange failed. The exception
                from the client propagates unchanged and the cache is left
                empty.
            ConfigError: The provider has not been configured.
        """
        if access_token:
            return self._new_client(client_id, client_secret, access_token)

        cached = self._token_cache.get()
        if cached:
            logger.debug("Using cached access token for %s", self.server)
            return self._new_client(client_id, client_secret, cached)

        with self._token_cache.exchange_lock:
            # Another caller may have completed the exchange while we waited.
            cached = self._token_cache.get()
            if cached:
                logger.debug("Access token cached by a concurrent exchange for %s", self.server)
                return self._new_client(client_id, client_secret, cached)

            client = self._new_client(client_id, client_secret)
            client.authenticate_app()
            self._token_cache.set(client.access_token)
            logger.debug("Cached new access token for %s", self.server)

        return client

    def new_unauthenticated_client(self) -> MastodonClient:
        """Return a client bound only to the server origin."""
        return self._new_client()

    def _new_client(
        self,
        client_id: str = "",
        client_secret: str = "",
        access_token: str = "",
    ) -> MastodonClient:
        config = self.config
        return MastodonClient(
            server=config.server,
            client_id=client_id,
            client_secret=client_secret,
            access_token=access_token,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            transport=self._transport,
        )

    # ------------------------------------------------------------------ #
    # Schema and registry
    # ------------------------------------------------------------------ #

    @staticmethod
    def schema() -> Schema:
        """Schema of the ``provider "mastodon"`` block."""
        return Schema(
            attributes=[
                Attribute(
                    name="domain",
                    type="string",
                    description="Domain",
                    required=True,
                ),
                Attribute(
                    name="use_https",
                    type="bool",
                    description="Should we use https to connect to the instance",
                    optional=True,
                ),
            ],
        )

    @staticmethod
    def data_sources() -> dict[str, type[DataSource]]:
        """Map of data source type names to their classes."""
        from tfmastodon.datasources.account import AccountDataSource
        from tfmastodon.datasources.instance_self import InstanceSelfDataSource

        return {
            AccountDataSource.type_name: AccountDataSource,
            InstanceSelfDataSource.type_name: InstanceSelfDataSource,
        }

    @staticmethod
    def resources() -> dict[str, type[Resource]]:
        """Map of resource type names to their classes."""
        from tfmastodon.resources.register_app import RegisterAppResource

        return {RegisterAppResource.type_name: RegisterAppResource}

    def new_data_source(self, type_name: str) -> DataSource:
        """Instantiate the data source registered as *type_name*, bound to this provider.

        Raises:
            InvalidUsageError: If no data source has that name.
        """
        registry = self.data_sources()
        cls = registry.get(type_name)
        if cls is None:
            available = ", ".join(sorted(registry)) or "(none)"
            raise InvalidUsageError(
                f"Unknown data source '{type_name}'. Available: {available}"
            )
        return cls(self)

    def new_resource(self, type_name: str) -> Resource:
        """Instantiate the resource registered as *type_name*, bound to this provider.

        Raises:
            InvalidUsageError: If no resource has that name.
        """
        registry = self.resources()
        cls = registry.get(type_name)
        if cls is None:
            available = ", ".join(sorted(registry)) or "(none)"
            raise InvalidUsageError(
                f"Unknown resource '{type_name}'. Available: {available}"
            )
        return cls(self)
