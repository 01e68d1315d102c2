"""Access-token caching for authenticated Mastodon clients.

The provider keeps one :class:`AccessTokenCache` per configured instance;
:meth:`~tfmastodon.provider.MastodonProvider.new_authenticated_client`
consults it before performing the OAuth client-credentials exchange.
"""

from tfmastodon.auth.token_cache import AccessTokenCache

__all__ = ["AccessTokenCache"]
