"""HTTP client module for tfmastodon.

Provides :class:`MastodonClient`, the client handle bound to a server origin
and a set of app credentials, and :func:`register_app` for creating new
OAuth applications. Both wrap :mod:`httpx` and map error responses onto
the :mod:`tfmastodon.exceptions` hierarchy.

Example::

    from tfmastodon.client import MastodonClient

    client = MastodonClient("https://example.social", access_token=token)
    account = client.get_account("1")
"""

from tfmastodon.client.mastodon_client import OOB_REDIRECT_URI, MastodonClient, register_app

__all__ = ["MastodonClient", "OOB_REDIRECT_URI", "register_app"]
