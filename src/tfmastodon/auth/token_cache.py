"""In-memory access-token cache for one provider instance.

:class:`AccessTokenCache` holds the single app access token a
:class:`~tfmastodon.provider.MastodonProvider` obtains from the
client-credentials exchange, so that every later data source or resource
call can reuse it instead of authenticating again.

Two locks are involved:

- ``_lock`` guards the token field itself and is only ever held for a
  load or a store, so readers never wait on the network.
- ``_exchange_lock`` is held by whichever thread is performing the
  exchange. Threads that miss the cache queue on it and re-check the
  cache once they get it, so concurrent misses collapse into a single
  exchange.

Nothing here is persisted; the cache lives as long as the provider.
"""

from __future__ import annotations

import threading


class AccessTokenCache:
    """Thread-safe holder for one optional access token.

    An empty string means "no token". :meth:`set` refuses empty tokens so
    that a failed or malformed exchange can never leave a value that reads
    as present.

    Example::

        cache = AccessTokenCache()
        if not cache.get():
            with cache.exchange_lock:
                if not cache.get():
                    cache.set(fetch_token())
    """

    def __init__(self) -> None:
        self._token = ""
        self._lock = threading.Lock()
        self._exchange_lock = threading.Lock()

    @property
    def exchange_lock(self) -> threading.Lock:
        """Lock serialising token exchanges for this cache."""
        return self._exchange_lock

    def get(self) -> str:
        """Return the cached token, or ``""`` when none is cached."""
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        """Store *token*, replacing any previous value.

        Raises:
            ValueError: If *token* is empty.
        """
        if not token:
            raise ValueError("refusing to cache an empty access token")
        with self._lock:
            self._token = token
