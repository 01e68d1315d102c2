"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tfmastodon.exceptions.TfMastodonError` subclass.
Wrapper scripts can inspect the exit code to tell an unreachable instance
apart from rejected app credentials without parsing stderr.

Example::

    $ tfmastodon app read bot
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the instance rejected the app credentials
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed."""

EXIT_NOT_FOUND = 4
"""The requested account or endpoint was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The instance returned an HTTP error status other than 401/403/404."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
