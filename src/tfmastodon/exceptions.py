"""Exception hierarchy for tfmastodon.

All exceptions inherit from :class:`TfMastodonError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tfmastodon.exit_codes`
and, for errors raised from an HTTP response, the response's
``status_code``. The top-level error handler in :func:`tfmastodon.app.main`
catches ``TfMastodonError`` and exits with the appropriate code, while
unexpected exceptions produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    TfMastodonError (exit 1)
    +-- InvalidUsageError                 (exit 2)
    +-- AuthError                         (exit 3)
    |   +-- AuthenticationExchangeFailed  (exit 3)
    +-- NotFoundError                     (exit 4)
    +-- ServerError                       (exit 5)
    +-- ConnectionError_                  (exit 6)
    +-- ConfigError                       (exit 1)
    +-- DataSourceError                   (exit 1)
    +-- ResourceError                     (exit 1)
"""

from tfmastodon.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class TfMastodonError(Exception):
    """Base exception for all tfmastodon errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`tfmastodon.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
        status_code: HTTP status of the response that caused the error,
            when there was one.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code
        self.status_code = status_code


class InvalidUsageError(TfMastodonError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(TfMastodonError):
    """Raised when the instance rejects credentials (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class AuthenticationExchangeFailed(AuthError):
    """Raised when the app-authentication exchange at ``/oauth/token`` fails.

    The message is the underlying transport or HTTP error text, passed
    through unchanged to whoever asked for an authenticated client.
    """


class NotFoundError(TfMastodonError):
    """Raised when the instance returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(TfMastodonError):
    """Raised for any other HTTP error status returned by the instance."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(TfMastodonError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(TfMastodonError):
    """Raised for configuration problems (missing domain, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class DataSourceError(TfMastodonError):
    """Raised when a data source cannot be read."""

    exit_code = EXIT_GENERIC_FAILURE


class ResourceError(TfMastodonError):
    """Raised when a resource lifecycle operation fails."""

    exit_code = EXIT_GENERIC_FAILURE
