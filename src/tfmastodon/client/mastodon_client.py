"""Mastodon REST API client handle built on httpx.

This module provides :class:`MastodonClient`, the client handle handed out
by :class:`~tfmastodon.provider.MastodonProvider`. A handle is a plain value
bound to a server origin and a set of credentials:

- **server** -- the origin every request is sent to (``https://example.social``).
- **client_id / client_secret** -- the registered application's credentials,
  used by :meth:`MastodonClient.authenticate_app`.
- **access_token** -- sent as ``Authorization: Bearer <token>`` when set.

Handles hold no connection pool. Each call opens a short-lived
:class:`httpx.Client`, so handles are cheap to build and safe to share
between threads.

:func:`register_app` is a module-level function because registering an
application needs nothing but the server origin.

Error mapping follows the rest of the package: 401/403 raise
:class:`~tfmastodon.exceptions.AuthError`, 404 raises
:class:`~tfmastodon.exceptions.NotFoundError`, any other error status raises
:class:`~tfmastodon.exceptions.ServerError`, as does a success response whose
body does not have the expected shape, and network failures raise
:class:`~tfmastodon.exceptions.ConnectionError_`. The token exchange is the
exception: every failure there raises
:class:`~tfmastodon.exceptions.AuthenticationExchangeFailed`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from tfmastodon.exceptions import (
    AuthenticationExchangeFailed,
    AuthError,
    ConnectionError_,
    NotFoundError,
    ServerError,
)
from tfmastodon.models import Account, Application, Instance

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"
"""Out-of-band redirect URI used when no callback URL exists."""


class MastodonClient:
    """Client handle for one Mastodon server and one set of credentials.

    Args:
        server: Server origin, ``scheme://domain``.
        client_id: OAuth client id of a registered application.
        client_secret: OAuth client secret of a registered application.
        access_token: Bearer token for authenticated calls. Empty means
            unauthenticated until :meth:`authenticate_app` succeeds.
        timeout: Per-request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        client = MastodonClient("https://example.social")
        instance = client.get_instance()
    """

    def __init__(
        self,
        server: str,
        client_id: str = "",
        client_secret: str = "",
        access_token: str = "",
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.server = server
        self.client_id = client_id
        self.client_secret = client_secret
        self.access_token = access_token
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport

    def __repr__(self) -> str:
        return (
            f"MastodonClient(server={self.server!r}, client_id={self.client_id!r}, "
            f"authenticated={bool(self.access_token)})"
        )

    # ------------------------------------------------------------------ #
    # OAuth
    # ------------------------------------------------------------------ #

    def authenticate_app(self) -> None:
        """Exchange the app's client credentials for an access token.

        Posts ``grant_type=client_credentials`` to ``/oauth/token`` and, on
        success, stores the returned token on this handle.

        Raises:
            AuthenticationExchangeFailed: On any transport error, error
                status, unparseable body, or a response without a
                non-empty ``access_token``. ``status_code`` is set when the
                server answered.
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "client_credentials",
            "redirect_uri": OOB_REDIRECT_URI,
        }
        logger.debug("Authenticating app %s against %s", self.client_id, self.server)
        try:
            with self._open() as http:
                response = http.post(
                    "/oauth/token",
                    data=data,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            raise AuthenticationExchangeFailed(str(exc)) from exc

        if response.is_error:
            raise AuthenticationExchangeFailed(
                _error_message("bad authorization", response),
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthenticationExchangeFailed(
                f"bad authorization: invalid token response: {exc}",
                status_code=response.status_code,
            ) from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AuthenticationExchangeFailed(
                "bad authorization: token response missing 'access_token' field",
                status_code=response.status_code,
            )
        self.access_token = token

    def verify_app_credentials(self) -> Application:
        """Check the access token against ``GET /api/v1/apps/verify_credentials``.

        Returns:
            The application the token belongs to. Mastodon omits the client
            credentials from this response.
        """
        return self._get(Application, "/api/v1/apps/verify_credentials")

    # ------------------------------------------------------------------ #
    # Read endpoints
    # ------------------------------------------------------------------ #

    def get_account(self, account_id: str) -> Account:
        """Fetch ``GET /api/v1/accounts/{account_id}``."""
        return self._get(Account, f"/api/v1/accounts/{account_id}")

    def get_instance(self) -> Instance:
        """Fetch the server's self-description from ``GET /api/v1/instance``."""
        return self._get(Instance, "/api/v1/instance")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _open(self) -> httpx.Client:
        return _open_client(self.server, self._timeout, self._verify_ssl, self._transport)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _get(self, model: type[_ModelT], path: str) -> _ModelT:
        try:
            with self._open() as http:
                response = http.get(path, headers=self._headers())
        except httpx.HTTPError as exc:
            raise ConnectionError_(f"GET {path} failed: {exc}") from exc
        return _parse_model(model, response)


def register_app(
    server: str,
    client_name: str,
    redirect_uris: str,
    scopes: str,
    website: str,
    timeout: float = 30.0,
    verify_ssl: bool = True,
    transport: Optional[httpx.BaseTransport] = None,
) -> Application:
    """Register a new OAuth application with ``POST /api/v1/apps``.

    Args:
        server: Server origin, ``scheme://domain``.
        client_name: Display name of the application.
        redirect_uris: Redirect URI(s), newline separated when several.
        scopes: Space-separated OAuth scopes.
        website: Homepage of the application.
        timeout: Per-request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional httpx transport.

    Returns:
        The registered :class:`~tfmastodon.models.Application`, including
        its ``client_id`` and ``client_secret``.
    """
    data = {
        "client_name": client_name,
        "redirect_uris": redirect_uris,
        "scopes": scopes,
        "website": website,
    }
    try:
        with _open_client(server, timeout, verify_ssl, transport) as http:
            response = http.post(
                "/api/v1/apps",
                data=data,
                headers={"Accept": "application/json"},
            )
    except httpx.HTTPError as exc:
        raise ConnectionError_(f"POST /api/v1/apps failed: {exc}") from exc
    return _parse_model(Application, response)


def _open_client(
    server: str,
    timeout: float,
    verify_ssl: bool,
    transport: Optional[httpx.BaseTransport],
) -> httpx.Client:
    kwargs: dict[str, Any] = {
        "base_url": server,
        "timeout": timeout,
        "verify": verify_ssl,
        "follow_redirects": True,
    }
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.Client(**kwargs)


def _error_message(prefix: str, response: httpx.Response) -> str:
    """Render ``<prefix>: <status> <reason>: <detail>`` for an error response."""
    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = detail.get("error_description") or detail.get("error") or ""
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""

    status = f"{response.status_code} {response.reason_phrase}".strip()
    return f"{prefix}: {status}: {msg}" if msg else f"{prefix}: {status}"


def _parse_response(response: httpx.Response) -> Any:
    """Raise a typed exception for error statuses, else return the JSON body."""
    status = response.status_code
    if status >= 400:
        msg = _error_message("bad request", response)
        if status in (401, 403):
            raise AuthError(msg, status_code=status)
        if status == 404:
            raise NotFoundError(msg, status_code=status)
        raise ServerError(msg, status_code=status)

    try:
        return response.json()
    except ValueError as exc:
        raise ServerError(
            f"Invalid JSON in response from {response.request.url}: {exc}",
            status_code=status,
        ) from exc


def _parse_model(model: type[_ModelT], response: httpx.Response) -> _ModelT:
    """Parse a successful response body into *model*.

    A body that does not match the expected shape raises
    :class:`~tfmastodon.exceptions.ServerError` like any other bad response.
    """
    payload = _parse_response(response)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ServerError(
            f"Unexpected response from {response.request.url}: {exc}",
            status_code=response.status_code,
        ) from exc
