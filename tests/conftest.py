"""Shared test fixtures for tfmastodon.

Provides a fake Mastodon instance served through :class:`httpx.MockTransport`,
a provider configured against it, config isolation, and output resets.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from tfmastodon.models import ProviderConfig
from tfmastodon.output import OutputFormat, OutputManager, reset_output, set_output
from tfmastodon.provider import MastodonProvider


ACCOUNT_JSON: dict[str, Any] = {
    "id": "1",
    "username": "user",
    "acct": "user",
    "display_name": "Cool Dude",
    "created_at": "2019-06-09T00:00:00.000Z",
    "url": "https://example.com/user/tyr",
    "discoverable": True,
}

INSTANCE_JSON: dict[str, Any] = {
    "email": "user@example.com",
    "thumbnail": "https://example.com/image.jpg",
    "title": "Example Title",
    "uri": "example.com",
    "version": "1.2.4",
}

APP_JSON: dict[str, Any] = {
    "id": "563419",
    "name": "test app",
    "website": "https://example.com/",
    "redirect_uri": "urn:ietf:wg:oauth:2.0:oob",
    "client_id": "TWhM-tNSuncnqN7DBJmoyeLnk6K3iJJ71KKXxgL1hPM",
    "client_secret": "ZEaFUFmF0umgBX1qKJDjaU99Q31lDkOU8NutzTOoliw",
    "vapid_key": "BCk-QqERU0q-CfYZjcuB6lnyyOYfJ2AifKqfeGIm7Z-HiTU5T9eTG5GxVA0_OH5mMlI4UkkDTpaZwozy0TzdZ2M=",
}


# ---------------------------------------------------------------------------
# Fake Mastodon instance
# ---------------------------------------------------------------------------


class FakeMastodon:
    """Minimal in-memory Mastodon API behind an httpx transport.

    Records every request in :attr:`requests` (thread-safe) and answers the
    endpoints the provider uses. Individual routes can be overridden by
    assigning a handler to :attr:`routes`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token = "app-token"
        self.token_delay = 0.0
        self.valid_tokens: set[str] = {"app-token"}
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self._lock = threading.Lock()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def respond(self, method: str, path: str, data: Any, status_code: int = 200) -> None:
        """Answer *method* *path* with a fixed JSON response."""
        self.routes[(method, path)] = lambda request: httpx.Response(status_code, json=data)

    def fail(self, method: str, path: str, exc: Optional[Exception] = None) -> None:
        """Make *method* *path* raise a transport error."""

        def _handler(request: httpx.Request) -> httpx.Response:
            raise exc or httpx.ConnectError("connection refused", request=request)

        self.routes[(method, path)] = _handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        with self._lock:
            return [
                r for r in self.requests if r.method == method and r.url.path == path
            ]

    def token_exchanges(self) -> int:
        return len(self.calls("POST", "/oauth/token"))

    def handle(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)

        override = self.routes.get((request.method, request.url.path))
        if override is not None:
            return override(request)

        path = request.url.path
        if request.method == "POST" and path == "/oauth/token":
            if self.token_delay:
                time.sleep(self.token_delay)
            return httpx.Response(
                200,
                json={"access_token": self.token, "token_type": "Bearer", "scope": "read", "created_at": 0},
            )
        if request.method == "GET" and path == "/api/v1/instance":
            return httpx.Response(200, json=INSTANCE_JSON)
        if request.method == "GET" and path.startswith("/api/v1/accounts/"):
            account_id = path.rsplit("/", 1)[-1]
            if account_id != ACCOUNT_JSON["id"]:
                return httpx.Response(404, json={"error": "Record not found"})
            return httpx.Response(200, json=ACCOUNT_JSON)
        if request.method == "POST" and path == "/api/v1/apps":
            return httpx.Response(200, json=APP_JSON)
        if request.method == "GET" and path == "/api/v1/apps/verify_credentials":
            auth = request.headers.get("Authorization", "")
            if auth.removeprefix("Bearer ") not in self.valid_tokens:
                return httpx.Response(401, json={"error": "The access token is invalid"})
            return httpx.Response(
                200, json={"name": APP_JSON["name"], "website": APP_JSON["website"]}
            )
        return httpx.Response(404, json={"error": "Not found"})


@pytest.fixture
def fake_mastodon() -> FakeMastodon:
    """A fresh fake Mastodon instance."""
    return FakeMastodon()


@pytest.fixture
def provider(fake_mastodon: FakeMastodon) -> MastodonProvider:
    """A provider configured for ``http://mastodon.test`` backed by :func:`fake_mastodon`."""
    prov = MastodonProvider(version="test", transport=fake_mastodon.transport)
    prov.configure(ProviderConfig(domain="mastodon.test", use_https=False))
    return prov


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale, so a fresh manager is created on next use.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME into tmp_path, clears the MASTODON_* environment
    variables, and changes the working directory to tmp_path so project
    config and state files land there.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["MASTODON_DOMAIN", "MASTODON_USE_HTTPS"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
