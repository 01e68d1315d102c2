"""Tests for MastodonClient and register_app using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from tfmastodon.client import OOB_REDIRECT_URI, MastodonClient, register_app
from tfmastodon.exceptions import (
    AuthenticationExchangeFailed,
    AuthError,
    ConnectionError_,
    NotFoundError,
    ServerError,
)

SERVER = "http://mastodon.test"


def _client(fake, **kwargs) -> MastodonClient:
    return MastodonClient(SERVER, transport=fake.transport, **kwargs)


class TestAuthenticateApp:
    def test_success_stores_token(self, fake_mastodon) -> None:
        client = _client(fake_mastodon, client_id="cid", client_secret="secret")
        client.authenticate_app()

        assert client.access_token == "app-token"
        request = fake_mastodon.calls("POST", "/oauth/token")[0]
        form = dict(httpx.QueryParams(request.content.decode()))
        assert form == {
            "client_id": "cid",
            "client_secret": "secret",
            "grant_type": "client_credentials",
            "redirect_uri": OOB_REDIRECT_URI,
        }

    def test_error_status_message(self, fake_mastodon) -> None:
        fake_mastodon.respond(
            "POST",
            "/oauth/token",
            {"error": "invalid_client", "error_description": "Client authentication failed"},
            status_code=401,
        )
        client = _client(fake_mastodon, client_id="cid", client_secret="bad")

        with pytest.raises(AuthenticationExchangeFailed) as exc_info:
            client.authenticate_app()

        assert str(exc_info.value) == (
            "bad authorization: 401 Unauthorized: Client authentication failed"
        )
        assert exc_info.value.status_code == 401
        assert exc_info.value.exit_code == 3
        assert client.access_token == ""

    def test_non_json_body(self, fake_mastodon) -> None:
        fake_mastodon.routes[("POST", "/oauth/token")] = lambda request: httpx.Response(
            200, text="<html>oops</html>"
        )
        client = _client(fake_mastodon)

        with pytest.raises(AuthenticationExchangeFailed, match="invalid token response"):
            client.authenticate_app()

    def test_missing_token_field(self, fake_mastodon) -> None:
        fake_mastodon.respond("POST", "/oauth/token", {"token_type": "Bearer"})

        with pytest.raises(AuthenticationExchangeFailed, match="access_token"):
            _client(fake_mastodon).authenticate_app()

    def test_transport_error(self, fake_mastodon) -> None:
        fake_mastodon.fail("POST", "/oauth/token")

        with pytest.raises(AuthenticationExchangeFailed) as exc_info:
            _client(fake_mastodon).authenticate_app()

        assert exc_info.value.status_code is None


class TestReadEndpoints:
    def test_get_account(self, fake_mastodon) -> None:
        account = _client(fake_mastodon).get_account("1")
        assert account.username == "user"
        assert account.acct == "user"
        assert account.discoverable is True
        assert account.created_at.year == 2019

    def test_get_account_not_found(self, fake_mastodon) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            _client(fake_mastodon).get_account("404")
        assert exc_info.value.status_code == 404
        assert "Record not found" in str(exc_info.value)

    def test_get_instance(self, fake_mastodon) -> None:
        instance = _client(fake_mastodon).get_instance()
        assert instance.uri == "example.com"
        assert instance.version == "1.2.4"

    def test_unauthenticated_requests_send_no_bearer(self, fake_mastodon) -> None:
        _client(fake_mastodon).get_instance()
        request = fake_mastodon.calls("GET", "/api/v1/instance")[0]
        assert "Authorization" not in request.headers

    def test_bearer_header_sent_when_token_set(self, fake_mastodon) -> None:
        _client(fake_mastodon, access_token="app-token").verify_app_credentials()
        request = fake_mastodon.calls("GET", "/api/v1/apps/verify_credentials")[0]
        assert request.headers["Authorization"] == "Bearer app-token"

    def test_verify_credentials(self, fake_mastodon) -> None:
        app = _client(fake_mastodon, access_token="app-token").verify_app_credentials()
        assert app.name == "test app"
        assert app.client_secret == ""

    def test_verify_credentials_rejected(self, fake_mastodon) -> None:
        with pytest.raises(AuthError) as exc_info:
            _client(fake_mastodon, access_token="stale").verify_app_credentials()
        assert exc_info.value.status_code == 401
        assert str(exc_info.value).startswith("bad request: 401")

    def test_server_error(self, fake_mastodon) -> None:
        fake_mastodon.respond("GET", "/api/v1/instance", {"error": "boom"}, status_code=503)
        with pytest.raises(ServerError) as exc_info:
            _client(fake_mastodon).get_instance()
        assert exc_info.value.status_code == 503

    def test_connection_error(self, fake_mastodon) -> None:
        fake_mastodon.fail("GET", "/api/v1/instance")
        with pytest.raises(ConnectionError_, match="GET /api/v1/instance failed"):
            _client(fake_mastodon).get_instance()

    def test_invalid_json(self, fake_mastodon) -> None:
        fake_mastodon.routes[("GET", "/api/v1/instance")] = lambda request: httpx.Response(
            200, text="not json"
        )
        with pytest.raises(ServerError, match="Invalid JSON"):
            _client(fake_mastodon).get_instance()

    def test_repr_hides_credentials(self) -> None:
        text = repr(MastodonClient(SERVER, client_id="cid", client_secret="s3cret", access_token="tok"))
        assert "s3cret" not in text
        assert "tok" not in text
        assert "authenticated=True" in text


class TestRegisterApp:
    def test_posts_form_and_returns_application(self, fake_mastodon) -> None:
        app = register_app(
            SERVER,
            client_name="test app",
            redirect_uris=OOB_REDIRECT_URI,
            scopes="read write",
            website="https://example.com/",
            transport=fake_mastodon.transport,
        )

        assert app.id == "563419"
        assert app.client_id == "TWhM-tNSuncnqN7DBJmoyeLnk6K3iJJ71KKXxgL1hPM"
        request = fake_mastodon.calls("POST", "/api/v1/apps")[0]
        form = dict(httpx.QueryParams(request.content.decode()))
        assert form["client_name"] == "test app"
        assert form["scopes"] == "read write"
        assert form["website"] == "https://example.com/"

    def test_error_status(self, fake_mastodon) -> None:
        fake_mastodon.respond(
            "POST", "/api/v1/apps", {"error": "Validation failed"}, status_code=422
        )
        with pytest.raises(ServerError, match="Validation failed"):
            register_app(
                SERVER, "x", OOB_REDIRECT_URI, "read", "", transport=fake_mastodon.transport
            )


class TestUnexpectedBodies:
    def test_null_string_field(self, fake_mastodon) -> None:
        fake_mastodon.respond(
            "GET",
            "/api/v1/accounts/1",
            {"id": "1", "username": "user", "display_name": None, "created_at": "2019-06-09T00:00:00.000Z"},
        )
        with pytest.raises(ServerError, match="Unexpected response from") as exc_info:
            _client(fake_mastodon).get_account("1")
        assert exc_info.value.status_code == 200

    def test_instance_without_uri(self, fake_mastodon) -> None:
        fake_mastodon.respond("GET", "/api/v1/instance", {"title": "x"})
        with pytest.raises(ServerError, match="/api/v1/instance"):
            _client(fake_mastodon).get_instance()

    def test_verify_credentials_non_object(self, fake_mastodon) -> None:
        fake_mastodon.respond("GET", "/api/v1/apps/verify_credentials", "ok")
        with pytest.raises(ServerError, match="Unexpected response"):
            _client(fake_mastodon, access_token="app-token").verify_app_credentials()

    def test_register_app_list_body(self, fake_mastodon) -> None:
        fake_mastodon.respond("POST", "/api/v1/apps", [])
        with pytest.raises(ServerError, match="Unexpected response"):
            register_app(SERVER, "x", OOB_REDIRECT_URI, "read", "", transport=fake_mastodon.transport)
