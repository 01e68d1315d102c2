"""The ``mastodon_register_app`` resource.

Registers an OAuth application on the configured instance and records its
client credentials in state. Mastodon has no endpoint for changing or
removing an application, so:

- **update** registers a fresh application with the new inputs, replacing
  the credentials in state;
- **delete** only forgets the application; it stays registered on the
  instance until an admin removes it.

**read** checks that the stored credentials still work by obtaining an
authenticated client through the provider and calling
``/api/v1/apps/verify_credentials``. A 401 from either step means the
application is gone.
"""

from __future__ import annotations

import logging
from typing import Optional

from tfmastodon.client import OOB_REDIRECT_URI, register_app
from tfmastodon.exceptions import (
    AuthenticationExchangeFailed,
    ResourceError,
    TfMastodonError,
)
from tfmastodon.models import AppConfig, Application, Attribute, RegisterAppState, Schema
from tfmastodon.resources.base import Resource

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = "terraform-provider-mastodon"
DEFAULT_REDIRECT_URIS = OOB_REDIRECT_URI
DEFAULT_SCOPES = ("read", "write", "follow", "admin:read", "admin:write")
DEFAULT_WEBSITE = "https://github.com/feditools/terraform-provider-mastodon"


class RegisterAppResource(Resource):
    """Register an OAuth application and expose its credentials."""

    type_name = "mastodon_register_app"

    @classmethod
    def schema(cls) -> Schema:
        return Schema(
            description="Register Application",
            attributes=[
                Attribute(
                    name="client_name",
                    type="string",
                    description="Name to register application with",
                    optional=True,
                ),
                Attribute(
                    name="redirect_uris",
                    type="string",
                    description="Redirect URI to register application with",
                    optional=True,
                ),
                Attribute(
                    name="scopes",
                    type="list(string)",
                    description="OAuth scopes",
                    optional=True,
                ),
                Attribute(
                    name="website",
                    type="string",
                    description="Website for registered application",
                    optional=True,
                ),
                Attribute(name="id", type="string", description="identifier", computed=True),
                Attribute(
                    name="app_config",
                    type="object(client_id=string, client_secret=string, redirect_uri=string)",
                    description="Application auth config",
                    computed=True,
                    sensitive=True,
                ),
            ],
        )

    def create(self, plan: RegisterAppState) -> RegisterAppState:
        state = self._register(plan)
        logger.debug("created a resource: %s %s", self.type_name, state.id)
        return state

    def read(self, state: RegisterAppState) -> Optional[RegisterAppState]:
        if state.app_config is None:
            raise ResourceError(f"{self.type_name} state has no app_config to verify")

        try:
            client = self.provider.new_authenticated_client(
                state.app_config.client_id,
                state.app_config.client_secret,
            )
        except AuthenticationExchangeFailed as exc:
            if exc.status_code == 401:
                logger.info("Application %s rejected by %s; removing from state", state.id, self.provider.server)
                return None
            raise ResourceError(
                f"Unable to create new client, got error: {exc}",
                exit_code=exc.exit_code,
                status_code=exc.status_code,
            ) from exc

        try:
            client.verify_app_credentials()
        except TfMastodonError as exc:
            if exc.status_code == 401:
                logger.info("Application %s credentials no longer valid; removing from state", state.id)
                return None
            raise ResourceError(
                f"Unable to read application, got error: {exc}",
                exit_code=exc.exit_code,
                status_code=exc.status_code,
            ) from exc

        return state

    def update(self, plan: RegisterAppState, state: RegisterAppState) -> RegisterAppState:
        new_state = self._register(plan)
        logger.debug(
            "re-registered %s: %s replaces %s", self.type_name, new_state.id, state.id
        )
        return new_state

    def delete(self, state: RegisterAppState) -> None:
        logger.debug(
            "%s %s removed from state; the application stays registered on %s",
            self.type_name,
            state.id,
            self.provider.server,
        )

    def _register(self, plan: RegisterAppState) -> RegisterAppState:
        config = self.provider.config
        try:
            app = register_app(
                config.server,
                client_name=plan.client_name if plan.client_name is not None else DEFAULT_CLIENT_NAME,
                redirect_uris=plan.redirect_uris if plan.redirect_uris is not None else DEFAULT_REDIRECT_URIS,
                scopes=join_scopes(plan.scopes),
                website=plan.website if plan.website is not None else DEFAULT_WEBSITE,
                timeout=config.timeout,
                verify_ssl=config.verify_ssl,
                transport=self.provider.transport,
            )
        except TfMastodonError as exc:
            raise ResourceError(
                f"Unable to register application, got error: {exc}",
                exit_code=exc.exit_code,
                status_code=exc.status_code,
            ) from exc
        return _state_from_app(plan, app)


def join_scopes(scopes: Optional[list[str]]) -> str:
    """Join *scopes* with spaces, falling back to the default set when unset."""
    if scopes is None:
        return " ".join(DEFAULT_SCOPES)
    return " ".join(scopes)


def _state_from_app(plan: RegisterAppState, app: Application) -> RegisterAppState:
    return plan.model_copy(
        update={
            "id": app.id,
            "app_config": AppConfig(
                client_id=app.client_id,
                client_secret=app.client_secret,
                redirect_uri=app.redirect_uri,
            ),
        }
    )
