"""Canonical Pydantic models shared across all tfmastodon modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- what the user supplies to the provider:
    :class:`ProviderConfig`.

**API payload models** -- parsed from Mastodon REST API responses:
    :class:`Account`, :class:`Instance`, and :class:`Application`.

**Attribute models** -- the typed inputs and computed outputs of each data
source and resource, plus the schema description types:
    :class:`AccountData`, :class:`InstanceSelfData`, :class:`AppConfig`,
    :class:`RegisterAppState`, :class:`Attribute`, and :class:`Schema`.

API payload models ignore unknown keys, since Mastodon responses carry far
more fields than the provider exposes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Provider Config ---


class ProviderConfig(BaseModel):
    """Connection settings for one configured provider instance.

    ``domain`` and ``use_https`` together form the server origin
    (``scheme://domain``) that every client is bound to. The request
    settings apply to every HTTP call the provider makes.

    Example::

        ProviderConfig(domain="mastodon.example", use_https=False)
    """

    domain: str = Field(description="Domain of the Mastodon instance")
    use_https: Optional[bool] = Field(
        default=None,
        description="Should we use https to connect to the instance (default true)",
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")

    @field_validator("domain")
    @classmethod
    def _check_domain(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("domain must not be empty")
        if "://" in value:
            raise ValueError(
                f"domain must be a bare host name, not a URL: {value!r} "
                "(use use_https to pick the scheme)"
            )
        return value

    @property
    def scheme(self) -> str:
        """``http`` only when ``use_https`` is explicitly false."""
        if self.use_https is not None and not self.use_https:
            return "http"
        return "https"

    @property
    def server(self) -> str:
        """The server origin, ``scheme://domain``."""
        return f"{self.scheme}://{self.domain}"


# --- API payloads ---


class Account(BaseModel):
    """A Mastodon account as returned by ``GET /api/v1/accounts/:id``."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    username: str = ""
    acct: str = ""
    display_name: str = ""
    created_at: datetime
    url: str = ""
    discoverable: Optional[bool] = None


class Instance(BaseModel):
    """An instance self-description as returned by ``GET /api/v1/instance``."""

    model_config = ConfigDict(extra="ignore")

    uri: str
    title: str = ""
    description: str = ""
    email: Optional[str] = None
    version: str = ""
    thumbnail: Optional[str] = None


class Application(BaseModel):
    """A registered OAuth application as returned by ``POST /api/v1/apps``."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""
    website: Optional[str] = None
    redirect_uri: str = ""
    client_id: str = ""
    client_secret: str = ""
    vapid_key: Optional[str] = None


# --- Data source / resource attributes ---


class AccountData(BaseModel):
    """Attributes of the ``mastodon_account`` data source."""

    id: str = Field(description="identifier")
    username: Optional[str] = None
    account: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[str] = None
    url: Optional[str] = None
    discoverable: Optional[bool] = None


class InstanceSelfData(BaseModel):
    """Attributes of the ``mastodon_instance_self`` data source."""

    id: Optional[str] = None
    email: Optional[str] = None
    thumbnail: Optional[str] = None
    title: Optional[str] = None
    uri: Optional[str] = None
    version: Optional[str] = None


class AppConfig(BaseModel):
    """Credentials of a registered application."""

    client_id: str
    client_secret: str
    redirect_uri: str = ""


class RegisterAppState(BaseModel):
    """Configuration and state of the ``mastodon_register_app`` resource.

    The first four fields are optional inputs; ``None`` means "use the
    default". ``id`` and ``app_config`` are computed on create/update.
    """

    client_name: Optional[str] = None
    redirect_uris: Optional[str] = None
    scopes: Optional[list[str]] = None
    website: Optional[str] = None

    id: Optional[str] = None
    app_config: Optional[AppConfig] = None


# --- Schema description ---


class Attribute(BaseModel):
    """One attribute in a provider, data source, or resource schema."""

    name: str
    type: str = Field(description="string, bool, list(string), or object(...)")
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False


class Schema(BaseModel):
    """The attribute layout of a provider, data source, or resource."""

    description: str = ""
    attributes: list[Attribute] = Field(default_factory=list)

    def attribute(self, name: str) -> Attribute:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise KeyError(name)
