"""tfmastodon -- a Mastodon provider for reading accounts and instances and registering apps.

The provider mirrors the Terraform provider lifecycle with plain Python
objects: a :class:`~tfmastodon.provider.MastodonProvider` is configured once
with a domain, then hands out API clients to data sources
(``mastodon_account``, ``mastodon_instance_self``) and to the
``mastodon_register_app`` resource. App access tokens obtained through the
OAuth client-credentials exchange are cached per provider instance.

Typical workflow::

    tfmastodon --domain example.social instance
    tfmastodon --domain example.social app create bot

Modules:
    app: Typer application and CLI entry point.
    provider: Provider configuration, client acquisition, type registry.
    models: Pydantic models shared across the entire package.
    config: Provider config precedence and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
