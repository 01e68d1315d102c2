"""Resources managed by the Mastodon provider.

- ``mastodon_register_app`` -- :class:`RegisterAppResource`
"""

from tfmastodon.resources.base import Resource
from tfmastodon.resources.register_app import RegisterAppResource

__all__ = ["RegisterAppResource", "Resource"]
