"""Data sources exposed by the Mastodon provider.

- ``mastodon_account`` -- :class:`AccountDataSource`
- ``mastodon_instance_self`` -- :class:`InstanceSelfDataSource`
"""

from tfmastodon.datasources.account import AccountDataSource
from tfmastodon.datasources.base import DataSource
from tfmastodon.datasources.instance_self import InstanceSelfDataSource

__all__ = ["AccountDataSource", "DataSource", "InstanceSelfDataSource"]
