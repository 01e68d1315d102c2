"""Abstract base class for data sources.

A data source reads information from the configured Mastodon instance and
returns it as a typed attribute model. Subclasses set :attr:`DataSource.type_name`,
describe their attributes in :meth:`DataSource.schema`, and implement
:meth:`DataSource.read`.

See Also:
    :meth:`tfmastodon.provider.MastodonProvider.data_sources` for the registry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from tfmastodon.models import Schema

if TYPE_CHECKING:
    from tfmastodon.provider import MastodonProvider


class DataSource(ABC):
    """Base class for read-only data sources bound to a provider.

    Args:
        provider: The configured provider shared by every data source and
            resource.
    """

    type_name: str = ""

    def __init__(self, provider: MastodonProvider) -> None:
        self.provider = provider

    @classmethod
    @abstractmethod
    def schema(cls) -> Schema:
        """Return the attribute layout of this data source."""
        ...

    @abstractmethod
    def read(self, config: Any) -> Any:
        """Read the data source.

        Args:
            config: The attribute model with its inputs filled in.

        Returns:
            A copy of *config* with every computed attribute set.

        Raises:
            DataSourceError: If the instance could not be queried.
        """
        ...
