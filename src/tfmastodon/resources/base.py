"""Abstract base class for managed resources.

A resource owns an object on the Mastodon instance through the usual
create/read/update/delete lifecycle. Each operation takes and returns the
resource's typed state model. :meth:`Resource.read` returns ``None`` when
the remote object no longer exists, telling the caller to drop it from
state.

See Also:
    :meth:`tfmastodon.provider.MastodonProvider.resources` for the registry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from tfmastodon.models import Schema

if TYPE_CHECKING:
    from tfmastodon.provider import MastodonProvider


class Resource(ABC):
    """Base class for resources bound to a provider.

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
        """Return the attribute layout of this resource."""
        ...

    @abstractmethod
    def create(self, plan: Any) -> Any:
        """Create the remote object described by *plan* and return the new state."""
        ...

    @abstractmethod
    def read(self, state: Any) -> Optional[Any]:
        """Refresh *state*, or return ``None`` if the remote object is gone."""
        ...

    @abstractmethod
    def update(self, plan: Any, state: Any) -> Any:
        """Apply *plan* on top of the prior *state* and return the new state."""
        ...

    @abstractmethod
    def delete(self, state: Any) -> None:
        """Destroy the remote object recorded in *state*."""
        ...
