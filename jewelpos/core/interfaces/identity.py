"""Abstract interface for the authenticated actor."""

from abc import ABC, abstractmethod


class IIdentityProvider(ABC):
    """Supplies the id of the user performing the current operation."""

    @abstractmethod
    def current_actor_id(self) -> str | None:
        """Return the actor id, or None when unauthenticated."""
        pass
