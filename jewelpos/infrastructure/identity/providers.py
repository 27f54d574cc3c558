"""Identity providers supplying the acting user id."""

from jewelpos.core.interfaces.identity import IIdentityProvider


class RequestIdentityProvider(IIdentityProvider):
    """
    Actor taken from an authenticated request.

    The API reads the id from the header set by the auth proxy; an empty
    or missing header means the request is unauthenticated.
    """

    def __init__(self, actor_id: str | None):
        self._actor_id = actor_id.strip() if actor_id else None

    def current_actor_id(self) -> str | None:
        return self._actor_id or None


class SystemIdentityProvider(IIdentityProvider):
    """Fixed actor for scheduled jobs and CLI commands."""

    def __init__(self, actor_id: str = "system"):
        self._actor_id = actor_id

    def current_actor_id(self) -> str | None:
        return self._actor_id
