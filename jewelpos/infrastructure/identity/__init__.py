"""Identity provider implementations."""

from jewelpos.infrastructure.identity.providers import (
    RequestIdentityProvider,
    SystemIdentityProvider,
)

__all__ = ["RequestIdentityProvider", "SystemIdentityProvider"]
