"""Infrastructure layer implementations."""

from jewelpos.infrastructure import identity, notifications, storage

__all__ = ["storage", "notifications", "identity"]
