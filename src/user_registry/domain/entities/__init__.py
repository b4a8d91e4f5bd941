"""Domain entities."""

from user_registry.domain.entities.user import User, UserDraft

__all__ = [
    "User",
    "UserDraft",
]
