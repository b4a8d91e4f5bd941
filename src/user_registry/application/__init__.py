"""Application layer for the user registry."""

from user_registry.application.user_service import UserService

__all__ = ["UserService"]
