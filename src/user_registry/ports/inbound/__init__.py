"""Inbound ports - API contracts for the user registry.

Inbound ports define the interface the HTTP adapter uses to drive
user operations.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from user_registry.domain.entities.user import User, UserDraft
from user_registry.domain.value_objects.identifiers import UserId


# =============================================================================
# User Service Port
# =============================================================================


class UserServicePort(Protocol):
    """Protocol for user CRUD operations.

    Every method raises a ``UserRegistryError`` subclass on failure;
    callers translate the error kind to a response.

    Example:
        user = service.create_user(draft)
        same = service.get_user(user.id)
        service.replace_user(user.id, other_draft)
        service.delete_user(user.id)
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Name of the storage backend in use."""
        ...

    @abstractmethod
    def create_user(self, draft: UserDraft) -> User:
        """Validate and store a new user.

        Raises:
            FieldLengthError: If a field violates its bound.
            StorageFailureError: If storage fails.
        """
        ...

    @abstractmethod
    def get_user(self, user_id: UserId) -> User:
        """Fetch a user by ID.

        Raises:
            UserNotFoundError: If no user matches.
            StorageFailureError: If storage fails.
        """
        ...

    @abstractmethod
    def list_users(self) -> list[User]:
        """List every user.

        Raises:
            StorageFailureError: If storage fails.
        """
        ...

    @abstractmethod
    def replace_user(self, user_id: UserId, draft: UserDraft) -> User:
        """Validate and overwrite all fields of an existing user.

        Raises:
            FieldLengthError: If a field violates its bound.
            UserNotFoundError: If no user matches.
            StorageFailureError: If storage fails.
        """
        ...

    @abstractmethod
    def delete_user(self, user_id: UserId) -> None:
        """Remove a user.

        Raises:
            UserNotFoundError: If no user matches.
            StorageFailureError: If storage fails.
        """
        ...

    @abstractmethod
    def is_healthy(self) -> bool:
        """Check whether the storage backend is reachable."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the storage backend."""
        ...
