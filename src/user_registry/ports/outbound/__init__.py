"""Outbound ports - storage interfaces for the user registry.

Outbound ports define the interfaces for the persistence backends the
user registry depends on. Two adapters implement ``UserRepository``:
a PostgreSQL table and a process-local in-memory map.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol

from user_registry.domain.entities.user import User, UserDraft
from user_registry.domain.value_objects.identifiers import UserId


# =============================================================================
# User Repository Port
# =============================================================================


class UserRepository(Protocol):
    """Protocol for user persistence.

    Thread Safety:
        All methods must be thread-safe. Implementations are shared by
        every request handled by the process.

    Atomicity:
        ``update`` and ``delete`` must check existence and apply the
        change as a single step, so a concurrent delete cannot be
        overwritten by a late update.

    Example:
        user = repository.create(UserDraft("Ada", "Lovelace", bio))
        assert repository.get_by_id(user.id) == user
        repository.delete(user.id)
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name of the backend (e.g. "postgres", "memory")."""
        ...

    @abstractmethod
    def create(self, draft: UserDraft) -> User:
        """Persist a new user with a freshly generated ID.

        Args:
            draft: Validated user fields.

        Returns:
            The stored user.

        Raises:
            StorageError: If the backend fails.
        """
        ...

    @abstractmethod
    def get_by_id(self, user_id: UserId) -> Optional[User]:
        """Look up a user.

        Args:
            user_id: User ID.

        Returns:
            The user or None if not found.

        Raises:
            StorageError: If the backend fails.
        """
        ...

    @abstractmethod
    def list_all(self) -> list[User]:
        """Return every stored user, in no particular order.

        Raises:
            StorageError: If the backend fails.
        """
        ...

    @abstractmethod
    def update(self, user_id: UserId, draft: UserDraft) -> Optional[User]:
        """Replace all text fields of an existing user.

        Args:
            user_id: User ID. Never changed.
            draft: Validated replacement fields.

        Returns:
            The updated user or None if not found.

        Raises:
            StorageError: If the backend fails.
        """
        ...

    @abstractmethod
    def delete(self, user_id: UserId) -> bool:
        """Remove a user.

        Args:
            user_id: User ID.

        Returns:
            True if a user was removed, False if none matched.

        Raises:
            StorageError: If the backend fails.
        """
        ...

    @abstractmethod
    def ping(self) -> bool:
        """Check that the backend is reachable."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""
        ...


class StorageError(Exception):
    """Raised when a storage backend operation fails."""

    pass
