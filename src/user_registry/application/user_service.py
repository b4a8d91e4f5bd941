"""User Registry Application Service.

Validates user drafts, drives the storage adapter and turns storage
outcomes into domain errors. Implements UserServicePort.
"""

from __future__ import annotations

import logging

from user_registry.domain.entities.user import User, UserDraft
from user_registry.domain.errors import StorageFailureError, UserNotFoundError
from user_registry.domain.value_objects.identifiers import UserId
from user_registry.ports.outbound import StorageError, UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Coordinates validation and persistence of users."""

    def __init__(self, repository: UserRepository) -> None:
        """Initialize the service.

        Args:
            repository: Storage adapter shared by every request.
        """
        self._repository = repository

    @property
    def backend_name(self) -> str:
        return self._repository.backend_name

    @property
    def repository(self) -> UserRepository:
        return self._repository

    def create_user(self, draft: UserDraft) -> User:
        draft.validate()
        try:
            user = self._repository.create(draft)
        except StorageError as e:
            logger.error("User creation failed: %s", e)
            raise StorageFailureError("User creation failed.", "create") from e

        logger.info("Created user %s", user.id)
        return user

    def get_user(self, user_id: UserId) -> User:
        try:
            user = self._repository.get_by_id(user_id)
        except StorageError as e:
            logger.error("User lookup failed for %s: %s", user_id, e)
            raise StorageFailureError("Could not get user.", "get") from e

        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def list_users(self) -> list[User]:
        try:
            return self._repository.list_all()
        except StorageError as e:
            logger.error("User listing failed: %s", e)
            raise StorageFailureError("Could not list users.", "list") from e

    def replace_user(self, user_id: UserId, draft: UserDraft) -> User:
        """Overwrite every field of an existing user.

        Validation happens before the existence check, so an invalid body
        for an unknown ID is reported as a validation failure.
        """
        draft.validate()
        try:
            user = self._repository.update(user_id, draft)
        except StorageError as e:
            logger.error("User update failed for %s: %s", user_id, e)
            raise StorageFailureError("Could not update user.", "update") from e

        if user is None:
            raise UserNotFoundError(user_id)

        logger.info("Replaced user %s", user_id)
        return user

    def delete_user(self, user_id: UserId) -> None:
        try:
            deleted = self._repository.delete(user_id)
        except StorageError as e:
            logger.error("User deletion failed for %s: %s", user_id, e)
            raise StorageFailureError("Could not delete user.", "delete") from e

        if not deleted:
            raise UserNotFoundError(user_id)

        logger.info("Deleted user %s", user_id)

    def is_healthy(self) -> bool:
        return self._repository.ping()

    def close(self) -> None:
        """Release the storage backend."""
        self._repository.close()
