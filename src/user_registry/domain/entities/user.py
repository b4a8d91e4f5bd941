"""User entity for the user registry."""

from __future__ import annotations

from dataclasses import dataclass

from user_registry.domain.errors import FieldLengthError
from user_registry.domain.value_objects.bounds import (
    BIOGRAPHY_BOUND,
    FIRST_NAME_BOUND,
    LAST_NAME_BOUND,
)
from user_registry.domain.value_objects.identifiers import UserId


@dataclass(frozen=True)
class UserDraft:
    """The writable fields of a user, without an identifier.

    Used for both creation and full replacement.
    """

    first_name: str
    last_name: str
    biography: str

    def validate(self) -> None:
        """Check every field against its length bound.

        Fields are checked in a fixed order (biography, first name, last
        name) and the first violation is raised.

        Raises:
            FieldLengthError: If a field is too short or too long.
        """
        if not BIOGRAPHY_BOUND.contains(self.biography):
            raise FieldLengthError("biography", "Biography", BIOGRAPHY_BOUND)
        if not FIRST_NAME_BOUND.contains(self.first_name):
            raise FieldLengthError("first_name", "First name", FIRST_NAME_BOUND)
        if not LAST_NAME_BOUND.contains(self.last_name):
            raise FieldLengthError("last_name", "Last name", LAST_NAME_BOUND)

    def with_id(self, user_id: UserId) -> User:
        """Bind this draft to an identifier."""
        return User(
            id=user_id,
            first_name=self.first_name,
            last_name=self.last_name,
            biography=self.biography,
        )


@dataclass(frozen=True)
class User:
    """A stored user record."""

    id: UserId
    first_name: str
    last_name: str
    biography: str

    def replaced_by(self, draft: UserDraft) -> User:
        """Return a copy with every text field taken from the draft.

        The identifier is preserved.
        """
        return draft.with_id(self.id)
