"""Value objects for the user registry domain.

Exports:
    - UserId: Type-safe user identifier (UUID)
    - parse_user_id: Parse a path segment into a UserId
    - new_user_id: Generate a fresh UserId
    - LengthBound: Inclusive character-length bound for a text field
"""

from user_registry.domain.value_objects.identifiers import (
    UserId,
    new_user_id,
    parse_user_id,
)
from user_registry.domain.value_objects.bounds import (
    BIOGRAPHY_BOUND,
    FIRST_NAME_BOUND,
    LAST_NAME_BOUND,
    LengthBound,
)

__all__ = [
    "UserId",
    "new_user_id",
    "parse_user_id",
    "LengthBound",
    "BIOGRAPHY_BOUND",
    "FIRST_NAME_BOUND",
    "LAST_NAME_BOUND",
]
