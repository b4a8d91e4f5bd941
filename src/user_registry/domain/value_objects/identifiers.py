"""User registry identifiers."""

import re
import uuid
from typing import NewType

from user_registry.domain.errors import InvalidUserIdError

UserId = NewType('UserId', uuid.UUID)

_HEX = "[0-9a-f]"
_CANONICAL = f"{_HEX}{{8}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{12}}"

# Canonical, braced, urn:uuid:-prefixed or 32 bare hex digits.
_USER_ID_PATTERN = re.compile(
    rf"{_CANONICAL}|\{{{_CANONICAL}\}}|urn:uuid:{_CANONICAL}|{_HEX}{{32}}",
    re.IGNORECASE,
)


def new_user_id() -> UserId:
    """Generate a random (version 4) user ID."""
    return UserId(uuid.uuid4())


def parse_user_id(raw: str) -> UserId:
    """Parse a user ID from its textual form.

    Only the canonical 8-4-4-4-12 form, its braced and ``urn:uuid:``
    variants, and 32 bare hex digits are accepted. ``uuid.UUID`` alone
    is more lenient (misplaced hyphens, ``+`` signs, underscores).

    Args:
        raw: Identifier text, typically a URL path segment.

    Returns:
        Parsed user ID.

    Raises:
        InvalidUserIdError: If the text is not a valid UUID.
    """
    if not isinstance(raw, str) or _USER_ID_PATTERN.fullmatch(raw) is None:
        raise InvalidUserIdError(raw)
    text = raw[len("urn:uuid:"):] if raw[:9].lower() == "urn:uuid:" else raw.strip("{}")
    return UserId(uuid.UUID(text))
