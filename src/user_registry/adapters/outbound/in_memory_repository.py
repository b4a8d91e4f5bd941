"""In-memory user repository.

This adapter implements the UserRepository protocol with a plain dict
owned by the repository instance. Records live only as long as the
process.

Thread Safety:
    Every access to the map happens under a single lock, so the
    existence check and overwrite in ``update`` are one atomic step.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional

from user_registry.domain.entities.user import User, UserDraft
from user_registry.domain.value_objects.identifiers import UserId, new_user_id


class InMemoryUserRepository:
    """Process-local user storage keyed by user ID."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[UserId, User] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    def create(self, draft: UserDraft) -> User:
        with self._lock:
            user_id = new_user_id()
            while user_id in self._users:
                user_id = new_user_id()
            user = draft.with_id(user_id)
            self._users[user_id] = user
            return user

    def get_by_id(self, user_id: UserId) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def list_all(self) -> list[User]:
        with self._lock:
            return list(self._users.values())

    def update(self, user_id: UserId, draft: UserDraft) -> Optional[User]:
        with self._lock:
            existing = self._users.get(user_id)
            if existing is None:
                return None
            updated = existing.replaced_by(draft)
            self._users[user_id] = updated
            return updated

    def delete(self, user_id: UserId) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        # Nothing to release; records stay readable until the process exits.
        pass

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
