"""Outbound adapters for the user registry.

Provides the storage backends implementing the UserRepository port.
"""

from user_registry.adapters.outbound.in_memory_repository import InMemoryUserRepository
from user_registry.adapters.outbound.postgres_repository import PostgresUserRepository

__all__ = [
    "InMemoryUserRepository",
    "PostgresUserRepository",
]
