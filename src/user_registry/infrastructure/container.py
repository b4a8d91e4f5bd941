"""Dependency injection container for User Registry."""

from dataclasses import dataclass

import structlog

from user_registry.adapters.outbound.in_memory_repository import InMemoryUserRepository
from user_registry.adapters.outbound.postgres_repository import PostgresUserRepository
from user_registry.application.user_service import UserService
from user_registry.infrastructure.config import Config, get_config
from user_registry.infrastructure.logging import setup_logging
from user_registry.ports.outbound import UserRepository


def build_repository(config: Config) -> UserRepository:
    """Create the storage adapter selected by configuration.

    The PostgreSQL backend is connected and its schema bootstrapped
    before it is returned.

    Raises:
        StorageError: If the database is unreachable or the schema
            cannot be created.
    """
    storage = config.storage
    if storage.backend == "memory":
        return InMemoryUserRepository()

    repository = PostgresUserRepository.connect(
        storage.database_url,
        min_size=storage.pool_min_size,
        max_size=storage.pool_max_size,
        timeout=storage.connect_timeout_seconds,
    )
    try:
        repository.initialize_schema()
    except Exception:
        repository.close()
        raise
    return repository


@dataclass
class Container:
    """Dependency injection container for user registry components."""

    config: Config
    logger: structlog.stdlib.BoundLogger
    service: UserService

    _instance: "Container | None" = None

    @classmethod
    def create(cls) -> "Container":
        """Create and initialize the container with all dependencies."""
        if cls._instance is not None:
            return cls._instance

        config = get_config()
        logger = setup_logging()
        repository = build_repository(config)

        cls._instance = cls(
            config=config,
            logger=logger,
            service=UserService(repository),
        )

        logger.info(
            "user_registry_container_initialized",
            environment=config.observability.environment,
            storage_backend=repository.backend_name,
        )

        return cls._instance

    @classmethod
    def get(cls) -> "Container":
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None


def get_container() -> Container:
    """Get the dependency injection container."""
    return Container.get()
