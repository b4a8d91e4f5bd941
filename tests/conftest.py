"""Pytest configuration and shared fixtures for User Registry tests."""

import pytest
from unittest.mock import patch

from fastapi.testclient import TestClient

from user_registry.adapters.inbound.rest_api import create_app
from user_registry.adapters.outbound.in_memory_repository import InMemoryUserRepository
from user_registry.application.user_service import UserService
from user_registry.domain.entities.user import UserDraft
from user_registry.infrastructure.config import Config, StorageConfig
from user_registry.infrastructure.container import Container


@pytest.fixture(autouse=True)
def reset_container():
    """Reset the DI container before each test."""
    Container.reset()
    yield
    Container.reset()


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration using the in-memory backend."""
    return Config(storage=StorageConfig(backend="memory"))


@pytest.fixture
def repository() -> InMemoryUserRepository:
    """Provide an empty in-memory repository."""
    return InMemoryUserRepository()


@pytest.fixture
def service(repository: InMemoryUserRepository) -> UserService:
    """Provide a user service over the in-memory repository."""
    return UserService(repository)


@pytest.fixture
def client(service: UserService) -> TestClient:
    """Provide an HTTP client for an app backed by the in-memory repository."""
    app = create_app(service, max_body_bytes=10_000)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_payload() -> dict:
    """Provide a request body that passes every length check."""
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "biography": "Wrote the first published algorithm for a machine.",
    }


@pytest.fixture
def valid_draft(valid_payload: dict) -> UserDraft:
    """Provide a draft matching the valid payload."""
    return UserDraft(**valid_payload)


@pytest.fixture
def container(test_config: Config) -> Container:
    """Provide a configured container for testing."""
    with patch("user_registry.infrastructure.container.get_config", return_value=test_config):
        return Container.create()


# Pytest markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
