"""
Shared pytest fixtures and configuration for the file broker test suite.

This module provides:
- Hypothesis configuration for property-based testing
- In-memory store and URL issuer fixtures
- A lifecycle service wired to those doubles
- A Flask app and client built by the application factory
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest
from hypothesis import HealthCheck, Phase, settings

from file_broker.app_factory import create_app
from file_broker.application.event_publisher import EventPublisher
from file_broker.application.file_lifecycle_service import FileLifecycleService
from file_broker.config.settings import AppConfig, AuthConfig
from tests.fixtures.domain_fixtures import (
    TEST_INTERNAL_SECRET,
    TEST_JWT_SECRET,
    TEST_WEBHOOK_SECRET,
)
from tests.fixtures.mock_repositories import MockFileRecordRepository, MockUrlIssuer

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")

UPLOAD_MAX_SIZE = 100 * 1024 * 1024
UPLOAD_TTL = timedelta(minutes=5)
DOWNLOAD_TTL = timedelta(minutes=15)


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def file_repository() -> MockFileRecordRepository:
    """In-memory metadata store."""
    return MockFileRecordRepository()


@pytest.fixture
def url_issuer() -> MockUrlIssuer:
    """Deterministic URL issuer."""
    return MockUrlIssuer()


@pytest.fixture
def event_publisher() -> EventPublisher:
    """Publisher with a Mock subscribed to every event in ``published``."""
    from file_broker.domain.events import DomainEvent

    publisher = EventPublisher()
    publisher.published = Mock()
    publisher.subscribe(DomainEvent, publisher.published)
    return publisher


@pytest.fixture
def file_service(file_repository, url_issuer, event_publisher) -> FileLifecycleService:
    """Lifecycle service wired to the in-memory doubles."""
    return FileLifecycleService(
        file_repository,
        url_issuer,
        upload_max_size=UPLOAD_MAX_SIZE,
        upload_ttl=UPLOAD_TTL,
        download_ttl=DOWNLOAD_TTL,
        event_publisher=event_publisher,
    )


# =============================================================================
# Flask Fixtures
# =============================================================================

@pytest.fixture
def auth_config() -> AuthConfig:
    config = AuthConfig()
    config.jwt_secret = TEST_JWT_SECRET
    config.jwt_algorithms = ["HS256"]
    config.internal_secret = TEST_INTERNAL_SECRET
    config.webhook_secret = TEST_WEBHOOK_SECRET
    return config


@pytest.fixture
def app_config() -> AppConfig:
    config = AppConfig()
    config.api_version = "v1"
    config.storage_events_async = False
    return config


@pytest.fixture
def flask_app(app_config, auth_config, file_service):
    """Flask app built by the factory around the in-memory lifecycle service."""
    app = create_app(config=app_config, auth_config=auth_config, file_service=file_service)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(flask_app):
    """Create test client."""
    return flask_app.test_client()


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (require external services)")
    config.addinivalue_line("markers", "e2e: End-to-end tests (full workflows)")
    config.addinivalue_line("markers", "property: Property-based tests using Hypothesis")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path or "\\e2e\\" in test_path:
            item.add_marker(pytest.mark.e2e)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
