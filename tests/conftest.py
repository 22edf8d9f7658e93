"""Global test configuration and fixtures."""

import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment before any settings are read
os.environ["ENVIRONMENT"] = "testing"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["LOG_FORMAT"] = "console"

from prettify.application.prettify_service import PrettifyService
from prettify.infra.assets.prompt_template import PromptTemplate
from prettify.infra.config.settings import Settings
from prettify.main import create_app
from tests._helpers.fakes import TEST_MODEL, FakeModelClient


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        GEMINI_API_KEY="test-gemini-key",
        GEMINI_MODEL=TEST_MODEL,
        ENVIRONMENT="testing",
        LOG_FORMAT="console",
    )


@pytest.fixture
def template():
    return PromptTemplate('Prettify this and answer as {"output": ...}:\n{input}')


@pytest.fixture
def fake_client():
    return FakeModelClient()


@pytest.fixture
def service(fake_client, template):
    return PrettifyService(fake_client, template, model=TEST_MODEL)


# ---------- API TESTING FIXTURES ----------


@pytest.fixture
def app(settings, service):
    """FastAPI application wired to the fake model client."""
    return create_app(settings=settings, service_factory=lambda _settings: service)


@pytest.fixture
def client(app):
    """Test client; entering it runs the application lifespan."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client(app, service):
    """Async client. ASGITransport skips the lifespan, so attach the service directly."""
    app.state.prettify_service = service
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as ac:
        yield ac
