"""
Pytest configuration and shared fixtures for AlgoSensei tests

Provides:
- Test environment (session secret, rate limiting off, memory off)
- File-backed record store in a temp directory
- Repositories and a registered test user with a session token
- Mock memory service and LiteLLM streaming chunks
- TestClient with storage and memory dependencies overridden
"""

import os

# Must be set before algosensei.config is imported
os.environ["SESSION_SECRET"] = "test-session-secret-with-enough-length"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MEM0_API_KEY"] = ""
os.environ["AZURE_OPENAI_ENDPOINT"] = ""
os.environ["AZURE_OPENAI_KEY"] = ""
os.environ["AZURE_OPENAI_DEPLOYMENT"] = ""
os.environ["AZURE_OPENAI_API_VERSION"] = ""

import pytest
from typing import Dict, Any
from unittest.mock import MagicMock, AsyncMock
from fastapi.testclient import TestClient

from algosensei.config import settings
from algosensei.core.security import create_session_token
from algosensei.services.chat_repository import ChatRepository
from algosensei.services.memory_service import MemoryService
from algosensei.services.user_repository import UserRepository
from algosensei.storage.local import LocalStorage

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture
def record_store(tmp_path) -> LocalStorage:
    """Local JSON record store isolated per test"""
    return LocalStorage(base_path=str(tmp_path / "records"))


@pytest.fixture
def user_repository(record_store) -> UserRepository:
    return UserRepository(record_store)


@pytest.fixture
def chat_repository(record_store) -> ChatRepository:
    return ChatRepository(record_store)


@pytest.fixture
def test_user(user_repository) -> Dict[str, Any]:
    """Registered user (password: TEST_PASSWORD)"""
    return user_repository.register(
        username="Ada",
        email="ada@example.com",
        password=TEST_PASSWORD,
    )


@pytest.fixture
def session_token(test_user) -> str:
    return create_session_token(test_user["email"])


@pytest.fixture
def auth_headers(session_token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {session_token}"}


@pytest.fixture
def mock_memory_service():
    """Mock MemoryService with async methods"""
    mock = MagicMock(spec=MemoryService)
    mock.enabled = True
    mock.fetch_context = AsyncMock(return_value=[])
    mock.store_summary = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def provider_settings(monkeypatch):
    """Fill in the Azure OpenAI settings the relay requires"""
    monkeypatch.setattr(settings, "AZURE_OPENAI_ENDPOINT", "https://tutor.openai.azure.com")
    monkeypatch.setattr(settings, "AZURE_OPENAI_KEY", "azure-test-key")
    monkeypatch.setattr(settings, "AZURE_OPENAI_DEPLOYMENT", "gpt-4o")
    monkeypatch.setattr(settings, "AZURE_OPENAI_API_VERSION", "2024-08-01-preview")
    return settings


@pytest.fixture
def mock_litellm_stream():
    """Build an astream replacement yielding the given text chunks"""
    def factory(chunks, error: Exception = None):
        calls = []

        async def mock_stream(messages):
            calls.append(messages)
            for text in chunks:
                chunk = MagicMock()
                chunk.content = text
                yield chunk
            if error is not None:
                raise error

        mock_stream.calls = calls
        return mock_stream

    return factory


@pytest.fixture
def client(record_store):
    """TestClient backed by the temp record store, memory disabled"""
    from algosensei.main import app
    from algosensei.api.deps import get_memory_service
    from algosensei.storage.factory import get_record_store

    app.dependency_overrides[get_record_store] = lambda: record_store
    app.dependency_overrides[get_memory_service] = lambda: MemoryService(api_key="")

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for API endpoints"
    )
