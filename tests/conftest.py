from __future__ import annotations

import time
from unittest.mock import Mock

import pytest

from pubcli.auth import Token
from pubcli.keystore import KEY_SECRET_KEY, SERVICE_NAME, MemorySecretStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's secret, API URL and config root."""
    for key in ["PUB_SECRET_KEY", "PUB_API_BASE_URL"]:
        # setenv first so teardown also removes values written during the test
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "pub" / ".token_cache"


@pytest.fixture
def configured_store():
    """In-memory store holding a secret under the well-known key."""
    return MemorySecretStore().with_data(SERVICE_NAME, KEY_SECRET_KEY, "test-secret-key")


@pytest.fixture
def valid_token():
    return Token(access_token="cached-token", expires_at=int(time.time()) + 3600)


@pytest.fixture
def expired_token():
    return Token(access_token="expired-token", expires_at=int(time.time()) - 60)


@pytest.fixture
def mock_successful_exchange_response():
    """Mock a successful access-token exchange response."""
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.json.return_value = {"accessToken": "access-token-123", "expiresIn": 3600}
    return mock_response


@pytest.fixture
def mock_failed_exchange_response():
    """Mock a rejected access-token exchange response."""
    mock_response = Mock()
    mock_response.status_code = 401
    mock_response.text = '{"error": "invalid secret key"}'
    return mock_response


@pytest.fixture
def make_response():
    """Factory for mock HTTP responses with an optional JSON payload."""

    def _make(status_code: int, payload=None, text: str = ""):
        response = Mock()
        response.status_code = status_code
        response.text = text
        if payload is None:
            response.json.side_effect = ValueError("No JSON")
        else:
            response.json.return_value = payload
        return response

    return _make
