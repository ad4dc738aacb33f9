"""
Pytest configuration and fixtures for Simplerity CLI tests.

This module provides shared fixtures for testing the CLI, including
credential files in temporary directories and a mock Simplerity API
built on httpx.MockTransport.
"""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional
from urllib.parse import parse_qsl

import httpx
import pytest

from simplerity.api_client import SimplerityApiClient
from simplerity.credential_store import CredentialStore


MOCK_BASE_URL = "https://api.simplerity.test"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path) -> None:
    """
    Clean environment variables that might affect tests.

    Removes Simplerity-related environment variables and points the
    default config file at an empty temporary location.
    """
    for name in (
        "SIMPLERITY_BASE_URL",
        "SIMPLERITY_SESSION_FILE",
        "SIMPLERITY_REGISTRATION_FILE",
        "SIMPLERITY_LOG_LEVEL",
        "SIMPLERITY_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SIMPLERITY_CONFIG_PATH", str(tmp_path / "no-such-config.yaml"))


# ============================================================================
# Credential Fixtures
# ============================================================================


@pytest.fixture
def registration_data() -> dict:
    """Sample agent registration document."""
    return {
        "api_secret": "s",
        "client_id": "1",
        "client_secret": "c",
        "scope": "basic",
        "pc_name": "demo",
        "build_version": "1.0",
    }


@pytest.fixture
def session_path(tmp_path) -> Path:
    return tmp_path / "user_credentials.json"


@pytest.fixture
def registration_path(tmp_path, registration_data) -> Path:
    """Registration file written to a temporary directory."""
    path = tmp_path / "agent_credentials.json"
    path.write_text(json.dumps(registration_data), encoding="utf-8")
    return path


@pytest.fixture
def store(session_path, registration_path) -> CredentialStore:
    """Credential store over the temporary credential files."""
    return CredentialStore(session_path=session_path, registration_path=registration_path)


@pytest.fixture
def write_session(session_path) -> Callable[..., None]:
    """Write a session document with the given fields."""
    def _write(**fields) -> None:
        session_path.write_text(json.dumps(fields), encoding="utf-8")
    return _write


@pytest.fixture
def read_session(session_path) -> Callable[[], dict]:
    """Read back the stored session document."""
    def _read() -> dict:
        return json.loads(session_path.read_text(encoding="utf-8"))
    return _read


# ============================================================================
# Mock API Fixtures
# ============================================================================


class MockSimplerityApi:
    """
    Route table for httpx.MockTransport.

    Routes map a URL path to a callable returning an httpx.Response.
    Every request is recorded with its decoded form fields.
    """

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add_json(self, path: str, body, status_code: int = 200) -> None:
        self.routes[path] = lambda request: httpx.Response(status_code, json=body)

    def add_text(self, path: str, text: str, status_code: int = 200) -> None:
        self.routes[path] = lambda request: httpx.Response(status_code, text=text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"detail": "not found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> Optional[httpx.Request]:
        return self.requests[-1] if self.requests else None

    @staticmethod
    def form(request: httpx.Request) -> dict:
        return dict(parse_qsl(request.content.decode("utf-8"), keep_blank_values=True))


@pytest.fixture
def mock_base_url() -> str:
    return MOCK_BASE_URL


@pytest.fixture
def mock_api() -> MockSimplerityApi:
    return MockSimplerityApi()


@pytest.fixture
def api_client(mock_api):
    """API client whose network is the mock API."""
    client = SimplerityApiClient(base_url=MOCK_BASE_URL, transport=mock_api.transport)
    yield client
    client.close()
