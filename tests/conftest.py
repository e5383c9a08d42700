"""
Root pytest configuration and fixtures for streamchat.

Provides common fixtures and test utilities for the test suite.
"""

import os
from pathlib import Path
import sys

import pytest
import responses

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from streamchat._http import HTTPClient  # noqa: E402
from streamchat.config import WidgetConfig  # noqa: E402
from tests.utils.mocks import SESSION_URL, STREAM_URL, RecordingPresenter  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables before each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("STREAMCHAT_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def config():
    """Fully configured widget config pointing at the mocked endpoints."""
    return WidgetConfig(
        chat_id="chat_abc",
        session_endpoint_url=SESSION_URL,
        backend_stream_url=STREAM_URL,
    )


@pytest.fixture
def http():
    client = HTTPClient(timeout=5)
    yield client
    client.close()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def mock_requests():
    """Mock HTTP requests using responses library."""
    with responses.RequestsMock() as rsps:
        yield rsps
