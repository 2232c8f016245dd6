"""
conftest.py
===========
Shared fixtures: a fake OpenAI client and a TestClient whose settings
and LLM service are pinned, so no test reads the real environment or
touches the network.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from copilot.core.config import Settings, get_settings
from copilot.main import app
from copilot.services.llm_service import LLMService, get_llm_service


def completion(content):
    """Shape of `client.chat.completions.create(...)`'s return value."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def fake_openai():
    """Factory: a mock OpenAI client answering with `content` (dict → JSON) or raising `error`."""
    def make(content=None, error=None):
        client = MagicMock()
        if error is not None:
            client.chat.completions.create.side_effect = error
        else:
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            client.chat.completions.create.return_value = completion(content)
        return client
    return make


@pytest.fixture
def enabled_service(fake_openai):
    """Factory: an enabled LLMService backed by a fake client."""
    def make(content=None, error=None):
        client = fake_openai(content=content, error=error)
        return LLMService(api_key="sk-test", enabled=True, client=client)
    return make


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, OPENAI_API_KEY=None, AI_ENABLED=False, API_KEY=None)


@pytest.fixture
def client(test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_llm_service] = lambda: LLMService()
    yield TestClient(app)
    app.dependency_overrides.clear()
