"""Shared test fixtures and configuration."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from bastion.api.endpoints.assistant import get_auth_context
from bastion.core.gemini import GenerationResult
from bastion.core.runtime import get_assistant_flow
from bastion.flows.rpg_assistant import RpgAssistantFlow
from bastion.main import app
from bastion.models.assistant import AuthContext


class EchoModelClient:
    """Model client double that returns the prompt it was given and records every call."""

    def __init__(self):
        self.calls = []

    async def generate(self, prompt, history, generation_config):
        self.calls.append({"prompt": prompt, "history": history, "generation_config": generation_config})
        return GenerationResult(text=prompt)


@pytest.fixture
def auth_context():
    return AuthContext(uid="user-123", token={"uid": "user-123"})


@pytest.fixture
def echo_client():
    return EchoModelClient()


@pytest.fixture
def mock_model_client():
    """Model client whose ``generate`` is an AsyncMock returning a fixed reply."""
    client = MagicMock()
    client.generate = AsyncMock(return_value=GenerationResult(text="Welcome to the Tangent, traveller."))
    return client


@pytest.fixture
def flow(mock_model_client):
    return RpgAssistantFlow(mock_model_client)


@pytest.fixture
def sample_history():
    return [
        {"role": "user", "parts": [{"text": "Who runs the Sable Concord?"}]},
        {"role": "model", "parts": [{"text": "The Concord answers to the Nine Wardens."}]},
        {"role": "user", "parts": [{"text": "And where do they meet?"}, {"text": "Keep it short."}]},
    ]


@pytest.fixture
def client_factory():
    """Builds a TestClient with auth and flow dependencies overridden (startup is not run)."""

    def _factory(flow=None, auth=None):
        app.dependency_overrides[get_auth_context] = lambda: auth
        app.dependency_overrides[get_assistant_flow] = lambda: flow
        return TestClient(app, raise_server_exceptions=False)

    yield _factory
    app.dependency_overrides.clear()
