"""Tests for the rpgAssistant inference flow."""

from __future__ import annotations

import copy
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from bastion.core.errors import InferenceError
from bastion.core.gemini import GenerationResult
from bastion.flows.rpg_assistant import (
    GENERATION_CONFIG,
    PERSONA_PROMPT,
    RpgAssistantFlow,
    build_prompt,
)
from bastion.models.assistant import InferenceRequest


class TestBuildPrompt:
    def test_embeds_persona_and_user_prompt(self):
        prompt = build_prompt("Describe the capital city")

        assert prompt.startswith(PERSONA_PROMPT)
        assert prompt.endswith("Describe the capital city")


class TestRpgAssistantFlow:
    """Tests for RpgAssistantFlow.run."""

    def test_declares_contract(self):
        assert RpgAssistantFlow.name == "rpgAssistant"
        assert RpgAssistantFlow.input_schema is InferenceRequest
        assert RpgAssistantFlow.output_schema is str

    @pytest.mark.asyncio
    async def test_returns_model_text(self, flow, mock_model_client):
        result = await flow.run({"userPrompt": "Describe the capital city"})

        assert result.text == "Welcome to the Tangent, traveller."
        mock_model_client.generate.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_uses_fixed_generation_parameters(self, flow, mock_model_client):
        await flow.run({"userPrompt": "hello"})

        _, _, config = mock_model_client.generate.await_args.args
        assert config is GENERATION_CONFIG
        assert config.temperature == 0.7
        assert config.max_output_tokens == 500

    @pytest.mark.asyncio
    async def test_absent_history_is_passed_as_empty_list(self, flow, mock_model_client):
        await flow.run({"userPrompt": "hello"})

        prompt, history, _ = mock_model_client.generate.await_args.args
        assert prompt == build_prompt("hello")
        assert history == []

    @pytest.mark.asyncio
    async def test_history_order_preserved_and_kept_out_of_prompt(self, flow, mock_model_client, sample_history):
        await flow.run({"userPrompt": "Next question", "conversationHistory": sample_history})

        prompt, history, _ = mock_model_client.generate.await_args.args
        assert history == sample_history
        assert "Sable Concord" not in prompt

    @pytest.mark.asyncio
    async def test_does_not_mutate_inputs(self, flow, sample_history):
        raw = {"userPrompt": "Next question", "conversationHistory": sample_history}
        snapshot = copy.deepcopy(raw)

        await flow.run(raw)

        assert raw == snapshot

    @pytest.mark.asyncio
    async def test_accepts_validated_request(self, echo_client):
        flow = RpgAssistantFlow(echo_client)
        request = InferenceRequest(userPrompt="hello")

        result = await flow.run(request)

        assert result.text == build_prompt("hello")
        assert len(echo_client.calls) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"userPrompt": ""},
            {"userPrompt": 42},
            {},
            {"userPrompt": "hi", "conversationHistory": [{"role": "system", "parts": [{"text": "x"}]}]},
            {"userPrompt": "hi", "conversationHistory": [{"role": "user", "parts": []}]},
            {"userPrompt": b"hello"},
            {"userPrompt": "hi", "conversationHistory": [{"role": "user", "parts": [{"text": b"x"}]}]},
        ],
    )
    async def test_rejects_inputs_outside_schema(self, flow, mock_model_client, payload):
        with pytest.raises(ValidationError):
            await flow.run(payload)

        mock_model_client.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_client_failure_becomes_inference_error(self, mock_model_client):
        cause = ConnectionError("provider unreachable")
        mock_model_client.generate = AsyncMock(side_effect=cause)
        flow = RpgAssistantFlow(mock_model_client)

        with pytest.raises(InferenceError) as exc_info:
            await flow.run({"userPrompt": "hello"})

        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_non_string_text_is_unusable(self, mock_model_client):
        mock_model_client.generate = AsyncMock(return_value=GenerationResult(text=None))
        flow = RpgAssistantFlow(mock_model_client)

        with pytest.raises(InferenceError):
            await flow.run({"userPrompt": "hello"})
