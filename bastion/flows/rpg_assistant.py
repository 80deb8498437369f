# bastion/flows/rpg_assistant.py
from collections.abc import Mapping
from typing import Any
from bastion.core.errors import InferenceError
from bastion.core.gemini import GenerationConfig, ModelClient
from bastion.models.assistant import InferenceRequest, InferenceResult
import logging

logger = logging.getLogger(__name__)

# --- Fixed persona and generation parameters ---
PERSONA_PROMPT = "You are Bastion, a helpful assistant for the Tangent SFF RPG."
GENERATION_CONFIG = GenerationConfig(temperature=0.7, max_output_tokens=500)

def build_prompt(user_prompt: str) -> str:
    """Merges the persona framing with the caller's prompt."""
    return f"{PERSONA_PROMPT}\n\n{user_prompt}"

class RpgAssistantFlow:
    """
    The ``rpgAssistant`` flow: one prompt (plus optional history) in, plain model text out.
    Inputs are validated against ``InferenceRequest`` so the flow can be run on its own.
    """

    name = "rpgAssistant"
    input_schema = InferenceRequest
    output_schema = str

    def __init__(self, model_client: ModelClient):
        self.model_client = model_client

    async def run(self, request: InferenceRequest | Mapping[str, Any]) -> InferenceResult:
        if not isinstance(request, InferenceRequest):
            # Raises pydantic.ValidationError on schema violations
            request = self.input_schema.model_validate(request)

        prompt = build_prompt(request.user_prompt)
        history = [turn.to_content() for turn in request.conversation_history or ()]

        try:
            result = await self.model_client.generate(prompt, history, GENERATION_CONFIG)
        except Exception as e:
            raise InferenceError(f"Model call failed in flow '{self.name}': {e}") from e

        text = getattr(result, "text", None)
        if not isinstance(text, self.output_schema):
            raise InferenceError(
                f"Flow '{self.name}' got an unusable model result (text of type {type(text).__name__})."
            )
        logger.info(f"Flow '{self.name}' produced {len(text)} characters.")
        return InferenceResult(text=text)
