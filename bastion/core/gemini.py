# bastion/core/gemini.py
from dataclasses import dataclass
from typing import Any, Protocol, Sequence
import google.generativeai as genai
import logging

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class GenerationConfig:
    temperature: float
    max_output_tokens: int

@dataclass(frozen=True)
class GenerationResult:
    text: str

class ModelClient(Protocol):
    async def generate(
        self,
        prompt: str,
        history: Sequence[dict[str, Any]],
        generation_config: GenerationConfig,
    ) -> GenerationResult: ...

class GeminiModelClient:
    """Thin async wrapper around ``genai.GenerativeModel``.

    ``genai.configure`` must have been called (see ``bastion.core.runtime``) before use.
    """

    def __init__(self, model_name: str):
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name)

    async def generate(
        self,
        prompt: str,
        history: Sequence[dict[str, Any]],
        generation_config: GenerationConfig,
    ) -> GenerationResult:
        # History goes in as prior contents; the prompt is the final user turn
        contents = [*history, {"role": "user", "parts": [{"text": prompt}]}]
        logger.info(f"Sending prompt to {self.model_name} with {len(history)} history turn(s).")
        response = await self._model.generate_content_async(
            contents,
            generation_config=genai.GenerationConfig(
                temperature=generation_config.temperature,
                max_output_tokens=generation_config.max_output_tokens,
            ),
        )

        if not response.candidates:
            feedback = getattr(response, "prompt_feedback", None)
            if feedback and feedback.block_reason:
                logger.warning(f"Gemini prompt blocked. Reason: {feedback.block_reason}")
        else:
            finish_reason = getattr(response.candidates[0], "finish_reason", None)
            logger.info(f"Gemini candidate finished with reason: {finish_reason}")
            if finish_reason is not None and getattr(finish_reason, "name", finish_reason) not in ("STOP", "MAX_TOKENS"):
                logger.warning(f"Gemini candidate ended early. Finish reason: {finish_reason}")

        # response.text raises ValueError when no text part is available (e.g. safety block)
        text = response.text
        if not text:
            logger.warning("Gemini API returned empty text response.")
        return GenerationResult(text=text)
