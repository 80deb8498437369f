# bastion/models/assistant.py
from pydantic import BaseModel, ConfigDict, Field, StrictStr
from typing import Any, Literal

# Structure matching Gemini API's history format: {'role': ..., 'parts': [{'text': ...}]}
class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    text: StrictStr

class ConversationTurn(BaseModel):
    """One prior turn of the conversation, passed through to the model untouched."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    role: Literal["user", "model"]
    parts: tuple[TextPart, ...] = Field(..., min_length=1)

    def to_content(self) -> dict[str, Any]:
        return {"role": self.role, "parts": [{"text": part.text} for part in self.parts]}

class InferenceRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_prompt: StrictStr = Field(
        ..., alias="userPrompt", min_length=1,
        description="The user's request or question for the AI assistant.",
    )
    conversation_history: tuple[ConversationTurn, ...] | None = Field(None, alias="conversationHistory")

class InferenceResult(BaseModel):
    text: str # The AI-generated response

class AuthContext(BaseModel):
    """Verified caller identity attached by the Firebase boundary."""
    model_config = ConfigDict(frozen=True)

    uid: str
    token: dict[str, Any] = Field(default_factory=dict) # Decoded ID token claims

class ResponseEnvelope(BaseModel):
    response: str

# --- Callable protocol envelopes ---
class CallableResult(BaseModel):
    result: ResponseEnvelope

class CallableErrorBody(BaseModel):
    status: str # Canonical name, e.g. "INVALID_ARGUMENT"
    message: str

class CallableErrorResponse(BaseModel):
    error: CallableErrorBody
