# bastion/api/endpoints/assistant.py
from collections.abc import Mapping
from typing import Any
from fastapi import APIRouter, Depends, Header, Request
from pydantic import ValidationError
from bastion.core.config import settings
from bastion.core.errors import HttpsError
from bastion.core.firebase import verify_auth_context
from bastion.core.runtime import get_assistant_flow
from bastion.flows.rpg_assistant import RpgAssistantFlow
from bastion.models.assistant import AuthContext, CallableResult, InferenceRequest, ResponseEnvelope
import asyncio
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

FUNCTION_NAME = "callRpgAssistantV3"

def _validate_request(raw_request: Any) -> InferenceRequest:
    if not isinstance(raw_request, Mapping):
        raise HttpsError("invalid-argument", 'The function expects a valid "userPrompt" string.')

    user_prompt = raw_request.get("userPrompt")
    if not user_prompt or not isinstance(user_prompt, str):
        raise HttpsError("invalid-argument", 'The function expects a valid "userPrompt" string.')

    try:
        return InferenceRequest(
            userPrompt=user_prompt,
            conversationHistory=raw_request.get("conversationHistory"),
        )
    except ValidationError as e:
        logger.warning(f"Rejected malformed conversationHistory: {e.error_count()} error(s): {e.errors()}")
        raise HttpsError(
            "invalid-argument",
            'The function expects "conversationHistory" to be a list of {role, parts: [{text}]} turns.',
        )

async def handle(
    raw_request: Any,
    auth_context: AuthContext | None,
    flow: RpgAssistantFlow | None,
) -> ResponseEnvelope:
    """
    Runs one assistant call: auth gate, validation gate, flow execution.
    Returns the response envelope or raises HttpsError (unauthenticated, invalid-argument, internal).
    """
    logger.info(f"Executing {FUNCTION_NAME}...")

    if auth_context is None:
        raise HttpsError("unauthenticated", "The function requires authentication.")
    logger.info(f"Caller uid: {auth_context.uid}")

    request = _validate_request(raw_request)

    try:
        if flow is None:
            raise RuntimeError("Assistant flow is not initialized; check startup logs.")
        result = await flow.run(request)
        # Always a primitive string, whatever the flow handed back
        envelope = ResponseEnvelope(response=f"{result.text}")
    except Exception as e:
        logger.error(f"CRITICAL ERROR in {FUNCTION_NAME}: {e}", exc_info=True)
        raise HttpsError("internal", "An internal error occurred. Check function logs for debug trace.") from e

    logger.info("Successfully prepared payload. Sending to client.")
    return envelope

# --- Dependencies ---
def get_auth_context(authorization: str | None = Header(None)) -> AuthContext | None:
    return verify_auth_context(authorization, check_revoked=settings.CHECK_REVOKED_TOKENS)

async def _read_callable_data(request: Request) -> Any:
    """Extracts ``data`` from a callable request body; None when the body is not a callable envelope."""
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Callable request body is not valid JSON.")
        return None
    if not isinstance(body, dict) or "data" not in body:
        logger.warning("Callable request body is missing the 'data' field.")
        return None
    return body["data"]

# --- Callable Endpoint ---
@router.post(f"/{FUNCTION_NAME}", response_model=CallableResult)
async def call_rpg_assistant_v3(
    request: Request,
    auth_context: AuthContext | None = Depends(get_auth_context),
    flow: RpgAssistantFlow | None = Depends(get_assistant_flow),
):
    """Callable-protocol wrapper around ``handle``: ``{"data": ...}`` in, ``{"result": ...}`` out."""
    data = await _read_callable_data(request)
    try:
        envelope = await asyncio.wait_for(
            handle(data, auth_context, flow),
            timeout=settings.FUNCTION_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        logger.error(f"{FUNCTION_NAME} exceeded its {settings.FUNCTION_TIMEOUT_SECONDS}s deadline.")
        raise HttpsError("internal", "An internal error occurred. Check function logs for debug trace.")
    return CallableResult(result=envelope)
