# bastion/core/runtime.py
"""
Process-wide clients.

``initialize_runtime`` is called once from the FastAPI startup event; the clients
it builds are reused by every invocation and never torn down.
"""
from typing import Any
from bastion.core.config import Settings
from bastion.core.firebase import get_firestore_client
from bastion.core.gemini import GeminiModelClient
from bastion.flows.rpg_assistant import RpgAssistantFlow
import google.generativeai as genai
import logging

logger = logging.getLogger(__name__)

# --- Globals ---
model_client: GeminiModelClient | None = None
assistant_flow: RpgAssistantFlow | None = None
firestore_db: Any = None # Initialized for parity with other deployments; not read or written here
runtime_status = {"status": "pending", "message": "Not initialized yet."}

def initialize_runtime(settings: Settings) -> None:
    global model_client, assistant_flow, firestore_db, runtime_status
    logger.info("Initializing runtime clients...")
    runtime_status = {"status": "initializing", "message": "Starting..."}

    try:
        firestore_db = get_firestore_client(settings)
        logger.info("Firebase Admin SDK and Firestore client initialized.")
    except Exception as e:
        logger.error(f"Firebase initialization failed: {e}", exc_info=True)
        runtime_status = {"status": "error", "message": f"Firebase initialization failed: {e}"}
        return

    if settings.GEMINI_API_KEY:
        logger.info("GEMINI_API_KEY environment variable was loaded successfully.")
    else:
        logger.critical("GEMINI_API_KEY environment variable NOT found. Assistant calls will fail.")
        runtime_status = {"status": "error", "message": "GEMINI_API_KEY is not configured."}
        return

    try:
        genai.configure(api_key=settings.GEMINI_API_KEY)
        model_client = GeminiModelClient(settings.GEMINI_MODEL_NAME)
        assistant_flow = RpgAssistantFlow(model_client)
        logger.info(f"Gemini model client ready: {settings.GEMINI_MODEL_NAME}")
    except Exception as e:
        logger.error(f"Failed to configure Gemini: {e}", exc_info=True)
        runtime_status = {"status": "error", "message": f"Gemini configuration failed: {e}"}
        return

    runtime_status = {"status": "ready", "message": "Runtime initialized successfully."}

def get_runtime_status() -> dict:
    return runtime_status

def get_assistant_flow() -> RpgAssistantFlow | None:
    """FastAPI dependency returning the shared flow (None until startup succeeded)."""
    return assistant_flow
