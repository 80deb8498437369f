# bastion/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
# Import routers
from bastion.api.endpoints import assistant as assistant_router
# Import runtime lifecycle and settings
from bastion.core.config import settings
from bastion.core.errors import HttpsError
from bastion.core.runtime import initialize_runtime, get_runtime_status
import logging

# --- Configure Logging ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# --- FastAPI App Instantiation ---
app = FastAPI(
    title="Bastion RPG Assistant",
    version="0.3.0"
)

# --- Startup Event (builds process-wide clients once) ---
@app.on_event("startup")
async def startup_event():
    logger.info("FastAPI application startup...")
    initialize_runtime(settings)
    logger.info(f"Runtime initialization finished with status: {get_runtime_status()['status']}")

# --- Shutdown Event ---
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("FastAPI application shutting down...")

# --- Callable Error Handler ---
@app.exception_handler(HttpsError)
async def https_error_handler(request: Request, exc: HttpsError):
    logger.info(f"Callable request to {request.url.path} failed with '{exc.code}'.")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

# --- CORS Configuration ---
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS else ["*"]
logger.info(f"Configuring CORS for origins: {origins}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(assistant_router.router, prefix="/api/v1/assistant", tags=["RPG Assistant"])
logger.info("Included RPG Assistant router at /api/v1/assistant")

# --- Root Endpoint ---
@app.get("/")
def read_root():
    return {
        "message": "Welcome to the Bastion RPG Assistant API",
        "runtime_status": get_runtime_status()
    }

# --- Health Check Endpoint ---
@app.get("/health")
def health_check():
    runtime_status = get_runtime_status()
    return {"status": "ok", "model_status": runtime_status.get("status", "unknown")}
