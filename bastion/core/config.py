# bastion/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
import os
from dotenv import load_dotenv

# Load .env file from the project root
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), '.env')
load_dotenv(dotenv_path=dotenv_path)

class Settings(BaseSettings):
    # Gemini
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL_NAME: str = "gemini-1.5-flash"

    # Firebase (falls back to application default credentials when no key file is given)
    FIREBASE_SERVICE_ACCOUNT_KEY: str | None = None
    FIREBASE_PROJECT_ID: str | None = None
    CHECK_REVOKED_TOKENS: bool = False

    # Callable surface
    ALLOWED_ORIGINS: str = "*"
    FUNCTION_TIMEOUT_SECONDS: float = 300.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
