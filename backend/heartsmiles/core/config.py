"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

import os
import tempfile

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Firestore (service account fields) ──
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_PRIVATE_KEY_ID: str = ""
    FIREBASE_PRIVATE_KEY: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_CLIENT_ID: str = ""

    @property
    def firebase_credentials_info(self) -> dict[str, str]:
        """Service-account info dict as expected by google-auth."""
        return {
            "type": "service_account",
            "project_id": self.FIREBASE_PROJECT_ID,
            "private_key_id": self.FIREBASE_PRIVATE_KEY_ID,
            "private_key": self.FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
            "client_email": self.FIREBASE_CLIENT_EMAIL,
            "client_id": self.FIREBASE_CLIENT_ID,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
        }

    # ── LLM Provider ─────────────────────────
    LLM_PROVIDER: str = "openai"
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    LLM_TEMPERATURE: float = 0.1
    LLM_PARTICIPANT_MAX_TOKENS: int = 4000
    LLM_PROGRAM_MAX_TOKENS: int = 2000

    # ── Google Gemini ────────────────────────
    GOOGLE_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # ── LangSmith Tracing ────────────────────
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_ENDPOINT: str = "https://api.smith.langchain.com"
    LANGSMITH_PROJECT: str = "heartsmiles-imports"
    LANGSMITH_TRACING: bool = False

    # ── Auth / JWT ────────────────────────────
    JWT_SECRET_KEY: str = "change-this-development-secret-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # ── Import ────────────────────────────────
    IMPORT_TEMP_DIR: str = os.path.join(tempfile.gettempdir(), "heartsmiles-imports")
    IMPORT_MAX_FILE_BYTES: int = 10 * 1024 * 1024

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    CORS_ORIGINS: list[str] = ["*"]

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
