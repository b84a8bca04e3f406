# qa_engine/config/settings.py

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global engine settings, overridable through QA_* environment variables."""

    # Application info
    APP_NAME: str = "QA Verification & Test Orchestration Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Backend under test
    API_BASE_URL: str = "https://invoices.ieosuia.com/api"
    PROBE_TIMEOUT_MS: int = 15000

    # Session token store
    TOKEN_STORE_PATH: str = str(Path.home() / ".qa_engine" / "session.json")
    TOKEN_KEY: str = "ieosuia_auth_token"
    AUTH_TOKEN: Optional[str] = None

    # Dependency verification
    DEPENDENCY_VERIFIER_CONCURRENCY: int = 8
    BUILD_MANIFEST_PATH: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # Exports
    EXPORT_DIR: str = "reports"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "QA_"
        extra = "ignore"


# Create global settings instance
settings = Settings()
