"""Application configuration management"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

# Base directory: repository root
_BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    APP_NAME: str = "Postbox"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Storage
    DATABASE_PATH: str = "database.json"

    # Security
    SECRET_KEY: str = "dev-secret-key-change-in-production-use-openssl-rand-hex-32"
    ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "postbox"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 3600
    REFRESH_TOKEN_EXPIRE_DAYS: int = 60
    BCRYPT_ROUNDS: int = 12

    # Posts
    MAX_POST_LENGTH: int = 140
    REDACTED_TERMS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["kerfuffle", "sharbert", "fornax"]
    )

    # Payment provider webhook
    WEBHOOK_API_KEY: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # CORS
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True

    @field_validator("CORS_ORIGINS", "REDACTED_TERMS", mode="before")
    @classmethod
    def _parse_list(cls, value: Any) -> Any:
        """
        Accept JSON array or comma-separated values from env.

        Examples:
            CORS_ORIGINS=["http://localhost:3000","http://example.com"]
            REDACTED_TERMS=kerfuffle,sharbert,fornax
        """
        if not isinstance(value, str):
            return value

        raw = value.strip()
        if not raw:
            return []

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            parsed = None

        if isinstance(parsed, str):
            return [parsed]
        if isinstance(parsed, list):
            return [str(item).strip() for item in parsed if str(item).strip()]

        return [item.strip() for item in raw.split(",") if item.strip()]

    def get_database_path(self) -> str:
        """Resolve the document path; relative paths are kept relative to the cwd"""
        return str(Path(self.DATABASE_PATH).expanduser())

    def get_log_file(self) -> str:
        """Empty means stream logging only; relative paths resolve under the repo root"""
        p = self.LOG_FILE
        if not p or Path(p).is_absolute():
            return p
        return str(_BASE_DIR / p)

    def validate_security_settings(self) -> None:
        """
        Validate runtime security defaults in production.

        Raises:
            ValueError: If insecure defaults are detected.
        """
        if self.ENVIRONMENT.lower() != "production":
            return

        insecure_secret_markers = {
            "",
            "dev-secret-key-change-in-production-use-openssl-rand-hex-32",
            "change-me",
        }

        if self.SECRET_KEY in insecure_secret_markers or len(self.SECRET_KEY) < 32:
            raise ValueError(
                "Insecure SECRET_KEY for production. Use a strong key (e.g. `openssl rand -hex 32`)."
            )

        if not self.WEBHOOK_API_KEY:
            raise ValueError("WEBHOOK_API_KEY must be set in production.")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
