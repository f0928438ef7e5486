"""Application configuration.

Environment variables override all defaults.
SECRET_KEY must be set in production - startup fails fast if it is missing.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load .env for local development (no-op if the file is absent)
_BACKEND_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)


def _split_env(name: str, default: str) -> List[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


class Settings:
    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./retailhub.db")

    # JWT
    SECRET_KEY: str = os.getenv("SECRET_KEY", None)
    if not SECRET_KEY:
        if os.getenv("ENVIRONMENT", "development") == "production":
            raise ValueError(
                "SECRET_KEY must be set in production environment. "
                "Generate with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
            )
        import warnings
        warnings.warn(
            "SECRET_KEY not set in environment. Using development default. "
            "Set SECRET_KEY in .env to a strong random value.",
            RuntimeWarning
        )
        SECRET_KEY = "development-only-weak-default-change-in-production"

    ALGORITHM: str = "HS256"
    # A shift at the scanner should not need a re-login
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    AUTH_COOKIE_NAME: str = "retailhub_token"

    CORS_ORIGINS: List[str] = _split_env(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:3001,http://127.0.0.1:3001",
    )
    ALLOWED_HOSTS: List[str] = _split_env("ALLOWED_HOSTS", "localhost,127.0.0.1")

    # Cookies
    SECURE_COOKIES: bool = os.getenv("ENVIRONMENT", "development") == "production"
    SAME_SITE_COOKIE: str = "strict"

    # Password Policy
    MIN_PASSWORD_LENGTH: int = 12
    REQUIRE_SPECIAL_CHARS: bool = True
    REQUIRE_NUMBERS: bool = True

    # Stock admission
    # Location stamped on admitted units when no store is flagged as warehouse
    DEFAULT_WAREHOUSE_LOCATION: str = os.getenv("DEFAULT_WAREHOUSE_LOCATION", "Mohammadpur")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"


settings = Settings()
