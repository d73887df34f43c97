"""
velada/config/settings.py
Environment-driven application settings

The .env file at the project root is loaded once, before any value is read.
"""
import os
import logging
from pathlib import Path
from typing import List

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

load_dotenv(dotenv_path=ENV_FILE)

logger = logging.getLogger(__name__)


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad values."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default


class Settings:
    """Runtime settings read from the environment."""

    def __init__(self):
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # ================= DATABASE =================
        self.database_url = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./velada.db")

        # ================= AUTH =================
        self.jwt_secret_key = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
        self.jwt_algorithm = "HS256"
        self.access_token_expire_minutes = _env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)
        self.auth_cookie_name = os.getenv("AUTH_COOKIE_NAME", "la_apuestada_auth")
        self.admin_emails = [email.lower() for email in _split_csv(os.getenv("ADMIN_EMAILS", ""))]

        # ================= HTTP =================
        self.allowed_origins = _split_csv(os.getenv("ALLOWED_ORIGINS", ""))
        self.vote_rate_limit = os.getenv("VOTE_RATE_LIMIT", "30/minute")

        # ================= EVENT =================
        self.edition = os.getenv("VELADA_EDITION", "2025")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()
