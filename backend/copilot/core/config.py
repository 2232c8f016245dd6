"""
config.py
=========
Central configuration for the backend.
Uses pydantic-settings to load from .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    # ── App ──────────────────────────────────────
    APP_NAME: str = "Backend Copilot AI"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Server ───────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Shared secret for the POST routes. Unset → routes are open.
    API_KEY: Optional[str] = None

    # ── Model Configuration ───────────────────────
    # AI runs only when AI_ENABLED is true AND a key is present.
    # Read once at startup, never reloaded.
    OPENAI_API_KEY: Optional[str] = None
    AI_ENABLED: bool = False
    OPENAI_MODEL: str = "gpt-4o-mini"

    # ── Inference Settings ────────────────────────
    TEMPERATURE: float = 0.1       # Low = more deterministic
    MAX_TOKENS: int = 1000
    REQUEST_TIMEOUT: float = 30.0  # Seconds, single attempt

    MAX_CODE_LENGTH: int = 10000   # Characters

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def ai_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY) and self.AI_ENABLED


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    return settings
