"""Runtime settings read from the environment (and an optional .env file)."""
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0
    log_level: str = "WARNING"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.api_key) and bool(self.model)


def load_settings(env_file: str | None = None) -> Settings:
    load_dotenv(env_file)
    api_key = os.getenv("GEMINI_API_KEY", "").strip() or os.getenv("API_KEY", "").strip()
    try:
        timeout = float(os.getenv("GEMINI_TIMEOUT", "60"))
    except ValueError:
        timeout = 60.0
    log_level = os.getenv("LOG_LEVEL", "WARNING").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        log_level = "WARNING"
    return Settings(
        api_key=api_key,
        model=os.getenv("MODEL_NAME", DEFAULT_MODEL).strip() or DEFAULT_MODEL,
        base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL).strip().rstrip("/"),
        timeout=timeout,
        log_level=log_level,
    )
