from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from content_insights.errors import ConfigurationError

DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"


def _project_root() -> Path:
    """
    Resolve project root assuming this file lives in: <root>/src/content_insights/config.py
    """
    return Path(__file__).resolve().parents[2]


class Settings(BaseModel):
    # An empty key is allowed here; the completion client refuses to run without one.
    openai_api_key: str = Field(default="", description="API key for the completion endpoint")

    openai_api_base: str = Field(default=DEFAULT_API_BASE)
    openai_model: str = Field(default=DEFAULT_MODEL)

    request_timeout_s: float = Field(default=120.0, gt=0)
    analysis_attempts: int = Field(default=1, ge=1, le=10)
    max_articles: int = Field(default=5, ge=1)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    data_dir: Path = Field(default_factory=lambda: _project_root() / "data")

    @property
    def history_file(self) -> Path:
        return self.data_dir / "search_history.jsonl"


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Loads environment variables (optionally from .env) and validates Settings.

    Call once at process start and pass the result around explicitly.
    """
    if env_file is None:
        env_file = _project_root() / ".env"

    # Environment variables override .env
    if env_file.exists():
        load_dotenv(env_file, override=False)

    data = {
        "openai_api_key": os.getenv("OPENAI_API_KEY", ""),
        "openai_api_base": os.getenv("OPENAI_API_BASE", DEFAULT_API_BASE),
        "openai_model": os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
        "request_timeout_s": os.getenv("REQUEST_TIMEOUT_S", "120"),
        "analysis_attempts": os.getenv("ANALYSIS_ATTEMPTS", "1"),
        "max_articles": os.getenv("MAX_ARTICLES", "5"),
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "data_dir": os.getenv("DATA_DIR", str(_project_root() / "data")),
    }

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration. Check the environment variables.\n"
            f"Details:\n{e}"
        ) from e
