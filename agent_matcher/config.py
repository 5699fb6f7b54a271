"""Configuration helpers for the agent classifier."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Centralized environment-driven configuration.

    Values are read once at import time; tests reload this module after
    patching the environment.
    """

    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    classifier_model: str = os.getenv("CLASSIFIER_MODEL", "gpt-5-mini")
    reasoning_effort: str = os.getenv("CLASSIFIER_REASONING_EFFORT", "minimal")
    # Selections below this confidence are reported as LOW_CONFIDENCE
    min_confidence: float = float(os.getenv("CLASSIFIER_MIN_CONFIDENCE", "0.0"))
    log_prompts: bool = _env_flag("CLASSIFIER_LOG_PROMPTS")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance to avoid repeated environment reads."""

    return Settings()


settings = get_settings()
