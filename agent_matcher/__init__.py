"""Agent classification: prompt assembly and agent selection for routed requests.

Importing the package reads ``.env`` files so ``config.Settings`` sees the
classifier knobs before any module builds its settings.
"""
from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv


_PROJECT_DIR = Path(__file__).resolve().parent.parent

# Shared defaults come from .env; .env.local wins for per-machine classifier settings.
load_dotenv(_PROJECT_DIR / ".env")
load_dotenv(_PROJECT_DIR / ".env.local", override=True)
