from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL_NAME = "gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL_NAME

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment, after loading a ``.env`` file if present.

    The API key is taken from ``GEMINI_API_KEY`` and falls back to ``API_KEY``.
    Variables already set in the environment win over the ``.env`` file.
    """
    load_dotenv(env_file, override=False)
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    model_name = os.getenv("MONETIZE_AI_MODEL") or DEFAULT_MODEL_NAME
    return Settings(api_key=api_key, model_name=model_name)
