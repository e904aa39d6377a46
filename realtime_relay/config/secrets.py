"""Secrets and authentication configuration."""

from __future__ import annotations

import os

ENV_OPENAI_API_KEY = "OPENAI_API_KEY"


def get_openai_api_key() -> str:
    return (os.getenv(ENV_OPENAI_API_KEY) or "").strip()


__all__ = ["ENV_OPENAI_API_KEY", "get_openai_api_key"]
