"""Admission control configuration (env names and defaults only)."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"

# 0 admits every connection.
DEFAULT_MAX_CONCURRENT_CONNECTIONS = 0

__all__ = [
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "ENV_MAX_CONCURRENT_CONNECTIONS",
]
