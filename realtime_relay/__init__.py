"""Realtime relay: per-client bridge between websocket clients and an upstream realtime session."""

__version__ = "0.1.0"

__all__ = ["__version__"]
