"""LLM-клиент reasoning-сервиса (роутинг намерений, сводки)."""

from .client import ReasoningClient, build_reasoning_client

__all__ = [
    "ReasoningClient",
    "build_reasoning_client",
]
