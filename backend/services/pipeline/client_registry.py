"""Lazy-loading registry of completion clients, one per provider.

Global singleton per provider, created on first use.
"""

import logging
from typing import Any

from services.pipeline.base import CompletionClient

logger = logging.getLogger(__name__)

_registry: dict[str, CompletionClient] = {}


def _create_client(name: str, **options: Any) -> CompletionClient:
    """Factory: create a completion client by provider name with deferred imports."""
    if name == "openrouter":
        from services.pipeline.openrouter_client import OpenRouterClient
        return OpenRouterClient(**options)
    elif name == "gemini":
        from services.pipeline.gemini_client import GeminiClient
        return GeminiClient(**options)
    else:
        raise ValueError(f"Unknown provider: {name}")


def get_client(name: str, **options: Any) -> CompletionClient:
    """Get a completion client by provider name, creating it on first access.

    ``options`` are only used the first time a provider is requested.
    """
    if name not in _registry:
        logger.info("Creating completion client: %s", name)
        _registry[name] = _create_client(name, **options)
    return _registry[name]


def clear() -> None:
    """Drop all clients. Useful for testing."""
    _registry.clear()
