"""
brain/__init__.py — UIBuilder LLM Transport
"""

from __future__ import annotations

from typing import Optional

from uibuilder.brain.llm_client import BaseLLMClient
from uibuilder.brain.types import (
    LLMConfig,
    LLMResponse,
    Provider,
    Role,
    TokenUsage,
    Turn,
)
from uibuilder.exceptions import TransportError

__all__ = [
    "LLMClientFactory",
    "BaseLLMClient",
    "TransportError",
    "Turn",
    "LLMConfig",
    "LLMResponse",
    "TokenUsage",
    "Role",
    "Provider",
]

# Default models per provider
_DEFAULT_MODELS: dict[str, str] = {
    "openrouter":  "arcee-ai/trinity-large-preview:free",
    "openai":      "gpt-4o",
}


class LLMClientFactory:

    @staticmethod
    def create(
        provider: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs,
    ) -> BaseLLMClient:

        provider = provider.lower().strip()

        if provider == "openrouter":
            if not api_key:
                raise TransportError("OPENROUTER_API_KEY is required", provider="openrouter")
            from uibuilder.brain.openrouter_client import OPENROUTER_BASE_URL, OpenRouterClient
            return OpenRouterClient(
                api_key=api_key,
                app_name=kwargs.get("app_name", "AI UI Builder"),
                site_url=kwargs.get("site_url", "http://localhost"),
                base_url=base_url or OPENROUTER_BASE_URL,
            )

        elif provider == "openai":
            if not api_key:
                raise TransportError("OPENAI_API_KEY is required", provider="openai")
            from uibuilder.brain.openai_client import OpenAIClient
            return OpenAIClient(api_key=api_key, base_url=base_url)

        else:
            raise ValueError(
                f"Unknown LLM provider: '{provider}'. "
                f"Valid options: openrouter, openai"
            )

    @staticmethod
    def from_settings(settings) -> BaseLLMClient:
        """Create the client for settings.llm.provider with its API key."""
        provider = settings.llm.provider
        return LLMClientFactory.create(
            provider=provider,
            api_key=settings.api_key_for(provider),
            base_url=settings.llm.base_url,
            app_name=settings.llm.app_name,
            site_url=settings.llm.site_url,
        )

    @staticmethod
    def default_model(provider: str) -> str:
        return _DEFAULT_MODELS.get(provider.lower(), _DEFAULT_MODELS["openrouter"])
