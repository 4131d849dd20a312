"""
brain/openrouter_client.py — OpenRouter LLM Client

OpenRouter is a unified API gateway for many hosted models. It speaks the
OpenAI chat-completions protocol, so we reuse OpenAIClient, pointing it at
openrouter.ai with the attribution headers OpenRouter asks for.

Models with reasoning support return ``reasoning_details`` on the message;
the toggle is the ``reasoning: {enabled: bool}`` body field.
"""

from __future__ import annotations

from uibuilder.brain.openai_client import OpenAIClient
from uibuilder.brain.types import Provider

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterClient(OpenAIClient):
    """
    OpenRouter client — one API key, any hosted model.

    Requires an OpenRouter API key (https://openrouter.ai/keys).
    app_name / site_url show up in OpenRouter's usage dashboard.
    """

    provider: Provider = Provider.OPENROUTER

    def __init__(
        self,
        api_key: str,
        app_name: str = "AI UI Builder",
        site_url: str = "http://localhost",
        base_url: str = OPENROUTER_BASE_URL,
    ):
        super().__init__(
            api_key=api_key,
            base_url=base_url,
            default_headers={
                "HTTP-Referer": site_url,
                "X-Title": app_name,
            },
        )
        self._app_name = app_name
        self._site_url = site_url

    def __repr__(self) -> str:
        return f"<OpenRouterClient app={self._app_name!r}>"
