"""
brain/llm_client.py — Abstract LLM Client

All provider implementations must subclass BaseLLMClient and implement
generate(). A call is a single round-trip: there is no retry or failover
layer. A failed request surfaces as TransportError and the user re-asks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from uibuilder.brain.types import LLMConfig, LLMResponse, Turn
from uibuilder.exceptions import TransportError


class BaseLLMClient(ABC):
    """
    Abstract base for all LLM provider clients.

    Subclasses must implement:
      - generate()     -> call the LLM, return normalised LLMResponse
      - health_check() -> verify connectivity to the provider
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key
        self.base_url = base_url

    @abstractmethod
    async def generate(
        self,
        turns: Sequence[Turn],
        config: LLMConfig,
        reasoning: bool = True,
    ) -> LLMResponse:
        """
        Send the transcript and return the model's single reply.

        reasoning toggles whether the backend is asked for reasoning traces.
        Raises TransportError on any failed round-trip.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the provider is reachable and the API key is valid."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


def error_message_from_body(body: Any, status_code: Optional[int]) -> str:
    """
    Best-effort human message from an error response body.

    OpenAI-compatible endpoints answer with {"error": {"message": ...}}.
    A body that parsed but has no message falls back to the status code;
    a body that did not parse at all (None) falls back to "Unknown error".
    """
    if body is None:
        return "Unknown error"
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
    return f"API Error: {status_code}"


def response_body(response: Any) -> Any:
    """The decoded JSON body of an httpx response, or None if it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return None


__all__ = ["BaseLLMClient", "TransportError", "error_message_from_body", "response_body"]
