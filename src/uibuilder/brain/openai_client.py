"""
brain/openai_client.py — OpenAI-Compatible Chat Client

Works against any OpenAI-compatible chat-completions endpoint (OpenAI itself,
OpenRouter, a LiteLLM proxy, local vLLM). Handles message translation, the
reasoning toggle, and error normalisation into TransportError.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import openai
from openai import AsyncOpenAI

from uibuilder.brain.llm_client import BaseLLMClient, error_message_from_body, response_body
from uibuilder.brain.types import LLMConfig, LLMResponse, Provider, TokenUsage, Turn
from uibuilder.exceptions import TransportError
from uibuilder.observability.logger import get_logger

log = get_logger(__name__)


class OpenAIClient(BaseLLMClient):
    """
    OpenAI-compatible client.

    The request body always carries ``reasoning: {enabled: bool}``; endpoints
    that do not understand the field ignore it.
    """

    provider: Provider = Provider.OPENAI

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,     # None = official OpenAI endpoint
        default_headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(api_key=api_key, base_url=base_url)
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            default_headers=default_headers,
            max_retries=0,
        )

    # ── Public API ────────────────────────────────────────────────────────────

    async def generate(
        self,
        turns: Sequence[Turn],
        config: LLMConfig,
        reasoning: bool = True,
    ) -> LLMResponse:
        wire_messages = self._to_provider_messages(turns)

        log.debug(
            f"{self.provider.value}.generate.start",
            model=config.model,
            message_count=len(wire_messages),
            reasoning=reasoning,
        )

        try:
            response = await self._client.chat.completions.create(
                model=config.model,
                messages=wire_messages,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=config.timeout_seconds,
                extra_body={"reasoning": {"enabled": reasoning}},
            )
        except openai.APIStatusError as e:
            # e.body is already unwrapped by the SDK; read the raw payload instead
            message = error_message_from_body(response_body(e.response), e.status_code)
            log.warning(
                f"{self.provider.value}.generate.http_error",
                status_code=e.status_code,
                error=message,
            )
            raise TransportError(
                message, provider=self.provider.value, status_code=e.status_code
            ) from e
        except openai.APIConnectionError as e:
            raise TransportError(
                f"Cannot reach {self.provider.value} API: {e}",
                provider=self.provider.value,
            ) from e
        except openai.APIError as e:
            raise TransportError(str(e), provider=self.provider.value) from e

        result = self._from_provider_response(response)
        log.debug(
            f"{self.provider.value}.generate.complete",
            model=result.model,
            input_tokens=result.usage.input_tokens,
            output_tokens=result.usage.output_tokens,
            has_reasoning=result.reasoning_details is not None,
        )
        return result

    async def health_check(self) -> bool:
        try:
            await self._client.models.list()
            return True
        except openai.APIError as e:
            log.warning(
                f"{self.provider.value}.health_check.failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    # ── Private helpers ───────────────────────────────────────────────────────

    def _to_provider_messages(self, turns: Sequence[Turn]) -> list[dict]:
        """Reasoning metadata is receive-only: only role and content go out."""
        return [turn.to_wire() for turn in turns]

    def _from_provider_response(self, response: Any) -> LLMResponse:
        """Translate a ChatCompletion into the internal LLMResponse."""
        if not getattr(response, "choices", None):
            # OpenRouter reports some upstream failures as a 200 with an error object
            upstream = getattr(response, "error", None)
            if isinstance(upstream, str) and upstream:
                message = upstream
            elif upstream:
                message = error_message_from_body({"error": upstream}, None)
            else:
                message = "Model returned no choices"
            raise TransportError(message, provider=self.provider.value)

        msg = response.choices[0].message
        usage = TokenUsage(
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
        )

        return LLMResponse(
            content=msg.content or "",
            reasoning_details=getattr(msg, "reasoning_details", None),
            usage=usage,
            model=response.model or "",
            provider=self.provider,
        )
