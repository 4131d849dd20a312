"""
brain/types.py — UIBuilder Brain Data Models

Shared types used by the LLM transport and the agent orchestrator.
Providers map their native response shapes into these types.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Provider(str, Enum):
    OPENROUTER = "openrouter"
    OPENAI = "openai"


# ─────────────────────────────────────────────────────────────────────────────
# Turn
# ─────────────────────────────────────────────────────────────────────────────


class Turn(BaseModel):
    """
    One message in a transcript.

    reasoning_details is whatever the model shipped alongside its answer.
    It is kept for display only and is never sent back to the model.
    """
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = ""
    reasoning_details: Optional[Any] = None

    @classmethod
    def system(cls, content: str) -> "Turn":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Turn":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str, reasoning_details: Any = None) -> "Turn":
        return cls(role=Role.ASSISTANT, content=content, reasoning_details=reasoning_details)

    def to_wire(self) -> dict[str, str]:
        """The {role, content} pair sent to the chat endpoint."""
        return {"role": self.role.value, "content": self.content}


# ─────────────────────────────────────────────────────────────────────────────
# LLM config
# ─────────────────────────────────────────────────────────────────────────────


class LLMConfig(BaseModel):
    """
    Per-request LLM configuration.
    """
    model: str
    temperature: float = 0.7
    max_tokens: int = 4000
    timeout_seconds: float = 120.0


# ─────────────────────────────────────────────────────────────────────────────
# LLM response
# ─────────────────────────────────────────────────────────────────────────────


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMResponse(BaseModel):
    """
    Normalised reply from a chat-completion call.
    """
    content: str = ""
    reasoning_details: Optional[Any] = None     # opaque, passed through untouched
    usage: TokenUsage = Field(default_factory=TokenUsage)
    model: str = ""                             # actual model used (may differ from requested)
    provider: Provider = Provider.OPENROUTER

    def to_turn(self) -> Turn:
        return Turn.assistant(self.content, reasoning_details=self.reasoning_details)
