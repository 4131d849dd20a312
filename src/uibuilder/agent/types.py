"""
agent/types.py — Pipeline Result and Progress Types

Everything the orchestrator hands back to a caller. All of it is frozen:
once an event or result is emitted it belongs to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Stage(str, Enum):
    PLANNING = "planning"
    GENERATING = "generating"
    EXPLAINING = "explaining"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.COMPLETE, Stage.ERROR)


@dataclass(frozen=True)
class ProgressEvent:
    """One stage transition of a pipeline run."""
    stage: Stage
    message: str
    data: Optional[dict[str, Any]] = None

    @property
    def is_terminal(self) -> bool:
        return self.stage.is_terminal


@dataclass(frozen=True)
class PlanOutput:
    plan: Any
    reasoning: Any = None


@dataclass(frozen=True)
class CodeOutput:
    code: str
    reasoning: Any = None


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of one pipeline run.

    Either error is set, or plan / code / explanation are. reasoning maps a
    stage name to whatever reasoning payload that stage returned.
    """
    plan: Any = None
    code: Optional[str] = None
    explanation: Optional[str] = None
    reasoning: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
