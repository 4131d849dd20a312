"""
agent/transcript.py — Conversation Transcript

Ordered, append-only list of turns that seeds every request on one track.
A transcript is only ever replaced wholesale (reset) or extended (append);
nothing is removed or reordered in between.
"""

from __future__ import annotations

from collections.abc import Iterator

from uibuilder.brain.types import Role, Turn
from uibuilder.observability.logger import get_logger

log = get_logger(__name__)


class Transcript:
    """One conversation track (build or modify) owned by a single orchestrator."""

    def __init__(self, name: str):
        self.name = name
        self._turns: list[Turn] = []

    def reset(self, system_prompt: str, first_user_turn: str) -> None:
        """Start a fresh context: system prompt plus the opening user turn."""
        dropped = len(self._turns)
        self._turns = [Turn.system(system_prompt), Turn.user(first_user_turn)]
        log.debug("transcript.reset", track=self.name, dropped_turns=dropped)

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    def add_user(self, content: str) -> None:
        self.append(Turn.user(content))

    @property
    def turns(self) -> tuple[Turn, ...]:
        """Read-only snapshot, safe to hand to the transport."""
        return tuple(self._turns)

    def count(self, role: Role) -> int:
        return sum(1 for t in self._turns if t.role == role)

    def to_wire(self) -> list[dict[str, str]]:
        return [t.to_wire() for t in self._turns]

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __len__(self) -> int:
        return len(self._turns)

    def __repr__(self) -> str:
        return f"<Transcript {self.name} turns={len(self._turns)}>"
