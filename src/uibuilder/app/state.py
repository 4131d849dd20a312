"""
app/state.py — Builder State

The caller side of the orchestrator: what the interface talks to. Holds the
component currently on screen, consumes the progress stream, routes a prompt
to a fresh generation or to a modification of the current code, and records
every result in the version history.

The modify stage has no progress stream of its own, so modify() wraps it in
a generating → complete / error pair to give the interface one shape of
event to render for both flows.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from uibuilder.agent.orchestrator import Orchestrator, ProgressCallback, notify
from uibuilder.agent.prompts import COMPONENT_NAME
from uibuilder.agent.types import GenerationResult, ProgressEvent, Stage
from uibuilder.exceptions import AgentError, UIBuilderError
from uibuilder.history.versions import Version, VersionHistory
from uibuilder.observability.logger import get_logger

log = get_logger(__name__)

MSG_MODIFYING = "🔧 Modifying code..."
MSG_MODIFIED = "✨ Code updated!"
MODIFY_PROMPT_PREFIX = "Modify: "


class BuilderState:
    """Current component plus the operations the interface exposes on it."""

    def __init__(self, orchestrator: Orchestrator, history: VersionHistory):
        self.orchestrator = orchestrator
        self.history = history

        current = history.current()
        self.code: str = current.code if current else ""
        self.plan: Any = current.plan if current else None
        self.explanation: Optional[str] = None
        self.last_event: Optional[ProgressEvent] = None
        self.is_generating: bool = False

    @property
    def has_code(self) -> bool:
        return bool(self.code.strip())

    # ── Generation ────────────────────────────────────────────────────────────

    async def submit(self, prompt: str, on_progress: Optional[ProgressCallback] = None) -> GenerationResult:
        """Modify the current component if there is one, otherwise build a new one."""
        if self.has_code:
            return await self.modify(prompt, on_progress)
        return await self.generate(prompt, on_progress)

    async def generate(self, prompt: str, on_progress: Optional[ProgressCallback] = None) -> GenerationResult:
        async def track(event: ProgressEvent) -> None:
            self.last_event = event
            await notify(on_progress, event)

        self.is_generating = True
        try:
            result = await self.orchestrator.run(prompt, on_progress=track)
        finally:
            self.is_generating = False

        if result.ok:
            self.code = result.code or ""
            self.plan = result.plan
            self.explanation = result.explanation
            self.history.add(self.code, self.plan, prompt)
        return result

    async def modify(self, prompt: str, on_progress: Optional[ProgressCallback] = None) -> GenerationResult:
        if not self.has_code:
            raise AgentError("Nothing to modify yet. Describe a UI to generate first.")

        async def emit(event: ProgressEvent) -> None:
            self.last_event = event
            await notify(on_progress, event)

        await emit(ProgressEvent(Stage.GENERATING, MSG_MODIFYING))
        self.is_generating = True
        try:
            updated = await self.orchestrator.modify_code(self.code, prompt)
        except UIBuilderError as e:
            log.error("builder.modify_failed", error=str(e), error_type=type(e).__name__)
            await emit(ProgressEvent(Stage.ERROR, str(e)))
            return GenerationResult(error=str(e))
        finally:
            self.is_generating = False

        self.code = updated.code
        self.plan = None
        self.explanation = None
        self.history.add(updated.code, None, f"{MODIFY_PROMPT_PREFIX}{prompt}")
        await emit(ProgressEvent(Stage.COMPLETE, MSG_MODIFIED, {"code": updated.code}))
        return GenerationResult(code=updated.code, reasoning={"code": updated.reasoning})

    # ── Editing & history ─────────────────────────────────────────────────────

    def set_code(self, code: str) -> None:
        """Manual edit from the code surface. Not recorded as a version."""
        self.code = code

    def rollback(self, version_id: int) -> Optional[Version]:
        version = self.history.rollback(version_id)
        if version is not None:
            self.code = version.code
            self.plan = version.plan
            self.explanation = None
        return version

    def clear(self) -> None:
        self.code = ""
        self.plan = None
        self.explanation = None
        self.last_event = None
        self.history.clear()

    def export(self, path: str | Path) -> Path:
        """Write the current component to path (a directory gets GeneratedUI.tsx)."""
        if not self.has_code:
            raise AgentError("Nothing to export yet.")
        target = Path(path).expanduser()
        if target.is_dir():
            target = target / f"{COMPONENT_NAME}.tsx"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.code + "\n", encoding="utf-8")
        log.info("builder.exported", path=str(target), chars=len(self.code))
        return target
