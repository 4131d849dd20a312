"""
agent/orchestrator.py — UI Generation Orchestrator

Drives the conversation with the LLM that turns a UI description into a
React component:

    plan      → JSON layout plan             (build track, reasoning on)
    generate  → component source             (build track, reasoning on)
    explain   → short plain-language summary (build track, reasoning off)

plus a single-stage modify pipeline on its own track. Stages run strictly in
sequence because every request carries the whole transcript produced so far.

generate_with_progress() is the one progress primitive: an async iterator of
ProgressEvents that always ends with exactly one terminal event (complete or
error). Failures never escape the iterator; run() is a thin consumer on top
for callers that only want the final GenerationResult.

Usage:
    orc = Orchestrator(llm_client, LLMConfig(model="..."))

    async for event in orc.generate_with_progress("A dashboard with a navbar"):
        print(event.stage.value, event.message)

    updated = await orc.modify_code(code, "make the header dark")
"""

from __future__ import annotations

import inspect
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any, Awaitable, Callable, Optional, Union

from uibuilder.agent.extractors import (
    describe_components,
    extract_code,
    extract_structured,
    is_parse_failure,
)
from uibuilder.agent.prompts import (
    MODIFY_SYSTEM,
    PLAN_SYSTEM,
    explain_prompt,
    generate_prompt,
    modify_prompt,
    plan_prompt,
)
from uibuilder.agent.transcript import Transcript
from uibuilder.agent.types import CodeOutput, GenerationResult, PlanOutput, ProgressEvent, Stage
from uibuilder.brain.llm_client import BaseLLMClient
from uibuilder.brain.types import LLMConfig, LLMResponse
from uibuilder.exceptions import PlanParseError
from uibuilder.observability.logger import bind_session, clear_session, get_logger

log = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]

# Display messages for each stage transition
MSG_PLANNING = "📐 Creating UI layout plan..."
MSG_PLANNED = "✅ Plan created"
MSG_GENERATING = "🔧 Generating React code..."
MSG_GENERATED = "✅ Code generated"
MSG_EXPLAINING = "💬 Creating explanation..."
MSG_COMPLETE = "✨ Complete!"


async def notify(callback: Optional[ProgressCallback], event: ProgressEvent) -> None:
    """Deliver event to an optional sync or async progress callback."""
    if callback is None:
        return
    outcome = callback(event)
    if inspect.isawaitable(outcome):
        await outcome


class Orchestrator:
    """
    One UI-building session: owns its build and modify transcripts.

    Not safe for concurrent use — run one generate / modify at a time per
    instance. Create another Orchestrator for an independent session.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        llm_config: LLMConfig,
        session_id: Optional[str] = None,
    ):
        self._llm = llm_client
        self._config = llm_config
        self.id = session_id or f"ui_{uuid.uuid4().hex[:12]}"

        self.build = Transcript("build")
        self.modify = Transcript("modify")

        # Metrics
        self.call_count: int = 0
        self.total_input_tokens: int = 0
        self.total_output_tokens: int = 0

    @classmethod
    def from_settings(cls, settings, llm_client: Optional[BaseLLMClient] = None) -> "Orchestrator":
        """Wire an orchestrator from Settings; the client is built unless injected."""
        if llm_client is None:
            from uibuilder.brain import LLMClientFactory
            llm_client = LLMClientFactory.from_settings(settings)
        llm_config = LLMConfig(
            model=settings.llm.model,
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
            timeout_seconds=settings.llm.timeout_seconds,
        )
        return cls(llm_client=llm_client, llm_config=llm_config)

    # ─────────────────────────────────────────────────────────────────────────
    # Stages
    # ─────────────────────────────────────────────────────────────────────────

    async def plan(self, request: str) -> PlanOutput:
        """Start a fresh build transcript and ask for a JSON layout plan."""
        self.build.reset(PLAN_SYSTEM, plan_prompt(request))
        response = await self._call(self.build, stage=Stage.PLANNING, reasoning=True)
        self.build.append(response.to_turn())
        return PlanOutput(
            plan=extract_structured(response.content),
            reasoning=response.reasoning_details,
        )

    async def generate_code(self, plan: Any) -> CodeOutput:
        self.build.add_user(generate_prompt(plan))
        response = await self._call(self.build, stage=Stage.GENERATING, reasoning=True)
        self.build.append(response.to_turn())
        return CodeOutput(
            code=extract_code(response.content),
            reasoning=response.reasoning_details,
        )

    async def explain(self, plan: Any, code: str) -> str:
        """
        Ask for a short explanation of the generated UI.

        The reply is not appended: the conversation does not continue past it.
        """
        self.build.add_user(explain_prompt(describe_components(plan)))
        response = await self._call(self.build, stage=Stage.EXPLAINING, reasoning=False)
        return response.content

    async def modify_code(self, current_code: str, modification: str) -> CodeOutput:
        """
        Rewrite current_code according to modification.

        Runs on the modify track, reset on every call: the context is only
        the current code and this instruction, never earlier modifications
        or the build conversation.
        """
        self.modify.reset(MODIFY_SYSTEM, modify_prompt(current_code, modification))
        response = await self._call(self.modify, stage=Stage.GENERATING, reasoning=True)
        return CodeOutput(
            code=extract_code(response.content),
            reasoning=response.reasoning_details,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Pipeline
    # ─────────────────────────────────────────────────────────────────────────

    async def generate_with_progress(self, request: str) -> AsyncIterator[ProgressEvent]:
        """
        Run plan → generate → explain, yielding a ProgressEvent per transition.

        Order on success: planning, planning (plan), generating,
        generating (code), explaining, complete. Any failure ends the stream
        with a single error event instead.
        """
        bind_session(self.id)
        log.info("orchestrator.pipeline.start", request=request[:120])
        t0 = time.monotonic()

        try:
            yield ProgressEvent(Stage.PLANNING, MSG_PLANNING)
            planned = await self.plan(request)
            if is_parse_failure(planned.plan):
                raise PlanParseError(raw=planned.plan["raw"])
            yield ProgressEvent(
                Stage.PLANNING, MSG_PLANNED,
                {"plan": planned.plan, "reasoning": planned.reasoning},
            )

            yield ProgressEvent(Stage.GENERATING, MSG_GENERATING)
            generated = await self.generate_code(planned.plan)
            yield ProgressEvent(
                Stage.GENERATING, MSG_GENERATED,
                {"code": generated.code, "reasoning": generated.reasoning},
            )

            yield ProgressEvent(Stage.EXPLAINING, MSG_EXPLAINING)
            explanation = await self.explain(planned.plan, generated.code)

            log.info(
                "orchestrator.pipeline.complete",
                ms=round((time.monotonic() - t0) * 1000),
                code_chars=len(generated.code),
            )
            yield ProgressEvent(
                Stage.COMPLETE, MSG_COMPLETE,
                {"plan": planned.plan, "code": generated.code, "explanation": explanation},
            )

        except PlanParseError as e:
            log.warning("orchestrator.plan_parse_failed", raw=e.raw[:300])
            yield ProgressEvent(Stage.ERROR, str(e), {"raw": e.raw})
        except Exception as e:
            log.error("orchestrator.pipeline.error", error=str(e),
                      error_type=type(e).__name__, exc_info=True)
            yield ProgressEvent(Stage.ERROR, str(e) or type(e).__name__)
        finally:
            clear_session()

    async def run(
        self,
        request: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """
        Consume generate_with_progress() and return the final result.

        on_progress is called with every event as it arrives; it may be a
        plain function or a coroutine function.
        """
        reasoning: dict[str, Any] = {}
        async with aclosing(self.generate_with_progress(request)) as events:
            async for event in events:
                await notify(on_progress, event)

                if event.data and "reasoning" in event.data:
                    key = "plan" if event.stage == Stage.PLANNING else "code"
                    reasoning[key] = event.data["reasoning"]

                if event.stage == Stage.COMPLETE:
                    return GenerationResult(
                        plan=event.data["plan"],
                        code=event.data["code"],
                        explanation=event.data["explanation"],
                        reasoning=reasoning,
                    )
                if event.stage == Stage.ERROR:
                    return GenerationResult(error=event.message, reasoning=reasoning)

        return GenerationResult(error="Pipeline ended without a result", reasoning=reasoning)

    # ─────────────────────────────────────────────────────────────────────────
    # Internal
    # ─────────────────────────────────────────────────────────────────────────

    async def _call(self, transcript: Transcript, stage: Stage, reasoning: bool) -> LLMResponse:
        t0 = time.monotonic()
        log.debug("orchestrator.llm_call.start", stage=stage.value,
                  track=transcript.name, turns=len(transcript))
        response = await self._llm.generate(transcript.turns, self._config, reasoning=reasoning)

        self.call_count += 1
        self.total_input_tokens += response.usage.input_tokens
        self.total_output_tokens += response.usage.output_tokens
        log.info(
            "orchestrator.llm_call.done",
            stage=stage.value,
            track=transcript.name,
            ms=round((time.monotonic() - t0) * 1000),
            chars=len(response.content),
        )
        return response

    def status_summary(self) -> dict:
        return {
            "session_id": self.id,
            "model": self._config.model,
            "llm_calls": self.call_count,
            "tokens_in": self.total_input_tokens,
            "tokens_out": self.total_output_tokens,
            "build_turns": len(self.build),
            "modify_turns": len(self.modify),
        }

    def __repr__(self) -> str:
        return f"<Orchestrator id={self.id} calls={self.call_count}>"
