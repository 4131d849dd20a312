"""
tests/unit/test_state.py — Builder State Tests

Covers:
  - submit() routes to generate without code and to modify with code
  - successful generation records a version; failures record nothing
  - modify emits a generating / complete pair and records "Modify: ..."
  - rollback, clear, export
"""

from __future__ import annotations

import pytest

from uibuilder.agent.orchestrator import Orchestrator
from uibuilder.agent.types import Stage
from uibuilder.app.state import MSG_MODIFIED, MSG_MODIFYING, BuilderState
from uibuilder.exceptions import AgentError, TransportError
from uibuilder.history.versions import VersionHistory


@pytest.fixture
def history():
    return VersionHistory()


def _state(llm, llm_config, history) -> BuilderState:
    return BuilderState(Orchestrator(llm, llm_config), history)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_first_submit_generates(self, make_llm, llm_config, history, dashboard):
        state = _state(make_llm(*dashboard.replies), llm_config, history)

        result = await state.submit(dashboard.request)

        assert result.ok
        assert state.code == dashboard.code
        assert state.plan == dashboard.plan
        assert state.explanation == dashboard.explanation
        assert len(history) == 1
        version = history.current()
        assert version.code == dashboard.code
        assert version.plan == dashboard.plan
        assert version.prompt == dashboard.request

    @pytest.mark.asyncio
    async def test_second_submit_modifies(self, make_llm, reply, llm_config, history, dashboard):
        llm = make_llm(*dashboard.replies, reply("```tsx\nconst Dark = 1\n```"))
        state = _state(llm, llm_config, history)
        await state.submit(dashboard.request)

        result = await state.submit("make it dark")

        assert result.ok
        assert result.code == "const Dark = 1"
        assert state.code == "const Dark = 1"
        assert state.plan is None
        assert llm.generate.call_count == 4
        assert [v.prompt for v in history] == [dashboard.request, "Modify: make it dark"]
        assert history.current().plan is None

    @pytest.mark.asyncio
    async def test_failed_generation_records_nothing(self, make_llm, reply, llm_config, history):
        state = _state(make_llm(reply("no plan")), llm_config, history)
        seen = []

        result = await state.submit("a form", on_progress=seen.append)

        assert not result.ok
        assert state.code == ""
        assert len(history) == 0
        assert seen[-1].stage == Stage.ERROR
        assert state.last_event is seen[-1]
        assert state.is_generating is False


class TestModify:
    @pytest.mark.asyncio
    async def test_progress_pair(self, make_llm, reply, llm_config, history):
        state = _state(make_llm(reply("```tsx\nv2\n```")), llm_config, history)
        state.set_code("v1")
        seen = []

        await state.modify("change", on_progress=seen.append)

        assert [(e.stage, e.message) for e in seen] == [
            (Stage.GENERATING, MSG_MODIFYING),
            (Stage.COMPLETE, MSG_MODIFIED),
        ]
        assert seen[-1].data == {"code": "v2"}

    @pytest.mark.asyncio
    async def test_error_event_and_no_version(self, make_llm, llm_config, history):
        llm = make_llm(TransportError("Rate limit exceeded", status_code=429))
        state = _state(llm, llm_config, history)
        state.set_code("v1")
        seen = []

        result = await state.modify("change", on_progress=seen.append)

        assert result.error == "Rate limit exceeded"
        assert seen[-1].stage == Stage.ERROR
        assert state.code == "v1"
        assert len(history) == 0

    @pytest.mark.asyncio
    async def test_requires_code(self, make_llm, llm_config, history):
        state = _state(make_llm(), llm_config, history)
        with pytest.raises(AgentError):
            await state.modify("change")


class TestHistoryOperations:
    @pytest.mark.asyncio
    async def test_rollback_restores_code_and_plan(self, make_llm, reply, llm_config, history, dashboard):
        llm = make_llm(*dashboard.replies, reply("```tsx\nv2\n```"))
        state = _state(llm, llm_config, history)
        await state.submit(dashboard.request)
        await state.submit("change")
        first = history.versions[0]

        restored = state.rollback(first.id)

        assert restored == first
        assert state.code == dashboard.code
        assert state.plan == dashboard.plan

    def test_rollback_unknown_keeps_code(self, make_llm, llm_config, history):
        state = _state(make_llm(), llm_config, history)
        state.set_code("v1")
        assert state.rollback(99) is None
        assert state.code == "v1"

    def test_restores_current_version_on_start(self, make_llm, llm_config, history):
        history.add("restored code", {"components": []}, "earlier")
        state = _state(make_llm(), llm_config, history)
        assert state.code == "restored code"
        assert state.has_code

    def test_clear(self, make_llm, llm_config, history):
        history.add("x", None, "")
        state = _state(make_llm(), llm_config, history)
        state.clear()
        assert not state.has_code
        assert len(history) == 0


class TestExport:
    def test_export_to_file(self, make_llm, llm_config, history, tmp_path):
        state = _state(make_llm(), llm_config, history)
        state.set_code("export default function GeneratedUI() {}")

        target = state.export(tmp_path / "out" / "Dashboard.tsx")

        assert target.read_text() == "export default function GeneratedUI() {}\n"

    def test_export_to_directory(self, make_llm, llm_config, history, tmp_path):
        state = _state(make_llm(), llm_config, history)
        state.set_code("code")
        assert state.export(tmp_path) == tmp_path / "GeneratedUI.tsx"

    def test_export_without_code(self, make_llm, llm_config, history, tmp_path):
        state = _state(make_llm(), llm_config, history)
        with pytest.raises(AgentError):
            state.export(tmp_path / "x.tsx")
