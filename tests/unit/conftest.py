"""
Shared fixtures for the unit suite: a scripted LLM client and canned model
replies for the dashboard scenario. No network access anywhere.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from uibuilder.brain.llm_client import BaseLLMClient
from uibuilder.brain.types import LLMConfig, LLMResponse, TokenUsage


def _reply(content: str, reasoning=None, input_tokens: int = 10, output_tokens: int = 20) -> LLMResponse:
    return LLMResponse(
        content=content,
        reasoning_details=reasoning,
        usage=TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens),
        model="test-model",
    )


def _make_llm(*responses) -> MagicMock:
    """generate() returns (or raises) each item of responses in turn."""
    llm = MagicMock(spec=BaseLLMClient)
    llm.generate = AsyncMock(side_effect=list(responses))
    llm.health_check = AsyncMock(return_value=True)
    return llm


@pytest.fixture
def reply():
    return _reply


@pytest.fixture
def make_llm():
    return _make_llm


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(model="test-model", temperature=0.7, max_tokens=4000)


@pytest.fixture
def dashboard():
    """Request, model replies and expected artifacts for a navbar + table dashboard."""
    plan = {
        "layout": {"type": "container", "className": "p-4", "children": []},
        "components": [{"type": "Navbar"}, {"type": "Table"}],
    }
    code = (
        "import { Navbar } from '@/components/ui/Navbar'\n"
        "import { Table } from '@/components/ui/Table'\n\n"
        "export default function GeneratedUI() {\n"
        "  return <div><Navbar /><Table /></div>\n"
        "}"
    )
    explanation = (
        "This is a dashboard with a navigation bar at the top. "
        "Below it you can browse your data in a table."
    )
    plan_reasoning = [{"type": "reasoning.text", "text": "lay it out"}]
    code_reasoning = [{"type": "reasoning.text", "text": "write it"}]
    return SimpleNamespace(
        request="Create a dashboard with a navbar and table",
        plan=plan,
        code=code,
        explanation=explanation,
        plan_reasoning=plan_reasoning,
        code_reasoning=code_reasoning,
        replies=[
            _reply("Sure! Here is the plan:\n" + json.dumps(plan) + "\nLet me know.",
                   reasoning=plan_reasoning),
            _reply(f"```tsx\n{code}\n```", reasoning=code_reasoning),
            _reply(explanation),
        ],
    )
