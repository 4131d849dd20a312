"""
agent/prompts.py — Stage Prompts

Prompt templates for the plan / generate / explain stages and the modify
stage. Generated components follow one convention so the preview renderer
can import them: a single ``export default function GeneratedUI()`` that
imports each primitive from ``@/components/ui/<Name>``.
"""

from __future__ import annotations

import json
from typing import Any

COMPONENT_NAME = "GeneratedUI"
UI_IMPORT_ROOT = "@/components/ui"

UI_PRIMITIVES: tuple[str, ...] = (
    "Button", "Input", "Card", "Modal", "Sidebar", "Navbar", "Table", "Chart",
)

_PRIMITIVE_LIST = ", ".join(UI_PRIMITIVES)

PLAN_SYSTEM = f"""\
You are an expert UI architect. You create JSON layout plans for React components.
You can ONLY use these {len(UI_PRIMITIVES)} components: {_PRIMITIVE_LIST}.
Always output valid JSON that follows this structure exactly."""

_PLAN_USER = """\
Create a detailed JSON layout plan for this UI request: "{request}"

Requirements:
- Use ONLY these components: {primitives}
- Structure: {{ "layout": {{ "type": "container", "className": "...", "children": [...] }}, "components": [...] }}
- Each component needs: {{ "type": "ComponentName", "props": {{ ... }}, "children": [...] }}
- Use Tailwind classes for styling (className prop)
- Include realistic props (labels, placeholders, data, etc.)
- For Table: include headers array and data array with sample data
- For Chart: include data array with {{ label, value, color? }} objects
- Make it professional and complete

Respond with ONLY the JSON plan, no markdown code blocks or explanations."""

_GENERATE_USER = """\
Convert this JSON plan to a complete React + TypeScript component.

JSON Plan: {plan_json}

Requirements:
- Create a function component called "{component}"
- Import each component used from '{root}/[ComponentName]' (e.g., import {{ Button }} from '{root}/Button')
- Use TypeScript with proper types
- Use Tailwind CSS for layout (flex, grid, gap, p-4, etc.)
- Include all mock data directly in the component
- Add useState hooks for any interactive state (modal open/close, form values, etc.)
- Make it fully functional and interactive
- Export as default: export default function {component}() {{ ... }}

Return ONLY the TypeScript code, no markdown code blocks or explanations."""

_EXPLAIN_USER = """\
Explain this UI in 2-3 simple sentences for a non-technical user.

The UI includes these components: {components}

Requirements:
- Friendly, casual tone
- Mention what the user can do with this UI
- Keep it brief and helpful"""

MODIFY_SYSTEM = f"""\
You are an expert React developer. You modify existing React components based on user requests.
You can ONLY use these components: {_PRIMITIVE_LIST} from '{UI_IMPORT_ROOT}/'."""

_MODIFY_USER = """\
Modify this React component based on the user's request.

Current Code:
{code}

User Request: "{modification}"

Requirements:
- Keep the component name as "{component}"
- Maintain existing functionality unless explicitly asked to change it
- Use the same import pattern: import {{ X }} from '{root}/X'
- Use Tailwind CSS for styling
- Return the complete modified component

Return ONLY the TypeScript code, no markdown code blocks or explanations."""


def plan_prompt(request: str) -> str:
    return _PLAN_USER.format(request=request, primitives=_PRIMITIVE_LIST)


def generate_prompt(plan: Any) -> str:
    return _GENERATE_USER.format(
        plan_json=json.dumps(plan, indent=2, ensure_ascii=False),
        component=COMPONENT_NAME,
        root=UI_IMPORT_ROOT,
    )


def explain_prompt(components: str) -> str:
    return _EXPLAIN_USER.format(components=components)


def modify_prompt(code: str, modification: str) -> str:
    return _MODIFY_USER.format(
        code=code,
        modification=modification,
        component=COMPONENT_NAME,
        root=UI_IMPORT_ROOT,
    )
