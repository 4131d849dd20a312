"""
agent/extractors.py — Artifact Extractors

Recover a JSON layout plan or a component's source from free-form model
output. Models do not reliably follow "respond with ONLY the JSON" — they add
a sentence of preamble, wrap things in markdown fences, or trail off with a
sign-off — so each extractor runs an ordered list of strategies, most
specific first.

Every function here is pure and total: none of them raises.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator
from typing import Any

PARSE_FAILED = "Failed to parse"

# A fenced block either opens with a tag line (```tsx\n) or has no tag at all.
# The tag alternative insists on a newline so "```const x```" is read as an
# untagged block rather than a block tagged "const".
_FENCE = re.compile(r"```(?:([\w+#.-]+)[ \t]*\n|[ \t]*\n?)([\s\S]*?)\s*```")
_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")

CODE_TAGS = frozenset({"tsx", "ts", "jsx", "js", "typescript", "javascript"})

# Cap on how many "{" positions the balanced scan will try
_MAX_BRACE_STARTS = 64


# ─────────────────────────────────────────────────────────────────────────────
# Structured data
# ─────────────────────────────────────────────────────────────────────────────


def _fences(text: str) -> Iterator[tuple[str, str]]:
    """Yield (tag, body) for every complete fenced block, tag lower-cased or ''."""
    for m in _FENCE.finditer(text):
        yield (m.group(1) or "").lower(), m.group(2)


def _json_fences(text: str) -> Iterator[str]:
    for tag, body in _fences(text):
        if tag == "json":
            yield body


def _any_fences(text: str) -> Iterator[str]:
    for _tag, body in _fences(text):
        yield body


def _greedy_object(text: str) -> Iterator[str]:
    m = _GREEDY_OBJECT.search(text)
    if m:
        yield m.group(0)


def _balanced_objects(text: str) -> Iterator[str]:
    """
    Yield each brace-balanced {...} span, trying successive opening braces.

    Braces inside JSON string literals are ignored, so a prop value such as
    "label": "Price {USD}" does not end the span early.
    """
    starts = 0
    pos = text.find("{")
    while pos != -1 and starts < _MAX_BRACE_STARTS:
        starts += 1
        depth = 0
        in_string = False
        escaped = False
        for i in range(pos, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    yield text[pos:i + 1]
                    break
        pos = text.find("{", pos + 1)


def _whole_text(text: str) -> Iterator[str]:
    yield text.strip()


# Priority order. Each strategy only proposes candidates; parsing is shared.
STRUCTURED_STRATEGIES: tuple[Callable[[str], Iterator[str]], ...] = (
    _json_fences,
    _any_fences,
    _greedy_object,
    _balanced_objects,
    _whole_text,
)


def _parse(candidate: str) -> tuple[bool, Any]:
    try:
        value = json.loads(candidate.strip())
    except (json.JSONDecodeError, ValueError, RecursionError):
        return False, None
    # A bare number or string is not a structured payload
    return isinstance(value, (dict, list)), value


def extract_structured(text: str) -> Any:
    """
    Pull a JSON object (or array) out of model output.

    Tries, in order: a ```json fence, any fence, the first-{ to last-} span,
    each brace-balanced span, then the whole text. The first candidate that
    parses wins. When nothing parses the parse-failure sentinel
    ``{"error": "Failed to parse", "raw": text}`` is returned instead of
    raising; use is_parse_failure() to recognise it.
    """
    text = text or ""
    for strategy in STRUCTURED_STRATEGIES:
        for candidate in strategy(text):
            ok, value = _parse(candidate)
            if ok:
                return value
    return parse_failure(text)


def parse_failure(raw: str) -> dict[str, str]:
    return {"error": PARSE_FAILED, "raw": raw}


def is_parse_failure(value: Any) -> bool:
    """
    True only for the exact sentinel shape produced by extract_structured.

    A plan the model returned with its own top-level "error" key is still a
    plan unless it also matches the sentinel exactly.
    """
    return (
        isinstance(value, dict)
        and set(value) == {"error", "raw"}
        and value.get("error") == PARSE_FAILED
    )


# ─────────────────────────────────────────────────────────────────────────────
# Source code
# ─────────────────────────────────────────────────────────────────────────────


def extract_code(text: str) -> str:
    """
    Return the interior of the first front-end (or untagged) fenced block.

    Falls back to the first fenced block with any other tag, and finally to
    the trimmed text itself when the model left the fences off. Whether the
    result is valid source is the renderer's problem.
    """
    text = text or ""
    other: str | None = None
    for tag, body in _fences(text):
        if not tag or tag in CODE_TAGS:
            return body.strip()
        if other is None:
            other = body
    if other is not None:
        return other.strip()
    return text.strip()


# ─────────────────────────────────────────────────────────────────────────────
# Plan inventory
# ─────────────────────────────────────────────────────────────────────────────


def component_names(plan: Any) -> list[str]:
    """
    Distinct node ``type`` names in a layout plan, in discovery order.

    Walks layout / children / components and skips anything that is not the
    expected shape, so a plan with renamed or missing fields just yields
    fewer names.
    """
    seen: dict[str, None] = {}

    def walk(node: Any) -> None:
        if isinstance(node, list):
            for item in node:
                walk(item)
            return
        if not isinstance(node, dict):
            return
        node_type = node.get("type")
        if isinstance(node_type, str) and node_type:
            seen.setdefault(node_type, None)
        for key in ("children", "components"):
            if isinstance(node.get(key), list):
                walk(node[key])
        if node.get("layout"):
            walk(node["layout"])

    walk(plan)
    return list(seen)


def describe_components(plan: Any) -> str:
    return ", ".join(component_names(plan)) or "various components"
