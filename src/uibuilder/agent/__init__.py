"""
agent/ — UIBuilder Agent Core

Public API:
    from uibuilder.agent import Orchestrator, ProgressEvent, Stage

Component overview:
    Orchestrator        plan → generate → explain pipeline, modify stage, progress stream
    Transcript          Ordered turns for one conversation track
    extractors          Recover JSON plans / source code from model output
    prompts             Stage prompt templates and the component convention
"""

from uibuilder.agent.extractors import (
    component_names,
    describe_components,
    extract_code,
    extract_structured,
    is_parse_failure,
)
from uibuilder.agent.orchestrator import Orchestrator
from uibuilder.agent.transcript import Transcript
from uibuilder.agent.types import CodeOutput, GenerationResult, PlanOutput, ProgressEvent, Stage

__all__ = [
    "Orchestrator",
    "Transcript",
    "ProgressEvent",
    "GenerationResult",
    "PlanOutput",
    "CodeOutput",
    "Stage",
    "extract_structured",
    "extract_code",
    "is_parse_failure",
    "component_names",
    "describe_components",
]
