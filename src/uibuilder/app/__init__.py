"""
app/ — Interface-facing application state
"""

from uibuilder.app.state import BuilderState

__all__ = ["BuilderState"]
