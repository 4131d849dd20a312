"""
uibuilder — turn a plain-language UI description into a React component.

Three LLM calls on one conversation (plan, generate, explain), a separate
modify pipeline, and a capped version history.
"""

__version__ = "0.1.0"
