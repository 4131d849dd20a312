"""
history/ — Component version history
"""

from uibuilder.history.versions import DEFAULT_MAX_VERSIONS, Version, VersionHistory

__all__ = ["Version", "VersionHistory", "DEFAULT_MAX_VERSIONS"]
