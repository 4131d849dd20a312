"""
history/versions.py — Version History

Every generated or modified component is recorded as a Version so the user
can roll back. The list is capped (oldest dropped first) and, when a store
path is given, mirrored to a JSON file after every change.

Persistence is best-effort: a missing or corrupt file loads as an empty
history and a failed write is logged, never raised.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from uibuilder.exceptions import HistoryError
from uibuilder.observability.logger import get_logger

log = get_logger(__name__)

DEFAULT_MAX_VERSIONS = 20


class Version(BaseModel):
    id: int
    timestamp: int          # epoch milliseconds
    code: str
    plan: Optional[Any] = None
    prompt: str = ""


_VERSION_LIST = TypeAdapter(list[Version])


def _now_ms() -> int:
    return int(time.time() * 1000)


class VersionHistory:
    """Insertion-ordered, capped list of component versions."""

    def __init__(
        self,
        store_path: str | Path | None = None,
        max_versions: int = DEFAULT_MAX_VERSIONS,
        clock: Callable[[], int] = _now_ms,
    ):
        if max_versions < 1:
            raise HistoryError(f"max_versions must be >= 1, got {max_versions}")
        self._path = Path(store_path).expanduser() if store_path else None
        self._max = max_versions
        self._clock = clock

        self._versions: list[Version] = self._load()[-max_versions:]
        self._last_id = max((v.id for v in self._versions), default=0)
        self.current_id: Optional[int] = self._versions[-1].id if self._versions else None

    # ── Queries ───────────────────────────────────────────────────────────────

    @property
    def versions(self) -> tuple[Version, ...]:
        return tuple(self._versions)

    @property
    def max_versions(self) -> int:
        return self._max

    def get(self, version_id: int) -> Optional[Version]:
        return next((v for v in self._versions if v.id == version_id), None)

    def current(self) -> Optional[Version]:
        if self.current_id is None:
            return None
        return self.get(self.current_id)

    def __len__(self) -> int:
        return len(self._versions)

    def __iter__(self) -> Iterator[Version]:
        return iter(tuple(self._versions))

    # ── Mutations ─────────────────────────────────────────────────────────────

    def add(self, code: str, plan: Any, prompt: str) -> Version:
        """Record a new version and make it current, evicting the oldest past the cap."""
        now = self._clock()
        # Ids must keep increasing even if two versions land in the same millisecond
        version_id = max(now, self._last_id + 1)
        version = Version(id=version_id, timestamp=now, code=code, plan=plan, prompt=prompt)

        self._versions.append(version)
        self._last_id = version_id
        evicted = len(self._versions) - self._max
        if evicted > 0:
            del self._versions[:evicted]
        self.current_id = version_id

        log.info("history.version_added", version_id=version_id,
                 evicted=max(evicted, 0), total=len(self._versions))
        self._save()
        return version

    def rollback(self, version_id: int) -> Optional[Version]:
        """Make version_id current and return it, or None if it is not in the history."""
        version = self.get(version_id)
        if version is None:
            log.warning("history.rollback_unknown", version_id=version_id)
            return None
        self.current_id = version_id
        log.info("history.rolled_back", version_id=version_id)
        return version

    def delete(self, version_id: int) -> bool:
        before = len(self._versions)
        self._versions = [v for v in self._versions if v.id != version_id]
        if len(self._versions) == before:
            return False
        if self.current_id == version_id:
            self.current_id = self._versions[-1].id if self._versions else None
        log.info("history.version_deleted", version_id=version_id)
        self._save()
        return True

    def clear(self) -> None:
        self._versions = []
        self.current_id = None
        log.info("history.cleared")
        if self._path is not None:
            try:
                self._path.unlink(missing_ok=True)
            except OSError as e:
                log.error("history.clear_failed", path=str(self._path), error=str(e))

    # ── Persistence ───────────────────────────────────────────────────────────

    def _load(self) -> list[Version]:
        if self._path is None or not self._path.exists():
            return []
        try:
            return _VERSION_LIST.validate_json(self._path.read_bytes())
        except (OSError, ValidationError) as e:
            log.warning("history.load_failed", path=str(self._path), error=str(e))
            return []

    def _save(self) -> None:
        if self._path is None:
            return
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(_VERSION_LIST.dump_json(self._versions, indent=2))
            os.replace(tmp, self._path)
        except OSError as e:
            log.error("history.save_failed", path=str(self._path), error=str(e))

    def __repr__(self) -> str:
        return f"<VersionHistory versions={len(self._versions)}/{self._max} current={self.current_id}>"
