"""
tests/unit/test_history.py — Version History Tests

Covers:
  - retention cap evicts exactly the oldest entries, order preserved
  - ids strictly increase even within one clock tick
  - rollback / delete / clear semantics and the current pointer
  - JSON persistence round trip, corrupt and missing store files
"""

from __future__ import annotations

import itertools
import json

import pytest

from uibuilder.exceptions import HistoryError
from uibuilder.history import DEFAULT_MAX_VERSIONS, Version, VersionHistory


def _ticking_clock(start: int = 1_700_000_000_000, step: int = 1000):
    counter = itertools.count(start, step)
    return lambda: next(counter)


# ── Retention ─────────────────────────────────────────────────────────────────

class TestRetention:
    def test_default_cap_is_twenty(self):
        assert DEFAULT_MAX_VERSIONS == 20
        assert VersionHistory().max_versions == 20

    def test_twenty_first_version_evicts_oldest(self):
        history = VersionHistory(clock=_ticking_clock())
        added = [history.add(f"code {i}", None, f"prompt {i}") for i in range(21)]

        assert len(history) == 20
        assert history.versions[0] == added[1]
        assert [v.id for v in history.versions] == [v.id for v in added[1:]]
        assert history.get(added[0].id) is None

    def test_small_cap(self):
        history = VersionHistory(max_versions=2, clock=_ticking_clock())
        for i in range(5):
            history.add(f"code {i}", None, "")
        assert [v.code for v in history] == ["code 3", "code 4"]

    def test_invalid_cap(self):
        with pytest.raises(HistoryError):
            VersionHistory(max_versions=0)


# ── Identity ──────────────────────────────────────────────────────────────────

class TestIds:
    def test_ids_strictly_increase_within_one_tick(self):
        history = VersionHistory(clock=lambda: 1_700_000_000_000)
        ids = [history.add("c", None, "").id for _ in range(5)]
        assert ids == sorted(set(ids))
        assert ids[0] == 1_700_000_000_000

    def test_timestamp_is_the_clock_reading(self):
        history = VersionHistory(clock=lambda: 42)
        first = history.add("a", None, "")
        second = history.add("b", None, "")
        assert first.timestamp == second.timestamp == 42
        assert second.id > first.id

    def test_add_records_fields_and_sets_current(self):
        history = VersionHistory(clock=_ticking_clock())
        plan = {"components": [{"type": "Button"}]}
        version = history.add("code", plan, "A button")
        assert version.plan == plan
        assert version.prompt == "A button"
        assert history.current_id == version.id
        assert history.current() == version


# ── Navigation ────────────────────────────────────────────────────────────────

class TestNavigation:
    @pytest.fixture
    def history(self):
        h = VersionHistory(clock=_ticking_clock())
        for i in range(3):
            h.add(f"code {i}", None, f"prompt {i}")
        return h

    def test_rollback(self, history):
        target = history.versions[0]
        assert history.rollback(target.id) == target
        assert history.current() == target
        # Rolling back does not discard newer versions
        assert len(history) == 3

    def test_rollback_unknown(self, history):
        current = history.current_id
        assert history.rollback(12345) is None
        assert history.current_id == current

    def test_delete_current_falls_back_to_latest(self, history):
        first, second, third = history.versions
        history.rollback(second.id)
        assert history.delete(second.id) is True
        assert history.current_id == third.id
        assert [v.id for v in history] == [first.id, third.id]

    def test_delete_unknown(self, history):
        assert history.delete(1) is False
        assert len(history) == 3

    def test_delete_last_remaining(self):
        h = VersionHistory(clock=_ticking_clock())
        v = h.add("only", None, "")
        assert h.delete(v.id)
        assert h.current() is None

    def test_clear(self, history):
        history.clear()
        assert len(history) == 0
        assert history.current() is None


# ── Persistence ───────────────────────────────────────────────────────────────

class TestPersistence:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "data" / "versions.json"
        history = VersionHistory(store_path=path, clock=_ticking_clock())
        history.add("code 1", {"components": []}, "first")
        history.add("code 2", None, "Modify: darker")

        reloaded = VersionHistory(store_path=path)

        assert reloaded.versions == history.versions
        assert reloaded.current_id == history.versions[-1].id

    def test_file_format(self, tmp_path):
        path = tmp_path / "versions.json"
        VersionHistory(store_path=path, clock=lambda: 1000).add("x", None, "p")
        data = json.loads(path.read_text())
        assert data == [{"id": 1000, "timestamp": 1000, "code": "x", "plan": None, "prompt": "p"}]

    def test_ids_continue_after_reload(self, tmp_path):
        path = tmp_path / "versions.json"
        VersionHistory(store_path=path, clock=lambda: 5000).add("a", None, "")
        reloaded = VersionHistory(store_path=path, clock=lambda: 10)
        assert reloaded.add("b", None, "").id == 5001

    def test_reload_trims_to_cap(self, tmp_path):
        path = tmp_path / "versions.json"
        h = VersionHistory(store_path=path, max_versions=5, clock=_ticking_clock())
        for i in range(5):
            h.add(str(i), None, "")
        reloaded = VersionHistory(store_path=path, max_versions=2)
        assert [v.code for v in reloaded] == ["3", "4"]

    def test_corrupt_file_loads_empty(self, tmp_path):
        path = tmp_path / "versions.json"
        path.write_text("{not json")
        history = VersionHistory(store_path=path)
        assert len(history) == 0
        assert history.current() is None

    def test_wrong_shape_loads_empty(self, tmp_path):
        path = tmp_path / "versions.json"
        path.write_text(json.dumps([{"id": "abc"}]))
        assert len(VersionHistory(store_path=path)) == 0

    def test_missing_file_loads_empty(self, tmp_path):
        assert len(VersionHistory(store_path=tmp_path / "nope.json")) == 0

    def test_clear_removes_file(self, tmp_path):
        path = tmp_path / "versions.json"
        history = VersionHistory(store_path=path)
        history.add("x", None, "")
        assert path.exists()
        history.clear()
        assert not path.exists()

    def test_version_model(self):
        v = Version(id=1, timestamp=1, code="c")
        assert v.plan is None
        assert v.prompt == ""
