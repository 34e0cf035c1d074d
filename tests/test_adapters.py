"""Tests for the snapshot and clock adapters."""

from datetime import date, datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from studyplanner.adapters.file_snapshot import FileSnapshotStore
from studyplanner.adapters.memory_snapshot import MemorySnapshotStore
from studyplanner.adapters.system_clock import SystemClock
from studyplanner.ports.snapshot_store import SnapshotError
from studyplanner.store import SUBJECTS_KEY, PlanningStore


class TestFileSnapshotStore:
    def test_creates_directory(self, tmp_path):
        data_dir = tmp_path / "nested" / "data"
        FileSnapshotStore(data_dir)
        assert data_dir.is_dir()

    def test_missing_key(self, tmp_path):
        assert FileSnapshotStore(tmp_path).load("focusSessions") is None

    def test_save_and_load(self, tmp_path):
        snapshots = FileSnapshotStore(tmp_path)
        snapshots.save("studentPlannerEvents", "[]")
        assert (tmp_path / "studentPlannerEvents.json").read_text() == "[]"
        assert snapshots.load("studentPlannerEvents") == "[]"

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        snapshots = FileSnapshotStore(tmp_path)
        snapshots.save("k", "one")
        snapshots.save("k", "two")
        assert snapshots.load("k") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_undecodable_file_raises_snapshot_error(self, tmp_path):
        (tmp_path / "studentPlannerData.json").write_bytes(b"\xff\xfe[garbage")
        with pytest.raises(SnapshotError, match="Failed to read"):
            FileSnapshotStore(tmp_path).load("studentPlannerData")

    def test_undecodable_file_falls_back_to_defaults(self, tmp_path):
        (tmp_path / f"{SUBJECTS_KEY}.json").write_bytes(b"\xff\xfe[garbage")

        class Clock:
            def today(self):
                return date(2025, 1, 15)

            def now(self):
                return 1

            def new_id(self):
                return "t1"

        store = PlanningStore(FileSnapshotStore(tmp_path), Clock())
        assert [s.name for s in store.subjects] == ["Subject 1", "Subject 2"]

    def test_write_failure_raises_snapshot_error(self, tmp_path):
        snapshots = FileSnapshotStore(tmp_path)
        with patch("studyplanner.adapters.file_snapshot.os.replace", side_effect=OSError("read-only")):
            with pytest.raises(SnapshotError, match="read-only"):
                snapshots.save("k", "value")
        assert not any(tmp_path.iterdir())

    def test_backs_a_planning_store(self, tmp_path):
        class Clock:
            def today(self):
                return date(2025, 1, 15)

            def now(self):
                return 1

            def new_id(self):
                return "t1"

        store = PlanningStore(FileSnapshotStore(tmp_path), Clock())
        store.add_task("1", "Homework")
        reloaded = PlanningStore(FileSnapshotStore(tmp_path), Clock())
        assert reloaded.get_task("1", "t1").title == "Homework"
        assert (tmp_path / f"{SUBJECTS_KEY}.json").exists()


class TestMemorySnapshotStore:
    def test_initial_blobs_are_copied(self):
        initial = {"k": "v"}
        snapshots = MemorySnapshotStore(initial)
        snapshots.save("k", "w")
        assert initial == {"k": "v"}
        assert snapshots.load("k") == "w"
        assert snapshots.load("missing") is None


class TestSystemClock:
    def test_now_strictly_increasing(self):
        clock = SystemClock()
        with patch("studyplanner.adapters.system_clock.time.time_ns", return_value=5_000_000_000):
            values = [clock.now() for _ in range(3)]
        assert values == [5000, 5001, 5002]

    def test_new_id_unique(self):
        clock = SystemClock()
        assert len({clock.new_id() for _ in range(100)}) == 100

    def test_today_uses_timezone(self):
        clock = SystemClock("Pacific/Auckland")
        assert clock.today() == datetime.now(ZoneInfo("Pacific/Auckland")).date()

    def test_today_local_by_default(self):
        assert SystemClock().today() == date.today()
