"""Shared fixtures: a deterministic clock and an in-memory store."""

from datetime import date

import pytest

from studyplanner.adapters.memory_snapshot import MemorySnapshotStore
from studyplanner.store import PlanningStore


class FixedClock:
    """Clock with a settable date, sequential ids and sequential instants."""

    def __init__(self, today: date, start: int = 1_700_000_000_000):
        self.current = today
        self.instant = start
        self.counter = 0

    def today(self) -> date:
        return self.current

    def now(self) -> int:
        self.instant += 1
        return self.instant

    def new_id(self) -> str:
        self.counter += 1
        return f"id{self.counter}"


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def clock(today):
    return FixedClock(today)


@pytest.fixture
def snapshots():
    return MemorySnapshotStore()


@pytest.fixture
def store(snapshots, clock):
    return PlanningStore(snapshots, clock)
