"""Ports - interfaces/protocols for external dependencies."""

from .clock import Clock
from .snapshot_store import SnapshotError, SnapshotStore

__all__ = [
    "Clock",
    "SnapshotError",
    "SnapshotStore",
]
