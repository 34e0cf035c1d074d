"""Adapters - I/O implementations of ports."""

from .file_snapshot import FileSnapshotStore
from .memory_snapshot import MemorySnapshotStore
from .system_clock import SystemClock

__all__ = [
    "FileSnapshotStore",
    "MemorySnapshotStore",
    "SystemClock",
]
