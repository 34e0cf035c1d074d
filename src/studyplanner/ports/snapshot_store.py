"""Snapshot storage interface."""

from typing import Protocol


class SnapshotError(Exception):
    """Raised when a snapshot cannot be read or written."""

    pass


class SnapshotStore(Protocol):
    """Interface for reading and writing named string blobs."""

    def load(self, key: str) -> str | None:
        """Read the blob stored under key. Returns None if absent."""
        ...

    def save(self, key: str, value: str) -> None:
        """Write/overwrite the blob stored under key. Raises SnapshotError."""
        ...
