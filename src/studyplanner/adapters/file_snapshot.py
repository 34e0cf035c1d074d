"""File-based snapshot storage adapter."""

import os
import tempfile
from pathlib import Path

from studyplanner.ports.snapshot_store import SnapshotError


class FileSnapshotStore:
    """
    File-based snapshot storage.

    Implements SnapshotStore protocol. Each key gets a JSON file; writes go
    through a temp file and os.replace so a blob is never half-written.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_key(self, key: str) -> Path:
        """Get the file path for a given key."""
        return self.data_dir / f"{key}.json"

    def load(self, key: str) -> str | None:
        """Read the blob for a key. Returns None if not found."""
        path = self._path_for_key(key)
        if not path.exists():
            return None
        try:
            return path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotError(f"Failed to read {path}: {e}") from e

    def save(self, key: str, value: str) -> None:
        """Atomically replace the blob for a key."""
        path = self._path_for_key(key)
        try:
            fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w") as f:
                    f.write(value)
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise SnapshotError(f"Failed to write {path}: {e}") from e
