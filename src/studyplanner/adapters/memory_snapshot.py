"""In-memory snapshot storage adapter."""


class MemorySnapshotStore:
    """
    Dict-backed snapshot storage.

    Implements SnapshotStore protocol. Nothing survives the process; used for
    tests and throwaway sessions.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self.blobs: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self.blobs.get(key)

    def save(self, key: str, value: str) -> None:
        self.blobs[key] = value
