"""Wiring between configuration, adapters and the planning store."""

import logging
from zoneinfo import ZoneInfoNotFoundError

from .adapters.file_snapshot import FileSnapshotStore
from .adapters.system_clock import SystemClock
from .config import Config, load_config
from .store import PlanningStore

logger = logging.getLogger(__name__)


def get_snapshots(config: Config) -> FileSnapshotStore:
    """Resolve the snapshot directory from config."""
    return FileSnapshotStore(config.data_path)


def get_clock(config: Config) -> SystemClock:
    """Clock in the configured timezone, falling back to local time."""
    try:
        return SystemClock(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {config.timezone!r}, using local time")
        return SystemClock()


def open_store(config: Config | None = None) -> PlanningStore:
    """Build a PlanningStore backed by the configured data directory."""
    config = config or load_config()
    return PlanningStore(
        get_snapshots(config),
        get_clock(config),
        subject_colors=config.subject_colors,
    )
