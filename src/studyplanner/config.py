"""Configuration management for the study planner."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from studyplanner.core.models import DEFAULT_SUBJECT_COLORS
from studyplanner.core.views import SORT_BY_DUE_DATE, SORT_OPTIONS

logger = logging.getLogger(__name__)

PLANNER_HOME = Path(os.environ.get("PLANNER_HOME", Path.home() / ".studyplanner"))
CONFIG_FILE = PLANNER_HOME / "config" / "planner.conf"
DATA_DIR = PLANNER_HOME / "data"


@dataclass
class Config:
    """Study planner configuration."""

    data_dir: str = ""
    # Empty means the machine's local timezone
    timezone: str = ""
    default_sort: str = SORT_BY_DUE_DATE
    subject_colors: list[str] = field(default_factory=lambda: list(DEFAULT_SUBJECT_COLORS))

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from planner.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "timezone":
                config.timezone = value
            case "default_sort":
                if value in SORT_OPTIONS:
                    config.default_sort = value
                else:
                    logger.warning(f"Unknown DEFAULT_SORT {value!r}, using {config.default_sort}")
            case "subject_colors":
                colors = [c.strip() for c in value.split(",") if c.strip()]
                if colors:
                    config.subject_colors = colors

    return config
