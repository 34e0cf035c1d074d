"""Tests for configuration loading."""

import logging

from studyplanner.config import DATA_DIR, Config, load_config
from studyplanner.core.models import DEFAULT_SUBJECT_COLORS


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "planner.conf")
        assert config == Config()
        assert config.default_sort == "dueDate"
        assert config.subject_colors == DEFAULT_SUBJECT_COLORS

    def test_parses_values(self, tmp_path):
        conf = tmp_path / "planner.conf"
        conf.write_text(
            "\n".join(
                [
                    "# planner settings",
                    'DATA_DIR="~/planner data"  # quoted',
                    "TIMEZONE=Europe/Berlin # inline comment",
                    "DEFAULT_SORT=priority",
                    "SUBJECT_COLORS=bg-red-500, bg-amber-500,",
                    "not a setting",
                    "UNKNOWN_KEY=ignored",
                ]
            )
        )
        config = load_config(conf)
        assert config.data_dir == "~/planner data"
        assert config.timezone == "Europe/Berlin"
        assert config.default_sort == "priority"
        assert config.subject_colors == ["bg-red-500", "bg-amber-500"]

    def test_invalid_sort_keeps_default(self, tmp_path, caplog):
        conf = tmp_path / "planner.conf"
        conf.write_text("DEFAULT_SORT=alphabetical\n")
        with caplog.at_level(logging.WARNING):
            config = load_config(conf)
        assert config.default_sort == "dueDate"
        assert "alphabetical" in caplog.text


class TestDataPath:
    def test_falls_back_to_default(self):
        assert Config().data_path == DATA_DIR

    def test_expands_user(self, tmp_path):
        assert Config(data_dir=str(tmp_path)).data_path == tmp_path
        assert "~" not in str(Config(data_dir="~/planner").data_path)
