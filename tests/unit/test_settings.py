"""
Unit tests for settings loading and timestamp formatting.
"""

from datetime import datetime

import pytest

from leveler.utils.settings import load_settings
from leveler.utils.timestamp import format_timestamp


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings(config_path=None)

        assert settings.save.auto_save_interval_ms == 30000
        assert settings.retry.max_retries == 3
        assert settings.retry.base_delay_ms == 1000
        assert settings.retry.max_delay_ms == 30000

    def test_yaml_file_layer(self, tmp_path):
        config_file = tmp_path / "leveler.yaml"
        config_file.write_text("save:\n  auto_save_interval_ms: 5000\n")

        settings = load_settings(config_path=config_file)

        assert settings.save.auto_save_interval_ms == 5000
        assert settings.retry.max_retries == 3

    def test_overrides_applied_last(self, tmp_path):
        config_file = tmp_path / "leveler.yaml"
        config_file.write_text("retry:\n  max_retries: 7\n")

        settings = load_settings(config_path=config_file, overrides={"retry": {"max_retries": 1}})

        assert settings.retry.max_retries == 1

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(config_path=tmp_path / "missing.yaml")


class TestFormatTimestamp:
    REFERENCE = datetime(2025, 11, 13, 18, 45, 40)

    def test_absolute(self):
        assert format_timestamp("2025-11-13T18:45:40.572549") == "2025-11-13 18:45:40"

    @pytest.mark.parametrize(
        "iso, expected",
        [
            ("2025-11-13T18:45:10", "30s ago"),
            ("2025-11-13T18:30:40", "15m ago"),
            ("2025-11-13T16:45:40", "2h ago"),
            ("2025-11-08T18:45:40", "5d ago"),
            ("2025-11-13T18:47:40", "2m from now"),
        ],
    )
    def test_relative(self, iso, expected):
        assert format_timestamp(iso, relative=True, reference=self.REFERENCE) == expected

    def test_unparseable_returned_unchanged(self):
        assert format_timestamp("yesterday-ish") == "yesterday-ish"
