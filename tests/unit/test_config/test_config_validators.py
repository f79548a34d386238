"""
Unit tests for configuration validation.
"""

from pathlib import Path

import pytest

from workmon.config.validators import validate_monitor_config
from workmon.validation import ValidationError


@pytest.mark.unit
class TestMonitorConfigValidation:
    """Test cases for validate_monitor_config."""

    def test_full_config(self, sample_config_data):
        config = validate_monitor_config(sample_config_data)

        assert config.log_level == "DEBUG"
        assert config.output_dir == Path("/tmp")
        assert config.interval_seconds == 2.0
        assert config.default_duration == "3s"
        assert config.default_repetitions == 2
        assert config.reap_timeout == 1.5
        assert config.show_output is True
        assert config.termination_signal == "SIGTERM"
        assert config.storage.format == "parquet"
        assert config.storage.extension == "parquet"

    def test_empty_config_uses_defaults(self):
        config = validate_monitor_config({})

        assert config.log_level == "INFO"
        assert config.interval_seconds == 1.0
        assert config.default_duration == "10s"
        assert config.default_repetitions == 1
        assert config.require_root is False
        assert config.termination_signal == "SIGKILL"
        assert config.storage.format == "csv"

    def test_log_level_is_case_insensitive(self):
        config = validate_monitor_config({"general": {"log_level": "warning"}})
        assert config.log_level == "WARNING"

    @pytest.mark.parametrize(
        "section,key,value,field",
        [
            ("general", "log_level", "LOUD", "monitor.general.log_level"),
            ("general", "output_dir", "", "monitor.general.output_dir"),
            ("collection", "interval_seconds", 0.5, "monitor.collection.interval_seconds"),
            ("collection", "interval_seconds", 120, "monitor.collection.interval_seconds"),
            ("collection", "default_duration", "forever", "monitor.collection.default_duration"),
            ("collection", "default_repetitions", 0, "monitor.collection.default_repetitions"),
            ("collection", "reap_timeout", -1, "monitor.collection.reap_timeout"),
            ("launch", "require_root", "yes", "monitor.launch.require_root"),
            ("launch", "show_output", 1, "monitor.launch.show_output"),
            ("termination", "signal", "SIGHUP", "monitor.termination.signal"),
            ("storage", "format", "xlsx", "monitor.storage.format"),
        ],
    )
    def test_invalid_values_name_the_key(self, section, key, value, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_monitor_config({section: {key: value}})
        assert exc_info.value.field_name == field
