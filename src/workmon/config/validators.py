"""
Configuration validation utilities.

This module turns the raw `[monitor]` table of config.toml into a validated
MonitorConfig, section by section.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import MonitorConfig, StorageConfig
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_duration,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_TERMINATION_SIGNALS = ["SIGKILL", "SIGTERM", "SIGINT"]


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw monitor configuration from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    general_settings = monitor_data.get("general", {})
    collection_settings = monitor_data.get("collection", {})
    launch_settings = monitor_data.get("launch", {})
    termination_settings = monitor_data.get("termination", {})
    storage_settings = monitor_data.get("storage", {})

    # [monitor.general]
    log_level = validate_enum_choice(
        str(general_settings.get("log_level", "INFO")).upper(),
        valid_choices=VALID_LOG_LEVELS,
        field_name="monitor.general.log_level",
    )

    output_dir_value = general_settings.get("output_dir", "/tmp")
    if not isinstance(output_dir_value, str) or not output_dir_value.strip():
        raise ValidationError(
            "monitor.general.output_dir must be a non-empty string",
            field_name="monitor.general.output_dir",
            value=output_dir_value,
        )

    # [monitor.collection]
    # Sampling resolution is bounded below by one second.
    interval_seconds = validate_positive_float(
        collection_settings.get("interval_seconds", 1.0),
        min_value=1.0,
        max_value=60.0,
        field_name="monitor.collection.interval_seconds",
    )

    default_duration = collection_settings.get("default_duration", "10s")
    validate_duration(default_duration, field_name="monitor.collection.default_duration")

    default_repetitions = validate_positive_integer(
        collection_settings.get("default_repetitions", 1),
        min_value=1,
        max_value=10000,
        field_name="monitor.collection.default_repetitions",
    )

    reap_timeout = validate_positive_float(
        collection_settings.get("reap_timeout", 5.0),
        min_value=0.1,
        max_value=300.0,
        field_name="monitor.collection.reap_timeout",
    )

    # [monitor.launch]
    require_root = validate_boolean(
        launch_settings.get("require_root", False),
        field_name="monitor.launch.require_root",
    )
    show_output = validate_boolean(
        launch_settings.get("show_output", False),
        field_name="monitor.launch.show_output",
    )

    # [monitor.termination]
    termination_signal = validate_enum_choice(
        termination_settings.get("signal", "SIGKILL"),
        valid_choices=VALID_TERMINATION_SIGNALS,
        field_name="monitor.termination.signal",
    )

    # [monitor.storage]
    try:
        storage = StorageConfig.from_dict(storage_settings)
    except ValueError as e:
        raise ValidationError(
            f"monitor.storage: {e}",
            field_name="monitor.storage.format",
            value=storage_settings.get("format"),
        ) from e

    return MonitorConfig(
        log_level=log_level,
        output_dir=Path(output_dir_value),
        interval_seconds=interval_seconds,
        default_duration=default_duration,
        default_repetitions=default_repetitions,
        reap_timeout=reap_timeout,
        require_root=require_root,
        show_output=show_output,
        termination_signal=termination_signal,
        storage=storage,
    )
