"""
Configuration data models.

This module contains the configuration structures for the monitor: the
global settings loaded from `config.toml` and the per-invocation session
settings assembled by the command line from those defaults and its flags.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal


@dataclass
class StorageConfig:
    """
    Configuration for persisted result tables.

    Attributes:
        format: Table format of the result sink.
            - 'csv': Plain comma-separated text (default)
            - 'parquet': Columnar format, smaller and typed
    """

    format: Literal["csv", "parquet"] = "csv"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StorageConfig":
        """
        Create a StorageConfig instance from a dictionary.

        Raises:
            ValueError: If an unsupported format is given
        """
        format_type = config_dict.get("format", "csv")
        if format_type not in ("csv", "parquet"):
            raise ValueError(f"Unsupported storage format: {format_type}")
        return cls(format=format_type)

    @property
    def extension(self) -> str:
        return self.format


@dataclass
class MonitorConfig:
    """
    Global monitor configuration, loaded from `config.toml`.
    """

    # [monitor.general]
    log_level: str = "INFO"
    output_dir: Path = Path("/tmp")

    # [monitor.collection]
    interval_seconds: float = 1.0
    default_duration: str = "10s"
    default_repetitions: int = 1
    reap_timeout: float = 5.0

    # [monitor.launch]
    require_root: bool = False
    show_output: bool = False

    # [monitor.termination]
    termination_signal: str = "SIGKILL"

    # [monitor.storage]
    storage: StorageConfig = field(default_factory=StorageConfig)


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    monitor: MonitorConfig


@dataclass
class SessionConfig:
    """
    Everything one invocation needs to run its repetitions.
    """

    # Executable of the workload and its arguments.
    executable: str
    arguments: List[str]
    # Length of the observation window in seconds.
    duration_seconds: float
    repetitions: int = 1
    interval_seconds: float = 1.0
    verbose: bool = False
    show_output: bool = False
    to_file: bool = False
    output_dir: Path = Path("/tmp")
    termination_signal: str = "SIGKILL"
    reap_timeout: float = 5.0
    storage: StorageConfig = field(default_factory=StorageConfig)

    @property
    def workload_label(self) -> str:
        """Base name of the workload executable, used to name result files."""
        return Path(self.executable).name or self.executable
