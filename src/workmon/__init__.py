"""
workmon: Workload process-tree resource monitor.

This package launches a workload, follows its whole descendant process tree,
samples CPU and memory of every member once per tick, summarizes the samples
per process and stops the tree cleanly at the end of the observation window.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- system: Process resolution, tree discovery, termination and launching
- collectors: Per-tick sampling of the process tree
- aggregation: Per-process summary statistics
- orchestration: Repetition state machine and interrupt handling
- storage: Result table persistence
- cli: Command-line interface

Usage:
    From command line:
        workmon -d 30s -v ./my-workload --flag

    Programmatically:
        from workmon import SessionController, SessionConfig
        controller = SessionController(SessionConfig("/bin/sleep", ["60"], 5.0))
        results = controller.run()
"""

# Main interfaces
from .config import clear_config_cache, get_config, set_config_path
from .orchestration import SessionController
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    LoadAverage,
    MonitorConfig,
    ProcessHistory,
    ProcessSample,
    ProcessSummary,
    SessionConfig,
    SessionResult,
    StorageConfig,
    TrackedSet,
)

# Core operations
from .aggregation import summarize, summarize_all
from .reporting import ConsoleReporter, format_size
from .system import (
    HandleCache,
    ProcessNotFound,
    ProcessTreeTerminator,
    discover_tree,
    resolve_process,
)

# Validation utilities
from .validation import ValidationError, validate_duration

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "SessionController",
    "main_cli",
    # Models
    "AppConfig",
    "LoadAverage",
    "MonitorConfig",
    "ProcessHistory",
    "ProcessSample",
    "ProcessSummary",
    "SessionConfig",
    "SessionResult",
    "StorageConfig",
    "TrackedSet",
    # Core operations
    "summarize",
    "summarize_all",
    "ConsoleReporter",
    "format_size",
    "HandleCache",
    "ProcessNotFound",
    "ProcessTreeTerminator",
    "discover_tree",
    "resolve_process",
    # Validation
    "ValidationError",
    "validate_duration",
]
