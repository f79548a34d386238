"""
Data models for the workload monitor.

Configuration Models:
- Global monitor settings and storage options
- Per-invocation session settings

Process Models:
- Immutable per-tick process samples
- Per-identifier sample histories
- The ordered, grow-only set of tracked identifiers

Result Models:
- Per-process summaries, load snapshots and per-repetition results
"""

# Configuration models
from .config import AppConfig, MonitorConfig, SessionConfig, StorageConfig

# Process models
from .process import ProcessHistory, ProcessSample, TrackedSet, record_samples

# Result models
from .results import LoadAverage, ProcessSummary, SessionResult

__all__ = [
    # Configuration
    "AppConfig",
    "MonitorConfig",
    "SessionConfig",
    "StorageConfig",
    # Process
    "ProcessHistory",
    "ProcessSample",
    "TrackedSet",
    "record_samples",
    # Results
    "LoadAverage",
    "ProcessSummary",
    "SessionResult",
]
