"""
System interaction for process-tree monitoring.

This package wraps everything that touches the operating system:

- Resolving process identifiers to psutil handles and caching them
- Breadth-first discovery of a workload's descendant processes
- Best-effort, idempotent termination of a whole process tree
- Launching and reaping the workload process
- Reading the system load average
"""

from .discovery import discover_tree
from .errors import DiscoveryError, LaunchError, ProcessNotFound, TerminationError
from .launcher import build_workload_command, launch_workload, reap_workload
from .load import read_load_average
from .processes import HandleCache, resolve_process
from .termination import (
    ProcessTreeTerminator,
    TerminationFailure,
    TerminationReport,
    resolve_signal,
)

__all__ = [
    # Resolution
    "HandleCache",
    "resolve_process",
    # Discovery
    "discover_tree",
    # Termination
    "ProcessTreeTerminator",
    "TerminationFailure",
    "TerminationReport",
    "resolve_signal",
    # Launch
    "build_workload_command",
    "launch_workload",
    "reap_workload",
    # Load
    "read_load_average",
    # Errors
    "DiscoveryError",
    "LaunchError",
    "ProcessNotFound",
    "TerminationError",
]
