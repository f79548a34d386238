"""
Exceptions raised by the process-level system helpers.
"""

from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .termination import TerminationReport


class ProcessNotFound(Exception):
    """
    The process has exited (or never existed).

    This is an expected condition while observing a live process tree: callers
    skip the identifier for the current tick or treat it as already stopped.
    """

    def __init__(self, pid: int, reason: str = "no such process"):
        super().__init__(f"PID {pid}: {reason}")
        self.pid = pid


class DiscoveryError(Exception):
    """
    Enumerating the children of a tree member failed for a reason other than exit.

    `partial` holds the identifiers found before the failure, in discovery order.
    """

    def __init__(
        self,
        pid: int,
        cause: Optional[BaseException] = None,
        partial: Iterable[int] = (),
    ):
        detail = f"{type(cause).__name__}: {cause}" if cause else "unknown error"
        super().__init__(f"Failed to list children of PID {pid}: {detail}")
        self.pid = pid
        self.cause = cause
        self.partial = list(partial)


class LaunchError(Exception):
    """The workload could not be started."""

    def __init__(self, executable: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to launch workload '{executable}'{detail}")
        self.executable = executable
        self.cause = cause


class TerminationError(Exception):
    """Some members of a process tree could not be signaled."""

    def __init__(self, report: "TerminationReport"):
        failures = ", ".join(f"PID {f.pid} ({f.reason})" for f in report.failures)
        super().__init__(
            f"Failed to terminate {len(report.failures)} process(es) of tree rooted "
            f"at PID {report.root_pid}: {failures}"
        )
        self.report = report
