"""
Process tree termination.

The terminator re-discovers the tree from its root at the moment it is
called, so children spawned after the last sampling tick are stopped too,
then signals every member. Members that have already exited count as
stopped. Any other failure is collected and reported once every member has
been attempted.
"""

import logging
import signal
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Union

import psutil

from .discovery import discover_tree
from .errors import DiscoveryError, ProcessNotFound, TerminationError
from .processes import resolve_process

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TerminationFailure:
    """A member that could not be signaled, and why."""

    pid: int
    reason: str


@dataclass
class TerminationReport:
    """
    Outcome of one terminate_tree() call.

    Attributes:
        root_pid: Root of the terminated tree.
        signaled: Members the signal was delivered to.
        already_exited: Members that were gone before they could be signaled.
        failures: Members that could not be signaled for any other reason.
    """

    root_pid: int
    signaled: List[int] = field(default_factory=list)
    already_exited: List[int] = field(default_factory=list)
    failures: List[TerminationFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise TerminationError when any member could not be signaled."""
        if self.failures:
            raise TerminationError(self)


def resolve_signal(sig: Union[int, str, signal.Signals]) -> signal.Signals:
    """
    Turn a signal name ("SIGKILL", "KILL") or number into a signal.Signals member.

    Raises:
        ValueError: If the signal is unknown on this platform.
    """
    if isinstance(sig, signal.Signals):
        return sig
    if isinstance(sig, int):
        return signal.Signals(sig)
    name = sig.upper()
    if not name.startswith("SIG"):
        name = f"SIG{name}"
    try:
        return signal.Signals[name]
    except KeyError:
        raise ValueError(f"Unknown signal: {sig}") from None


class ProcessTreeTerminator:
    """
    Best-effort, idempotent termination of a workload's process tree.

    Calling terminate_tree() on a tree that is already gone, or from two
    paths at once, is safe: members that vanished are recorded as already
    exited instead of failing.
    """

    def __init__(
        self,
        sig: Union[int, str, signal.Signals] = signal.SIGKILL,
        resolver: Callable[[int], psutil.Process] = resolve_process,
    ):
        self.signal = resolve_signal(sig)
        self._resolver = resolver

    def terminate_tree(
        self,
        root_pid: int,
        known_handles: Optional[Iterable[psutil.Process]] = None,
    ) -> TerminationReport:
        """
        Signal every member of the tree rooted at `root_pid`.

        Args:
            root_pid: Root of the tree.
            known_handles: Handles the caller already holds for tree members.
                They are signaled as well, which catches descendants that were
                re-parented after an intermediate process exited. psutil
                refuses to signal a handle whose PID has been reused.

        Returns:
            A TerminationReport; check `.success` or call `.raise_for_failures()`.
        """
        report = TerminationReport(root_pid=root_pid)

        try:
            members = list(discover_tree(root_pid, resolver=self._resolver))
        except DiscoveryError as e:
            # Still stop every member found before the failure.
            logger.warning(f"Could not walk the full tree of PID {root_pid}: {e}")
            report.failures.append(TerminationFailure(e.pid, str(e)))
            members = e.partial or [root_pid]
        if not members:
            # Root already gone; still record it so the report names it.
            members = [root_pid]

        handles = {}
        for handle in known_handles or ():
            if handle.pid not in members:
                handles[handle.pid] = handle
        # Deepest members first, root last, so the root cannot respawn a child we already stopped.
        order = list(handles) + list(reversed(members))

        logger.debug(
            f"Sending {self.signal.name} to {len(order)} process(es) of tree rooted at PID {root_pid}"
        )
        for pid in order:
            self._signal_member(pid, handles.get(pid), report)

        if report.failures:
            logger.warning(
                f"Termination of PID {root_pid} incomplete: {len(report.failures)} failure(s)"
            )
        else:
            logger.debug(
                f"Terminated tree of PID {root_pid}: {len(report.signaled)} signaled, "
                f"{len(report.already_exited)} already exited"
            )
        return report

    def _signal_member(
        self, pid: int, handle: Optional[psutil.Process], report: TerminationReport
    ) -> None:
        try:
            process = handle if handle is not None else self._resolver(pid)
            process.send_signal(self.signal)
            report.signaled.append(pid)
        except (ProcessNotFound, psutil.NoSuchProcess, ProcessLookupError):
            report.already_exited.append(pid)
        except (psutil.Error, OSError) as e:
            logger.warning(f"Failed to send {self.signal.name} to PID {pid}: {e}")
            report.failures.append(TerminationFailure(pid, f"{type(e).__name__}: {e}"))
