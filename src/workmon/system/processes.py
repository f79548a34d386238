"""
Process handle resolution and caching.

`resolve_process` turns a process identifier into a queryable psutil handle,
failing with ProcessNotFound when the process is gone. `HandleCache` keeps
handles between ticks so that psutil's per-handle CPU baseline survives from
one read to the next, and re-resolves a handle whose identifier has been
recycled by the OS for an unrelated process.
"""

import logging
from typing import Dict, Iterator, List, Optional

import psutil

from .errors import ProcessNotFound

logger = logging.getLogger(__name__)


def _is_process_alive(process: psutil.Process) -> bool:
    """Check that a handle still refers to a live, non-zombie process."""
    try:
        # is_running() also compares creation times, so a recycled PID reads as not running.
        if not process.is_running():
            return False
        return process.status() not in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD)
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        # Cannot read the status, but the process exists.
        return True


def resolve_process(pid: int) -> psutil.Process:
    """
    Produce a queryable handle for a process identifier.

    Zombies count as exited: they have no resources left to sample and cannot
    be signaled meaningfully.

    Args:
        pid: Process identifier to resolve.

    Returns:
        A psutil.Process handle.

    Raises:
        ProcessNotFound: If the process has exited or never existed.
    """
    if pid <= 0:
        raise ProcessNotFound(pid, "invalid PID")
    try:
        process = psutil.Process(pid)
    except psutil.NoSuchProcess as e:
        raise ProcessNotFound(pid) from e
    if not _is_process_alive(process):
        raise ProcessNotFound(pid, "process has exited")
    return process


class HandleCache:
    """
    Identifier -> handle mapping owned by one repetition.

    A lookup miss resolves the identifier; a hit is only trusted while the
    handle still refers to the same live process. Stale entries are evicted
    rather than reported as errors.
    """

    def __init__(self, resolver=resolve_process):
        self._resolver = resolver
        self._handles: Dict[int, psutil.Process] = {}

    def get(self, pid: int) -> psutil.Process:
        """
        Return a live handle for `pid`, resolving it when not cached or stale.

        Raises:
            ProcessNotFound: If the process no longer exists.
        """
        handle = self._handles.get(pid)
        if handle is not None:
            if _is_process_alive(handle):
                return handle
            logger.debug(f"Evicting stale handle for PID {pid}")
            del self._handles[pid]

        handle = self._resolver(pid)
        self._handles[pid] = handle
        return handle

    def remember(self, handle: psutil.Process) -> None:
        """Cache a handle obtained elsewhere (e.g. from a children() listing) unless one is already held."""
        self._handles.setdefault(handle.pid, handle)

    def invalidate(self, pid: int) -> None:
        self._handles.pop(pid, None)

    def peek(self, pid: int) -> Optional[psutil.Process]:
        """Return the cached handle without validating or resolving it."""
        return self._handles.get(pid)

    def handles(self) -> List[psutil.Process]:
        return list(self._handles.values())

    def clear(self) -> None:
        self._handles.clear()

    def __contains__(self, pid: object) -> bool:
        return pid in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._handles))
