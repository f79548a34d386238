"""
Signal handling for the orchestration module.

While a session runs, SIGINT and SIGTERM stop the workload's whole process
tree and end the program. The handler runs on the main thread between
bytecodes of the sampling loop, so it may overlap with the loop's own
termination call; both go through the idempotent tree terminator and share
no state besides the watched root PID.
"""

import logging
import signal
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from ..system.termination import ProcessTreeTerminator
from .shared_state import INTERRUPTED_EXIT_CODE

logger = logging.getLogger(__name__)

_HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class InterruptGuard:
    """
    Installs SIGINT/SIGTERM handlers that terminate the watched tree and exit.

    The handler builds its own terminator through `terminator_factory`, which
    rediscovers the tree from the root instead of reading the session's
    handle cache.

    Args:
        terminator_factory: Returns the terminator used on interrupt.
        exit_code: Status passed to SystemExit after cleanup.
    """

    def __init__(
        self,
        terminator_factory: Callable[[], ProcessTreeTerminator] = ProcessTreeTerminator,
        exit_code: int = INTERRUPTED_EXIT_CODE,
    ):
        self._terminator_factory = terminator_factory
        self.exit_code = exit_code
        self._watched_pid: Optional[int] = None
        self._original_handlers = {}
        self._installed = False
        self._deferring = False
        self._pending: Optional[int] = None

    @property
    def watched_pid(self) -> Optional[int]:
        return self._watched_pid

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> None:
        """Set up the handlers, remembering the ones they replace."""
        if self._installed:
            return
        try:
            for signum in _HANDLED_SIGNALS:
                self._original_handlers[signum] = signal.signal(signum, self._handle_signal)
            self._installed = True
            logger.debug("Interrupt handlers installed")
        except ValueError as e:
            # signal.signal only works from the main thread.
            logger.warning(f"Failed to set up signal handlers: {e}")
            self._restore()

    def uninstall(self) -> None:
        """Restore the handlers that were active before install()."""
        if not self._installed:
            return
        self._restore()
        self._installed = False
        logger.debug("Interrupt handlers restored")

    def _restore(self) -> None:
        for signum, handler in self._original_handlers.items():
            if handler is not None:
                signal.signal(signum, handler)
        self._original_handlers.clear()

    def watch(self, root_pid: int) -> None:
        """Make `root_pid` the tree to stop on interrupt."""
        self._watched_pid = root_pid

    def release(self) -> None:
        """Stop watching; an interrupt now only exits."""
        self._watched_pid = None

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """
        Hold back interrupts until the block ends.

        Used around spawning: a signal that arrives after the workload exists
        but before its PID is watched is delivered on exit from the block,
        once watch() has run, so the new tree is still terminated.
        """
        self._deferring = True
        try:
            yield
        finally:
            self._deferring = False
            pending, self._pending = self._pending, None
            if pending is not None:
                self._handle_signal(pending, None)

    def __enter__(self) -> "InterruptGuard":
        self.install()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()
        self.uninstall()

    def _handle_signal(self, signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        if self._deferring:
            logger.debug(f"Signal {name} received while spawning, deferring")
            self._pending = signum
            return
        logger.warning(f"Signal {name} received, stopping workload")
        root_pid = self._watched_pid
        if root_pid is not None:
            self.cleanup(root_pid)
        raise SystemExit(self.exit_code)

    def cleanup(self, root_pid: int) -> None:
        """Terminate the tree rooted at `root_pid`, logging instead of raising."""
        try:
            report = self._terminator_factory().terminate_tree(root_pid)
        except Exception as e:
            logger.error(f"cleanup failed: {e}")
            return
        if not report.success:
            for failure in report.failures:
                logger.error(f"cleanup failed: PID {failure.pid}: {failure.reason}")
