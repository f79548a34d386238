"""
Shared data structures for the orchestration module.

This module defines the repetition state machine, the runtime state of the
repetition in progress, and the exit status of an interrupted run.
"""

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..system.processes import HandleCache


class SessionState(Enum):
    """States a repetition moves through."""
    SPAWNING = "spawning"
    SAMPLING = "sampling"
    STOPPING = "stopping"
    REPORTING = "reporting"
    ABORTED = "aborted"


# Allowed transitions. ABORTED is reachable from every non-terminal state.
_TRANSITIONS: Dict[Optional[SessionState], FrozenSet[SessionState]] = {
    None: frozenset({SessionState.SPAWNING}),
    SessionState.SPAWNING: frozenset({SessionState.SAMPLING, SessionState.ABORTED}),
    SessionState.SAMPLING: frozenset({SessionState.STOPPING, SessionState.ABORTED}),
    SessionState.STOPPING: frozenset({SessionState.REPORTING, SessionState.ABORTED}),
    SessionState.REPORTING: frozenset(),
    SessionState.ABORTED: frozenset(),
}


@dataclass
class RepetitionState:
    """
    Runtime state of the repetition in progress.

    The handle cache lives here so that it is created fresh for every
    repetition and discarded with it.
    """
    repetition: int
    state: Optional[SessionState] = None
    process: Optional[subprocess.Popen] = None
    cache: HandleCache = field(default_factory=HandleCache)

    @property
    def root_pid(self) -> Optional[int]:
        return self.process.pid if self.process is not None else None

    def transition(self, new_state: SessionState) -> None:
        """
        Move to `new_state`.

        Raises:
            RuntimeError: If the transition is not allowed from the current state.
        """
        if new_state not in _TRANSITIONS[self.state]:
            current = self.state.value if self.state is not None else "initial"
            raise RuntimeError(
                f"Invalid repetition state transition: {current} -> {new_state.value}"
            )
        self.state = new_state


# Exit status of an invocation stopped by SIGINT or SIGTERM.
INTERRUPTED_EXIT_CODE = 1
