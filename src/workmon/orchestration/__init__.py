"""
Orchestration of monitoring sessions.

This module contains the components that drive a monitoring invocation:

- SessionController: Runs the repetitions and their state machine
- InterruptGuard: SIGINT/SIGTERM handling that stops the workload tree
- Shared state: Repetition state machine and timeout constants
"""

from .session import SessionController
from .shared_state import (
    INTERRUPTED_EXIT_CODE,
    RepetitionState,
    SessionState,
)
from .signal_handler import InterruptGuard

__all__ = [
    "SessionController",
    "InterruptGuard",
    "RepetitionState",
    "SessionState",
    "INTERRUPTED_EXIT_CODE",
]
