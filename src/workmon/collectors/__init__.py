"""
Resource collectors for the workload's process tree.
"""

from .sampler import ProcessSampler, TickCallback, WindowOutcome
from .ticker import Ticker

__all__ = [
    "ProcessSampler",
    "TickCallback",
    "Ticker",
    "WindowOutcome",
]
