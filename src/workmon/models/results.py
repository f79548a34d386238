"""
Session result data models.

These structures hold what a single repetition reports once its workload has
been stopped: per-process summaries, the system load snapshot and the start
and stop latencies of the workload.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class ProcessSummary:
    """
    Aggregated statistics of one process history.

    The averages are arithmetic means over the samples actually retained for
    the process, not normalized by wall-clock time.
    """

    pid: int
    name: str
    average_cpu: float
    # Integer mean of the RSS samples, in bytes.
    average_rss: int
    peak_rss: int
    sample_count: int


@dataclass(frozen=True)
class LoadAverage:
    """System load averages over the last 1, 5 and 15 minutes."""

    load1: float
    load5: float
    load15: float


@dataclass
class SessionResult:
    """
    Outcome of one completed repetition.

    Attributes:
        repetition: Zero-based index of the repetition.
        start_latency_ns: Time from spawn request to spawn confirmation.
        stop_latency_ns: Time from termination request to termination confirmation.
        load_average: Load snapshot taken after the sampling window, or None
            when it could not be read.
        per_process_summary: Summaries keyed by process identifier. Processes
            without samples are absent.
        exited_early: True when the workload exited before the window elapsed.
        tick_count: Number of sampling ticks performed.
    """

    repetition: int
    start_latency_ns: int
    stop_latency_ns: int
    load_average: Optional[LoadAverage]
    per_process_summary: Dict[int, ProcessSummary] = field(default_factory=dict)
    exited_early: bool = False
    tick_count: int = 0
