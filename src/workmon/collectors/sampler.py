"""
Per-tick resource sampling of a workload's process tree.

This module provides the ProcessSampler class, which reads CPU and memory
figures for every tracked process once per tick using psutil, and drives the
sampling window: sample, rediscover the tree, check the root, wait for the
next tick, until the window elapses or the workload exits.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

import psutil

from ..models.process import ProcessHistory, ProcessSample, TrackedSet, record_samples
from ..system.discovery import discover_tree
from ..system.errors import DiscoveryError, ProcessNotFound
from ..system.processes import HandleCache
from .ticker import Ticker

logger = logging.getLogger(__name__)

# Called after every tick with the samples taken and the wall-clock time of the tick.
TickCallback = Callable[[List[ProcessSample], datetime], None]


@dataclass
class WindowOutcome:
    """
    What a sampling window produced.

    Attributes:
        histories: Sample history per process identifier.
        tracked: Every identifier seen in the workload's tree during the window.
        ticks: Number of ticks performed.
        exited_early: True when the root process exited before the deadline.
    """

    histories: Dict[int, ProcessHistory] = field(default_factory=dict)
    tracked: TrackedSet = field(default_factory=TrackedSet)
    ticks: int = 0
    exited_early: bool = False


class ProcessSampler:
    """
    Samples name, CPU percent and memory of tracked processes.

    CPU percent comes from psutil's per-handle "since last call" counter, so
    the handle cache must outlive individual ticks for values to be
    meaningful; they are relative to the tick period.

    Attributes:
        cache: Handle cache of the current repetition.
    """

    def __init__(self, cache: HandleCache):
        self.cache = cache

    def sample_once(self, tracked: Iterable[int]) -> List[ProcessSample]:
        """
        Take one sample of every tracked identifier that can still be resolved.

        Identifiers whose process has exited, or that cannot be read, are
        skipped for this tick.

        Args:
            tracked: Identifiers to sample, in output order.

        Returns:
            One ProcessSample per live identifier.
        """
        samples: List[ProcessSample] = []
        for pid in tracked:
            sample = self._sample_process(pid)
            if sample is not None:
                samples.append(sample)
        return samples

    def _sample_process(self, pid: int) -> Optional[ProcessSample]:
        try:
            process = self.cache.get(pid)
            with process.oneshot():
                name = process.name()
                cpu_percent = process.cpu_percent(interval=None)
                memory = process.memory_info()
                swap = self._read_swap(process)
        except (ProcessNotFound, psutil.NoSuchProcess):
            # Expected while the tree changes; the identifier stays tracked.
            logger.debug(f"PID {pid} not available for sampling this tick")
            self.cache.invalidate(pid)
            return None
        except psutil.AccessDenied:
            logger.debug(f"Access denied reading PID {pid}, skipping this tick")
            return None

        return ProcessSample(
            pid=pid,
            name=name,
            cpu_percent=cpu_percent,
            vms=memory.vms,
            rss=memory.rss,
            swap=swap,
        )

    @staticmethod
    def _read_swap(process: psutil.Process) -> int:
        """Return swapped-out bytes, or 0 where the platform or permissions hide them."""
        try:
            full_info = process.memory_full_info()
        except psutil.AccessDenied:
            return 0
        return int(getattr(full_info, "swap", 0))

    def _root_alive(self, root_pid: int) -> bool:
        try:
            self.cache.get(root_pid)
        except ProcessNotFound:
            return False
        return True

    def run_window(
        self,
        root_pid: int,
        duration: float,
        ticker: Ticker,
        on_tick: Optional[TickCallback] = None,
    ) -> WindowOutcome:
        """
        Sample the workload's tree once per tick until the window closes.

        The window closes when `duration` seconds have elapsed on the ticker's
        clock, or earlier when the root process can no longer be resolved.

        Args:
            root_pid: Identifier of the workload process.
            duration: Length of the window in seconds.
            ticker: Tick source providing the clock and the inter-tick wait.
            on_tick: Optional callback invoked with each tick's samples.

        Returns:
            The histories and tracked identifiers collected in the window.
        """
        outcome = WindowOutcome()
        outcome.tracked = self._rediscover(root_pid, TrackedSet([root_pid]))
        deadline = ticker.deadline_after(duration)

        while not ticker.expired(deadline):
            ticker.start_tick()
            outcome.ticks += 1

            samples = self.sample_once(outcome.tracked)
            record_samples(outcome.histories, samples)
            if on_tick is not None:
                on_tick(samples, datetime.now())

            outcome.tracked = self._rediscover(root_pid, outcome.tracked)

            if not self._root_alive(root_pid):
                logger.warning("workload exited prematurely")
                outcome.exited_early = True
                break

            ticker.wait()

        logger.debug(
            f"Sampling window finished after {outcome.ticks} tick(s), "
            f"{len(outcome.tracked)} tracked PID(s)"
        )
        return outcome

    def _rediscover(self, root_pid: int, tracked: TrackedSet) -> TrackedSet:
        try:
            return discover_tree(root_pid, tracked, cache=self.cache)
        except DiscoveryError as e:
            # Keep what was found; the next tick tries again.
            logger.warning(f"Process tree discovery failed this tick: {e}")
            return TrackedSet(e.partial) if e.partial else tracked
