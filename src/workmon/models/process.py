"""
Process-level data models.

This module contains the structures produced while a workload is observed:
the immutable per-tick sample of one process, the ordered history of samples
for one process identifier, and the ordered set of identifiers known to
belong to the workload's process tree.
"""

from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List


@dataclass(frozen=True)
class ProcessSample:
    """
    Resource usage of a single process at one sampling tick.

    Attributes:
        pid: Process identifier.
        name: Process name as reported by the OS.
        cpu_percent: CPU utilization since the previous read of the same handle.
        vms: Virtual memory size in bytes.
        rss: Resident set size in bytes.
        swap: Swapped-out memory in bytes (0 when not readable).
    """

    pid: int
    name: str
    cpu_percent: float
    vms: int
    rss: int
    swap: int


@dataclass
class ProcessHistory:
    """
    Samples of one process identifier in sampling order.
    """

    pid: int
    samples: List[ProcessSample] = field(default_factory=list)

    def append(self, sample: ProcessSample) -> None:
        if sample.pid != self.pid:
            raise ValueError(
                f"Sample for PID {sample.pid} cannot be added to history of PID {self.pid}"
            )
        self.samples.append(sample)

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[ProcessSample]:
        return iter(self.samples)


class TrackedSet(AbstractSet):
    """
    Identifiers known to belong to the workload's process tree.

    Membership only grows: an identifier is kept after its process exits so
    that its history stays part of the final aggregation. Iteration follows
    the order in which identifiers were first seen, which puts the root
    first and keeps console output stable between ticks.
    """

    def __init__(self, pids: Iterable[int] = ()):
        self._pids: Dict[int, None] = {}
        self.update(pids)

    def add(self, pid: int) -> None:
        self._pids.setdefault(pid, None)

    def update(self, pids: Iterable[int]) -> None:
        for pid in pids:
            self.add(pid)

    def __contains__(self, pid: object) -> bool:
        return pid in self._pids

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._pids))

    def __len__(self) -> int:
        return len(self._pids)

    def __repr__(self) -> str:
        return f"TrackedSet({list(self._pids)})"


def record_samples(
    histories: Dict[int, ProcessHistory], samples: Iterable[ProcessSample]
) -> None:
    """Append each sample to the history of its identifier, creating it on first sight."""
    for sample in samples:
        history = histories.get(sample.pid)
        if history is None:
            history = histories[sample.pid] = ProcessHistory(pid=sample.pid)
        history.append(sample)
