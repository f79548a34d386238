"""
Human-readable console output of a monitoring session.

The per-tick usage lines and the end-of-repetition summary are written to a
text stream (stdout by default). Diagnostics never go through here; they use
logging.
"""

import sys
from typing import Iterable, Mapping, Optional, TextIO

from .models.process import ProcessSample
from .models.results import ProcessSummary, SessionResult

_KIB = 1024
_MIB = 1024 * 1024
_GIB = 1024 * 1024 * 1024


def format_size(size: int) -> str:
    """
    Format a byte count with a truncating binary unit.

    Examples:
        512 -> "512 B", 2048 -> "2 kB", 5242880 -> "5 mB", 3221225472 -> "3 gB"
    """
    if size < _KIB:
        return f"{size} B"
    if size < _MIB:
        return f"{size // _KIB} kB"
    if size < _GIB:
        return f"{size // _MIB} mB"
    return f"{size // _GIB} gB"


class ConsoleReporter:
    """
    Writes usage and summary lines to a text stream.

    Args:
        stream: Destination stream; defaults to the current sys.stdout.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so that redirected stdout (pytest capsys) is honored.
        return self._stream if self._stream is not None else sys.stdout

    def _line(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def print_usage(self, samples: Iterable[ProcessSample]) -> None:
        """Print the current usage of every sampled process, then a blank line."""
        for sample in samples:
            self._line(
                f"{sample.name}({sample.pid}): Mem: {format_size(sample.rss)} "
                f"CPU: {sample.cpu_percent:.6f}"
            )
        self._line()
        self.stream.flush()

    def print_process_summaries(self, summaries: Mapping[int, ProcessSummary]) -> None:
        for summary in summaries.values():
            self._line(
                f"{summary.name}({summary.pid}): seconds alive: {summary.sample_count}  "
                f"avg CPU: {summary.average_cpu:.6f}%  "
                f"avg Mem: {format_size(summary.average_rss)}  "
                f"peak Mem: {format_size(summary.peak_rss)}"
            )

    def print_summary(self, result: SessionResult) -> None:
        """
        Print the end-of-repetition report.

        Per-process statistics come first, followed by the load average and
        the start and stop latencies in nanoseconds.
        """
        self.print_process_summaries(result.per_process_summary)

        load = result.load_average
        if load is None:
            self._line("load average: unavailable")
        else:
            self._line(
                f"load average: Load1: {load.load1:f} Load5: {load.load5:f} "
                f"Load15: {load.load15:f}"
            )

        self._line(f"container start time: {result.start_latency_ns}ns")
        self._line(f"container stop time: {result.stop_latency_ns}ns")
        self.stream.flush()
