"""
Accumulation and persistence of benchmark tables.

The recorder collects one interval row per sample and one summary row per
completed repetition for the whole invocation, then writes both tables in a
single pass at the end. Writing is best-effort: a failed table is logged and
the other one is still attempted.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..models.process import ProcessSample
from ..models.results import SessionResult
from ..reporting import format_size
from ..validation import ErrorSeverity, handle_file_error
from .base import TableStorage

logger = logging.getLogger(__name__)

INTERVAL_COLUMNS = ["Time", "PID name", "PID number", "RSS", "CPU"]
SUMMARY_COLUMNS = ["Load1", "Load5", "Load15", "StartTime", "StopTime"]


def build_file_prefix(started_at: datetime, workload_label: str) -> str:
    """Return the common name prefix of an invocation's result files."""
    return f"{started_at.strftime('%Y-%m-%d_%H-%M')}_{workload_label}_workload_benchmark"


class BenchmarkRecorder:
    """
    Collects interval and summary rows for one invocation.

    Args:
        storage: Sink used to write the tables.
        workload_label: Base name of the workload, used in file names.
        started_at: Wall-clock time of the invocation, used in file names.
    """

    def __init__(
        self,
        storage: TableStorage,
        workload_label: str,
        started_at: Optional[datetime] = None,
    ):
        self.storage = storage
        self.workload_label = workload_label
        self.started_at = started_at or datetime.now()
        self.interval_rows: List[Sequence[str]] = []
        self.summary_rows: List[Sequence[str]] = []

    def record_tick(self, samples: Sequence[ProcessSample], timestamp: datetime) -> None:
        """Add one interval row per sample taken at `timestamp`."""
        time_text = timestamp.isoformat(timespec="seconds")
        for sample in samples:
            self.interval_rows.append(
                [
                    time_text,
                    sample.name,
                    str(sample.pid),
                    format_size(sample.rss),
                    f"{sample.cpu_percent:.1f}",
                ]
            )

    def record_repetition(self, result: SessionResult) -> None:
        """Add the summary row of a completed repetition."""
        load = result.load_average
        if load is None:
            loads = ["", "", ""]
        else:
            loads = [f"{load.load1:.3g}", f"{load.load5:.3g}", f"{load.load15:.3g}"]
        self.summary_rows.append(
            loads + [str(result.start_latency_ns), str(result.stop_latency_ns)]
        )

    def table_paths(self, output_dir: Path) -> List[Path]:
        """Return the interval and summary file paths inside `output_dir`."""
        prefix = build_file_prefix(self.started_at, self.workload_label)
        ext = self.storage.extension
        return [
            Path(output_dir) / f"{prefix}_interval.{ext}",
            Path(output_dir) / f"{prefix}_summary.{ext}",
        ]

    def save(self, output_dir: Path) -> List[Path]:
        """
        Write both tables to `output_dir`.

        Returns:
            The paths that were written successfully.
        """
        interval_path, summary_path = self.table_paths(output_dir)
        written: List[Path] = []

        for columns, rows, path in (
            (INTERVAL_COLUMNS, self.interval_rows, interval_path),
            (SUMMARY_COLUMNS, self.summary_rows, summary_path),
        ):
            try:
                self.storage.save_table(columns, rows, path)
            except Exception as e:
                handle_file_error(
                    error=e,
                    context=f"writing results to {path}",
                    severity=ErrorSeverity.ERROR,
                    reraise=False,
                    logger=logger,
                )
                continue
            written.append(path)

        if written:
            logger.info(f"Saved benchmark results to: {', '.join(str(p) for p in written)}")
        return written
