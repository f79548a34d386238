"""
Aggregation of per-process sample histories into summaries.

Averages are arithmetic means over the samples actually retained for a
process, so a process that lived for three ticks of a ten-tick window is
averaged over three samples. Histories without samples produce no summary.
"""

import logging
from typing import Dict, Mapping, Optional

from ..models.process import ProcessHistory
from ..models.results import ProcessSummary

logger = logging.getLogger(__name__)


def summarize(history: ProcessHistory) -> Optional[ProcessSummary]:
    """
    Fold one process history into a ProcessSummary.

    Args:
        history: Samples of a single process identifier.

    Returns:
        The summary, or None when the history holds no samples.
    """
    samples = history.samples
    if not samples:
        return None

    sample_count = len(samples)
    rss_values = [s.rss for s in samples]

    return ProcessSummary(
        pid=history.pid,
        # The first name seen is the one the process started with.
        name=samples[0].name,
        average_cpu=sum(s.cpu_percent for s in samples) / sample_count,
        average_rss=sum(rss_values) // sample_count,
        peak_rss=max(rss_values),
        sample_count=sample_count,
    )


def summarize_all(
    histories: Mapping[int, ProcessHistory],
) -> Dict[int, ProcessSummary]:
    """
    Summarize every history, keyed by process identifier.

    Identifiers whose history is empty are left out of the result.
    """
    summaries: Dict[int, ProcessSummary] = {}
    for pid, history in histories.items():
        summary = summarize(history)
        if summary is None:
            logger.debug(f"PID {pid} has no samples, omitted from summary")
            continue
        summaries[pid] = summary

    logger.debug(
        f"Aggregation complete: {len(summaries)} of {len(histories)} processes summarized"
    )
    return summaries
