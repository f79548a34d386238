"""System load-average snapshot."""

import logging

import psutil

from ..models.results import LoadAverage

logger = logging.getLogger(__name__)


def read_load_average() -> LoadAverage:
    """
    Read the 1, 5 and 15 minute system load averages.

    Raises:
        OSError: If the platform cannot report a load average.
    """
    load1, load5, load15 = psutil.getloadavg()
    logger.debug(f"Load average: {load1:.2f} {load5:.2f} {load15:.2f}")
    return LoadAverage(load1=load1, load5=load5, load15=load15)
