"""
Persistence of benchmark result tables.

Interval rows (one per sample) and summary rows (one per repetition) are
collected by a BenchmarkRecorder and written once per invocation through a
TableStorage sink. The default sink uses Polars to write CSV or Parquet.
"""

from .base import TableStorage
from .factory import create_storage
from .polars_storage import PolarsTableStorage
from .recorder import (
    INTERVAL_COLUMNS,
    SUMMARY_COLUMNS,
    BenchmarkRecorder,
    build_file_prefix,
)

__all__ = [
    "TableStorage",
    "PolarsTableStorage",
    "create_storage",
    "BenchmarkRecorder",
    "build_file_prefix",
    "INTERVAL_COLUMNS",
    "SUMMARY_COLUMNS",
]
