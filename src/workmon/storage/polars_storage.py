"""
Result table storage using Polars.
"""

import logging
from pathlib import Path
from typing import List, Literal, Sequence

import polars as pl

from .base import TableStorage

logger = logging.getLogger(__name__)


class PolarsTableStorage(TableStorage):
    """
    Writes result tables as CSV or Parquet through a Polars DataFrame.

    Every column is stored as a string, so the values appear exactly as the
    console shows them (for example "5 mB" for a resident size).
    """

    def __init__(self, format_type: Literal["csv", "parquet"] = "csv"):
        if format_type not in ("csv", "parquet"):
            raise ValueError(f"Unsupported storage format: {format_type}")
        self.format_type = format_type
        logger.debug(f"Initialized PolarsTableStorage with format: {format_type}")

    @property
    def extension(self) -> str:
        return self.format_type

    def save_table(
        self, columns: Sequence[str], rows: List[Sequence[str]], path: Path
    ) -> None:
        for index, row in enumerate(rows):
            if len(row) != len(columns):
                raise ValueError(
                    f"Row {index} has {len(row)} values, expected {len(columns)}"
                )

        df = pl.DataFrame(
            [list(row) for row in rows],
            schema={name: pl.Utf8 for name in columns},
            orient="row",
        )

        try:
            if self.format_type == "csv":
                df.write_csv(path)
            else:
                df.write_parquet(path)
            logger.debug(f"Saved table with {len(df)} rows to {path}")
        except Exception as e:
            logger.error(f"Failed to save table to {path}: {e}")
            raise
