"""
Abstract base class for result table sinks.

A sink receives a header and string-valued rows and writes them to one file.
Implementations decide the on-disk format; callers only choose the path.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence


class TableStorage(ABC):
    """Abstract base class for result table sinks."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension, without the dot, of the files this sink writes."""

    @abstractmethod
    def save_table(
        self, columns: Sequence[str], rows: List[Sequence[str]], path: Path
    ) -> None:
        """
        Write a table to the specified path, replacing any existing file.

        Args:
            columns: Column headers, in output order
            rows: Data rows, each with one value per column
            path: File path to write to
        """
        pass
