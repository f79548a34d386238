"""
Folding of sample histories into per-process summary statistics.
"""

from .aggregator import summarize, summarize_all

__all__ = ["summarize", "summarize_all"]
