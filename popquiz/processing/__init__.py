"""Processing helpers for workbook I/O and best-of averaging."""

from .best_of import best_of_average, process_table
from .workbook import read_table, write_table

__all__ = ["best_of_average", "process_table", "read_table", "write_table"]
