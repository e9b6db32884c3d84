"""Unpivoter - CSV/TSV unpivot/melt CLI tool."""

__version__ = "0.1.0"
__author__ = "unpivoter"

from unpivoter.core import unpivot, unpivot_file, unpivot_table, unpivot_text
from unpivoter.exceptions import UnpivotError
from unpivoter.formats import Format

__all__ = [
    "unpivot",
    "unpivot_table",
    "unpivot_file",
    "unpivot_text",
    "Format",
    "UnpivotError",
    "__version__",
]
