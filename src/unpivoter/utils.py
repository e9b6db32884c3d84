"""Helper utilities for unpivoter."""

from pathlib import Path
from typing import Iterable, List, Optional, Union


def parse_column_list(column_str: Optional[str]) -> List[str]:
    """Parse comma-separated column string into list.

    Args:
        column_str: Comma-separated column names (e.g., "ID,Name,Date")

    Returns:
        List of column names with whitespace stripped

    Examples:
        >>> parse_column_list("ID, Name, Date")
        ['ID', 'Name', 'Date']
        >>> parse_column_list(None)
        []
    """
    if not column_str:
        return []
    return [col.strip() for col in column_str.split(",") if col.strip()]


def parse_key_options(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten repeated --keys options, each of which may be comma-separated.

    Examples:
        >>> parse_key_options(("id,name", "date"))
        ['id', 'name', 'date']
    """
    keys: List[str] = []
    for value in values or ():
        keys.extend(parse_column_list(value))
    return keys


def mode_from_path(path: Union[str, Path]) -> str:
    """Guess the file mode from the last three characters of a path.

    Examples:
        >>> mode_from_path("data/sales.tsv")
        'tsv'
        >>> mode_from_path("report.txt")
        'txt'
    """
    return str(path)[-3:]
