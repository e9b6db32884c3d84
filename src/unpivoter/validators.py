"""Input validation utilities for unpivoter."""

from pathlib import Path
from typing import List, Sequence

import pandas as pd

from unpivoter.exceptions import ArgumentError, ColumnError, FileProcessingError


def validate_file_path(path: Path) -> Path:
    """Validate that the input file exists and is a regular file.

    Args:
        path: Path to file

    Returns:
        Validated Path object

    Raises:
        FileProcessingError: If file doesn't exist or is not a file
    """
    if not path.exists():
        raise FileProcessingError(f"File not found: {path}")

    if not path.is_file():
        raise FileProcessingError(f"Path is not a file: {path}")

    return path


def validate_keys(keys: Sequence[str]) -> List[str]:
    """Validate that at least one key column was given.

    Raises:
        ArgumentError: If the key list is empty
    """
    if not keys:
        raise ArgumentError(
            "You must specify one or more column to use as a key for the unpivoting."
        )
    return list(keys)


def find_missing_keys(table: pd.DataFrame, keys: Sequence[str]) -> List[str]:
    """Return keys that are not column identifiers of the table, in key order."""
    columns = set(table.columns)
    missing = []
    for key in keys:
        if key not in columns and key not in missing:
            missing.append(key)
    return missing


def validate_columns_exist(table: pd.DataFrame, keys: Sequence[str]) -> None:
    """Validate that every key is a column of the table.

    Args:
        table: Parsed table
        keys: Key column identifiers

    Raises:
        ColumnError: If any key is missing
    """
    missing_cols = find_missing_keys(table, keys)

    if missing_cols:
        available_cols = ", ".join(str(col) for col in table.columns)
        raise ColumnError(
            f"Column(s) not found: {', '.join(missing_cols)}. "
            f"Available columns: {available_cols}"
        )
