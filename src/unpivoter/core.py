"""Core unpivoting logic for unpivoter."""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

import pandas as pd
from rich.console import Console
from rich.markup import escape

from unpivoter.exceptions import FileProcessingError
from unpivoter.formats import Format, encode, parse, resolve_format
from unpivoter.validators import (
    find_missing_keys,
    validate_columns_exist,
    validate_file_path,
)

console = Console(stderr=True)

DEFAULT_VAR_NAME = "key"
DEFAULT_VALUE_NAME = "value"


def resolve_key_columns(table: pd.DataFrame, keys: Sequence[str]) -> List[str]:
    """Return the table columns that are keys, in table column order.

    Keys that are not columns of the table are ignored, and repeated keys
    have no further effect.

    Args:
        table: Table to process
        keys: Key column identifiers given by the caller

    Returns:
        Key columns present in the table
    """
    wanted = set(keys)
    return [col for col in table.columns if col in wanted]


def _free_label(table: pd.DataFrame, base: str) -> str:
    label = base
    while label in table.columns:
        label = f"_{label}"
    return label


def _melt(table: pd.DataFrame, id_vars: List[str], value_vars: List[str]) -> pd.DataFrame:
    """Melt the table and reorder the result row by row.

    pandas.melt stacks one value column after another; a stable sort on the
    original row index restores input row order while keeping the column
    order within each row.
    """
    frame = table.reset_index(drop=True)
    var_col = _free_label(frame, "__variable__")
    value_col = _free_label(frame, "__value__")

    df_long = pd.melt(
        frame,
        id_vars=id_vars,
        value_vars=value_vars,
        var_name=var_col,
        value_name=value_col,
        ignore_index=False,
    )
    df_long = df_long.sort_index(kind="mergesort").reset_index(drop=True)
    return df_long[id_vars + [var_col, value_col]]


def unpivot(table: pd.DataFrame, keys: Sequence[str]) -> Iterator[List[Any]]:
    """Unpivot a table into positional rows.

    For every input row, one row is produced per non-key column: the key
    values (in table column order), then the column identifier, then the
    cell value. Rows made only of key columns produce nothing.

    Args:
        table: Parsed table
        keys: Key column identifiers; unknown identifiers are ignored

    Yields:
        Unpivoted rows, in input row order
    """
    id_vars = resolve_key_columns(table, keys)
    value_vars = [col for col in table.columns if col not in id_vars]

    if not value_vars or table.empty:
        return

    for record in _melt(table, id_vars, value_vars).itertuples(index=False, name=None):
        yield list(record)


def unpivot_table(
    table: pd.DataFrame,
    keys: Sequence[str],
    var_name: str = DEFAULT_VAR_NAME,
    value_name: str = DEFAULT_VALUE_NAME,
) -> pd.DataFrame:
    """Unpivot a table into a long-form DataFrame.

    Same rows as unpivot(), labelled with the key columns followed by
    var_name and value_name.

    Args:
        table: Parsed table
        keys: Key column identifiers
        var_name: Name for the column holding the non-key identifier
        value_name: Name for the column holding the value

    Returns:
        Unpivoted DataFrame
    """
    id_vars = resolve_key_columns(table, keys)
    value_vars = [col for col in table.columns if col not in id_vars]
    columns = id_vars + [var_name, value_name]

    if not value_vars or table.empty:
        return pd.DataFrame(columns=columns, dtype=object)

    df_long = _melt(table, id_vars, value_vars)
    df_long.columns = columns
    return df_long


def build_header(
    keys: Sequence[str],
    var_name: str = DEFAULT_VAR_NAME,
    value_name: str = DEFAULT_VALUE_NAME,
) -> List[str]:
    """Header row for unpivoted output: the keys as given, then var/value names."""
    return list(keys) + [var_name, value_name]


def unpivot_records(
    table: pd.DataFrame,
    keys: Sequence[str],
    has_headers: bool = False,
    var_name: str = DEFAULT_VAR_NAME,
    value_name: str = DEFAULT_VALUE_NAME,
) -> List[List[Any]]:
    """Materialize the unpivoted rows, with a header row when the input had one."""
    records = list(unpivot(table, keys))
    if has_headers:
        records.insert(0, build_header(keys, var_name, value_name))
    return records


def unpivot_text(
    text: str,
    fmt: Format,
    keys: Sequence[str],
    has_headers: bool = False,
    var_name: str = DEFAULT_VAR_NAME,
    value_name: str = DEFAULT_VALUE_NAME,
) -> str:
    """Parse, unpivot and re-encode delimited text.

    Args:
        text: Input text
        fmt: Format of the input, also used for the output
        keys: Key column identifiers
        has_headers: Whether the first row of text is a header row
        var_name: Header label for the identifier column
        value_name: Header label for the value column

    Returns:
        Encoded unpivoted text

    Raises:
        FormatError: If text is malformed for fmt
    """
    table = parse(text, fmt, has_headers)
    return encode(unpivot_records(table, keys, has_headers, var_name, value_name), fmt)


def unpivot_file(
    input_file: Path,
    keys: Sequence[str],
    mode: Optional[str] = None,
    has_headers: bool = False,
    inline: bool = False,
    var_name: str = DEFAULT_VAR_NAME,
    value_name: str = DEFAULT_VALUE_NAME,
    strict: bool = False,
    verbose: bool = False,
) -> Dict[str, Any]:
    """Unpivot a CSV or TSV file.

    The whole output is encoded in memory before anything is written, so a
    parse failure never touches the input file.

    Args:
        input_file: Path to input file
        keys: Key column identifiers
        mode: "csv" or "tsv"; defaults to the last three characters of the path
        has_headers: Whether the first row is a header row
        inline: Overwrite the input file with the output
        var_name: Header label for the identifier column
        value_name: Header label for the value column
        strict: Fail when a key is not a column of the file
        verbose: Verbose output

    Returns:
        Dictionary with processing statistics and the encoded output

    Raises:
        ArgumentError: If the mode is invalid
        ColumnError: If strict and a key is missing
        FileProcessingError: If the file cannot be read or written
        FormatError: If the file is malformed
    """
    validate_file_path(input_file)
    fmt = resolve_format(mode, input_file)

    if verbose:
        console.print(f"[cyan]Reading {input_file} as {fmt.value}[/cyan]")

    try:
        with open(input_file, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileProcessingError(f"Error reading file {input_file}: {e}")

    table = parse(text, fmt, has_headers)

    if strict:
        validate_columns_exist(table, keys)
    else:
        missing = find_missing_keys(table, keys)
        if missing and verbose:
            console.print(
                f"[yellow]Warning: key(s) not found and ignored: {escape(', '.join(missing))}[/yellow]"
            )

    records = unpivot_records(table, keys, has_headers, var_name, value_name)
    output_rows = len(records) - 1 if has_headers else len(records)
    output_text = encode(records, fmt)

    output_file = None
    if inline:
        try:
            with open(input_file, "w", encoding="utf-8", newline="") as f:
                f.write(output_text)
        except OSError as e:
            raise FileProcessingError(f"Error writing file {input_file}: {e}")
        output_file = input_file
        if verbose:
            console.print(f"[cyan]Wrote output to {input_file}[/cyan]")

    if verbose:
        console.print(f"  [green]OK[/green] {len(table)} rows -> {output_rows} rows")

    return {
        "format": fmt.value,
        "input_rows": len(table),
        "output_rows": output_rows,
        "output_text": output_text,
        "output_file": output_file,
    }
