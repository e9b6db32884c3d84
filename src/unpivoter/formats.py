"""Delimited text parsing and encoding for unpivoter.

Two formats are supported:

- csv: RFC 4180 comma separated values (quoted fields, embedded delimiters
  and newlines inside quotes, doubled quotes).
- tsv: tab separated values without quoting. A tab inside a value is
  written as a backslash followed by the tab; there is no other escape.

Parsed data is held in a pandas DataFrame of strings whose column labels are
the header names, or "0", "1", ... when the text has no header row.
"""

import csv
import io
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

import pandas as pd

from unpivoter.exceptions import ArgumentError, FormatError
from unpivoter.utils import mode_from_path

LINE_TERMINATOR = "\n"
TSV_FIELD_SEP = "\t"
TSV_ESCAPED_TAB = "\\\t"

# A tab not preceded by a backslash separates two fields
_TSV_SPLIT = re.compile(r"(?<!\\)\t")


def _raise_field_size_limit() -> None:
    """Lift the csv module's per-field size cap."""
    try:
        csv.field_size_limit(sys.maxsize)
    except OverflowError:
        # C long is 32 bits on some platforms
        csv.field_size_limit(2 ** 31 - 1)


class Format(str, Enum):
    """Supported delimited text formats."""

    CSV = "csv"
    TSV = "tsv"


def _build_table(records: List[Tuple[int, List[str]]], has_headers: bool) -> pd.DataFrame:
    """Turn tokenized records into a Table.

    Args:
        records: List of (line number, fields) pairs in input order
        has_headers: Whether the first record holds the column identifiers

    Raises:
        FormatError: If records are ragged or header names repeat
    """
    if not records:
        return pd.DataFrame()

    _, first = records[0]
    if has_headers:
        columns = list(first)
        body = records[1:]
        duplicates = sorted({col for col in columns if columns.count(col) > 1})
        if duplicates:
            raise FormatError(
                f"Duplicate column name(s) in header row: {', '.join(duplicates)}"
            )
    else:
        columns = [str(i) for i in range(len(first))]
        body = records

    width = len(columns)
    for line_number, fields in body:
        if len(fields) != width:
            raise FormatError(
                f"Expected {width} fields in line {line_number}, saw {len(fields)}"
            )

    return pd.DataFrame(
        [fields for _, fields in body], columns=columns, dtype=object
    )


def parse_csv(text: str, has_headers: bool = False) -> pd.DataFrame:
    """Parse comma separated text into a Table.

    Args:
        text: CSV text
        has_headers: Whether the first row is a header row

    Returns:
        Parsed table

    Raises:
        FormatError: On unterminated or stray quotes and ragged rows
    """
    _raise_field_size_limit()
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    records = []
    try:
        for fields in reader:
            if fields:
                records.append((reader.line_num, fields))
    except csv.Error as e:
        raise FormatError(f"Invalid CSV near line {reader.line_num}: {e}")

    return _build_table(records, has_headers)


def parse_tsv(text: str, has_headers: bool = False) -> pd.DataFrame:
    """Parse tab separated text into a Table.

    Escaped tabs (backslash + tab) are part of the value and are unescaped.
    An empty line is a record holding one empty field; only the empty text
    after the final newline is dropped.

    Args:
        text: TSV text
        has_headers: Whether the first line is a header row

    Returns:
        Parsed table

    Raises:
        FormatError: On ragged rows
    """
    lines = text.split("\n")
    terminated = lines[:-1]
    if lines[-1] == "":
        lines.pop()

    # CR is only a line ending when every terminated line carries one. A
    # single-line file whose last value ends in CR is still read as CRLF.
    crlf = bool(terminated) and all(line.endswith("\r") for line in terminated)

    records = []
    for line_number, line in enumerate(lines, start=1):
        if crlf and line_number <= len(terminated):
            line = line[:-1]
        fields = [
            field.replace(TSV_ESCAPED_TAB, TSV_FIELD_SEP)
            for field in _TSV_SPLIT.split(line)
        ]
        records.append((line_number, fields))

    return _build_table(records, has_headers)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def encode_csv(rows: Iterable[Iterable[Any]]) -> str:
    """Encode rows as CSV, quoting only where needed."""
    buffer = io.StringIO()
    writer = csv.writer(
        buffer, quoting=csv.QUOTE_MINIMAL, lineterminator=LINE_TERMINATOR
    )
    for row in rows:
        writer.writerow([_cell_text(value) for value in row])
    return buffer.getvalue()


def encode_tsv(rows: Iterable[Iterable[Any]]) -> str:
    """Encode rows as TSV, escaping literal tabs as backslash + tab."""
    lines = []
    for row in rows:
        fields = [
            _cell_text(value).replace(TSV_FIELD_SEP, TSV_ESCAPED_TAB)
            for value in row
        ]
        lines.append(TSV_FIELD_SEP.join(fields) + LINE_TERMINATOR)
    return "".join(lines)


class Codec(NamedTuple):
    """Parse/encode function pair for one format."""

    parse: Callable[[str, bool], pd.DataFrame]
    encode: Callable[[Iterable[Iterable[Any]]], str]


CODECS: Dict[Format, Codec] = {
    Format.CSV: Codec(parse_csv, encode_csv),
    Format.TSV: Codec(parse_tsv, encode_tsv),
}


def parse(text: str, fmt: Format, has_headers: bool = False) -> pd.DataFrame:
    """Parse delimited text in the given format into a Table."""
    return CODECS[Format(fmt)].parse(text, has_headers)


def encode(rows: Iterable[Iterable[Any]], fmt: Format) -> str:
    """Encode a sequence of rows in the given format.

    Rows are positional and need not share a length.
    """
    return CODECS[Format(fmt)].encode(rows)


def table_records(table: pd.DataFrame, include_header: bool = False) -> List[List[Any]]:
    """Convert a Table back into positional rows.

    Args:
        table: Table to convert
        include_header: Prepend the column identifiers as the first row

    Returns:
        List of rows in table order
    """
    records = [list(row) for row in table.itertuples(index=False, name=None)]
    if include_header:
        records.insert(0, [str(col) for col in table.columns])
    return records


def resolve_format(mode: Optional[str], path: Optional[Union[str, Path]] = None) -> Format:
    """Resolve the format from an explicit mode or the file path.

    Args:
        mode: "csv" or "tsv"; when None the last three characters of path are used
        path: Input file path

    Returns:
        Resolved Format

    Raises:
        ArgumentError: If the mode is not a supported format
    """
    if mode is None and path is not None:
        mode = mode_from_path(path)

    try:
        return Format(mode)
    except ValueError:
        raise ArgumentError(
            f"Invalid file format {mode}. Use the --mode or -m argument "
            "to specify the format of your file."
        )
