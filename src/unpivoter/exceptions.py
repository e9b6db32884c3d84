"""Custom exceptions for unpivoter."""

# sysexits(3) codes used by the CLI
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66


class UnpivotError(Exception):
    """Base exception for unpivoter."""

    exit_code = 1


class ArgumentError(UnpivotError):
    """Invalid or missing command line argument."""

    exit_code = EX_USAGE


class ColumnError(ArgumentError):
    """Error with key column specification."""

    pass


class FormatError(UnpivotError):
    """Delimited text could not be tokenized."""

    exit_code = EX_DATAERR


class FileProcessingError(UnpivotError):
    """Error reading or writing a file."""

    exit_code = EX_NOINPUT
