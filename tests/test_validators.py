"""Tests for validation utilities."""
import pandas as pd
import pytest

from unpivoter.exceptions import ArgumentError, ColumnError, FileProcessingError
from unpivoter.validators import (
    find_missing_keys,
    validate_columns_exist,
    validate_file_path,
    validate_keys,
)


@pytest.fixture
def table():
    return pd.DataFrame([["1", "2"]], columns=["id", "x"], dtype=object)


class TestValidateFilePath:
    """Test file path validation."""

    def test_validate_existing_file(self, tmp_path):
        """Test validating an existing file."""
        test_file = tmp_path / "test.csv"
        test_file.touch()

        assert validate_file_path(test_file) == test_file

    def test_validate_nonexistent_file(self, tmp_path):
        """Test that validation fails for a missing file."""
        with pytest.raises(FileProcessingError, match="File not found"):
            validate_file_path(tmp_path / "nonexistent.csv")

    def test_validate_directory_path_fails(self, tmp_path):
        """Test that validation fails for directory path."""
        with pytest.raises(FileProcessingError, match="Path is not a file"):
            validate_file_path(tmp_path)


class TestValidateKeys:
    """Test key list validation."""

    def test_valid_keys(self):
        """Test non-empty key lists pass."""
        assert validate_keys(("id", "name")) == ["id", "name"]

    def test_empty_keys(self):
        """Test empty key lists fail."""
        with pytest.raises(ArgumentError, match="one or more column"):
            validate_keys([])


class TestFindMissingKeys:
    """Test missing key detection."""

    def test_all_present(self, table):
        """Test nothing is missing."""
        assert find_missing_keys(table, ["id", "x"]) == []

    def test_missing_once(self, table):
        """Test missing keys are reported once, in key order."""
        assert find_missing_keys(table, ["zz", "id", "aa", "zz"]) == ["zz", "aa"]


class TestValidateColumnsExist:
    """Test strict column validation."""

    def test_existing_columns(self, table):
        """Test validation passes for existing columns."""
        validate_columns_exist(table, ["id"])

    def test_missing_columns(self, table):
        """Test validation fails and lists available columns."""
        with pytest.raises(ColumnError, match="Available columns: id, x"):
            validate_columns_exist(table, ["nope"])

    def test_column_error_is_argument_error(self, table):
        """Test ColumnError maps to the usage exit code."""
        with pytest.raises(ArgumentError):
            validate_columns_exist(table, ["nope"])
