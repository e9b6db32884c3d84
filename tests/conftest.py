"""Pytest configuration and shared fixtures for unpivoter tests."""
import tempfile
from pathlib import Path

import pandas as pd
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_table():
    """Create a small wide table with an id column."""
    return pd.DataFrame(
        [["1", "10", "20"], ["2", "30", "40"]],
        columns=["id", "x", "y"],
        dtype=object,
    )


@pytest.fixture
def sample_csv_text():
    """CSV text with a header row and a quoted field."""
    return (
        "id,name,jan,feb\n"
        "1,Widget,100,110\n"
        '2,"Gadget, large",200,210\n'
    )


@pytest.fixture
def sample_csv_file(temp_dir, sample_csv_text):
    """Create a sample CSV file for testing."""
    file_path = temp_dir / "sales.csv"
    file_path.write_text(sample_csv_text, encoding="utf-8")
    return file_path


@pytest.fixture
def sample_tsv_file(temp_dir):
    """Create a sample TSV file with a header row and an escaped tab."""
    file_path = temp_dir / "sales.tsv"
    file_path.write_text(
        "id\tnote\tjan\n"
        "1\tred\\\tblue\t100\n"
        "2\tgreen\t200\n",
        encoding="utf-8",
    )
    return file_path


@pytest.fixture
def headerless_csv_file(temp_dir):
    """Create a CSV file without a header row."""
    file_path = temp_dir / "plain.csv"
    file_path.write_text("a,1,2\nb,3,4\n", encoding="utf-8")
    return file_path


@pytest.fixture
def malformed_csv_file(temp_dir):
    """Create a CSV file with a ragged row."""
    file_path = temp_dir / "broken.csv"
    file_path.write_text("id,x,y\n1,10\n", encoding="utf-8")
    return file_path
