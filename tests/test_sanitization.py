"""
Tests for input sanitization utilities.
"""
from csvviz.core.sanitization import (
    sanitize_filename,
    sanitize_for_logging,
    validate_column_name
)


def test_sanitize_filename():
    """Test filename sanitization."""
    assert sanitize_filename("test.csv") == "test.csv"

    # Path traversal attempt
    assert sanitize_filename("../../../etc/passwd") == "passwd"
    assert sanitize_filename("C:\\Users\\me\\sales.csv") == "sales.csv"

    # Newlines and control characters
    assert sanitize_filename("test\nfile.csv") == "testfile.csv"
    assert "\x00" not in sanitize_filename("test\x00file.csv")

    long_name = "a" * 300
    assert len(sanitize_filename(long_name)) == 255

    assert sanitize_filename("") == "unknown"
    assert sanitize_filename(None) == "unknown"
    assert sanitize_filename("...") == "unknown"


def test_sanitize_for_logging():
    """Test logging sanitization."""
    assert sanitize_for_logging("test\nlog") == "test log"
    assert "\r" not in sanitize_for_logging("test\rlog")
    assert "\x00" not in sanitize_for_logging("test\x00log")

    long_string = "a" * 600
    result = sanitize_for_logging(long_string)
    assert len(result) == 503
    assert result.endswith("...")

    assert sanitize_for_logging("") == ""


def test_validate_column_name():
    """Test column name validation."""
    assert validate_column_name("Revenue")
    assert validate_column_name("Revenue\t(USD)")
    assert validate_column_name("Line one\nline two")

    assert not validate_column_name("")
    assert not validate_column_name("   ")
    assert not validate_column_name("a" * 1001)
    assert not validate_column_name("bad\x00name")
    assert not validate_column_name("bad\x1bname")
