"""
Unit tests for numeric coercion of raw cells.
"""
import pytest
from csvviz.services.coercion import (
    cell,
    format_number,
    indexed_numeric_values,
    numeric_values,
    parse_float,
    to_float,
    to_float_localized,
)


@pytest.mark.unit
def test_parse_float_reads_leading_number():
    assert parse_float("42") == 42.0
    assert parse_float("  -3.5") == -3.5
    assert parse_float(".5") == 0.5
    assert parse_float("1e3") == 1000.0
    assert parse_float("12.5kg") == 12.5


@pytest.mark.unit
def test_parse_float_date_prefix():
    """A date string coerces to its year, like a browser parseFloat would."""
    assert parse_float("2024-01-15") == 2024.0


@pytest.mark.unit
def test_parse_float_rejects_non_numbers():
    assert parse_float("") is None
    assert parse_float("abc") is None
    assert parse_float("$5") is None
    assert parse_float("N/A") is None


@pytest.mark.unit
def test_parse_float_rejects_infinity():
    assert parse_float("Infinity") is None
    assert parse_float("-Infinity") is None
    assert parse_float("1e999") is None


@pytest.mark.unit
def test_to_float_strips_thousands_separators():
    assert to_float("1,234.5") == 1234.5
    assert to_float("1,000,000") == 1000000.0
    assert to_float(None) is None
    assert to_float("") is None


@pytest.mark.unit
def test_to_float_localized_european():
    assert to_float_localized("€1.234,56") == pytest.approx(1234.56)
    assert to_float_localized("12,5%") == 12.5
    assert to_float_localized("1.234") == 1234.0


@pytest.mark.unit
def test_to_float_localized_currency_and_percent():
    assert to_float_localized("$1,200.50") == 1200.5
    assert to_float_localized("45%") == 45.0
    assert to_float_localized("£ 99") == 99.0
    assert to_float_localized("n/a") is None
    assert to_float_localized(None) is None


@pytest.mark.unit
def test_cell_reads_missing_as_empty():
    row = {"a": "1", "b": ""}
    assert cell(row, "a") == "1"
    assert cell(row, "b") == ""
    assert cell(row, "missing") == ""
    assert cell({"a": None}, "a") == ""


@pytest.mark.unit
def test_numeric_values_drop_failures():
    rows = [{"x": "1"}, {"x": "abc"}, {"x": ""}, {"x": "2,500"}, {}]
    assert numeric_values(rows, "x") == [1.0, 2500.0]


@pytest.mark.unit
def test_indexed_numeric_values_keep_row_positions():
    rows = [{"x": "n/a"}, {"x": "5"}, {"x": ""}, {"x": "7"}]
    assert indexed_numeric_values(rows, "x") == [(1, 5.0), (3, 7.0)]


@pytest.mark.unit
def test_format_number():
    assert format_number(3.0) == "3"
    assert format_number(-12.0) == "-12"
    assert format_number(2.5) == "2.5"
