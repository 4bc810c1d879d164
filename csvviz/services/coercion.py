"""
Numeric coercion for raw string cells.

Cells arrive as strings straight from the upload. A cell that cannot be
read as a finite number is reported as ``None`` and is left out of every
numeric aggregate; it is never turned into zero here.
"""
import math
import re
from typing import Dict, List, Optional, Tuple

# Longest leading float literal, the same prefix a browser's parseFloat accepts:
# "12.5kg" -> 12.5, "2024-01-15" -> 2024, "abc" -> no match.
_FLOAT_PREFIX = re.compile(
    r'[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)',
    re.ASCII,
)

_CURRENCY_AND_SPACE = re.compile(r'[$€£¥\s]')

# "1.234,56" / "1.234" / "12,5" use '.' for thousands and ',' for decimals
_EUROPEAN_GROUPED = re.compile(r'-?\d{1,3}(\.\d{3})+(,\d+)?', re.ASCII)
_EUROPEAN_DECIMAL = re.compile(r'-?\d+,\d+', re.ASCII)


def parse_float(text: str) -> Optional[float]:
    """Parse the leading float literal of ``text``; None unless finite."""
    match = _FLOAT_PREFIX.match(text.lstrip())
    if not match:
        return None
    try:
        number = float(match.group(0).replace('Infinity', 'inf'))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def to_float(value: Optional[str]) -> Optional[float]:
    """
    Coerce one cell, treating every comma as a thousands separator.

    This is the coercion the analysis engine uses for type inference,
    statistics, detectors and charts.
    """
    if value is None:
        return None
    return parse_float(str(value).replace(',', ''))


def to_float_localized(value: Optional[str]) -> Optional[float]:
    """
    Coerce a cell that may carry currency symbols, a percent suffix or
    European separators ("€1.234,56", "12,5%", "$1,200").
    """
    if value is None:
        return None

    cleaned = _CURRENCY_AND_SPACE.sub('', str(value))
    if cleaned.endswith('%'):
        cleaned = cleaned[:-1]

    if _EUROPEAN_GROUPED.fullmatch(cleaned) or _EUROPEAN_DECIMAL.fullmatch(cleaned):
        cleaned = cleaned.replace('.', '').replace(',', '.', 1)
    else:
        cleaned = cleaned.replace(',', '')

    return parse_float(cleaned)


def cell(row: Dict[str, str], column: str) -> str:
    """Raw cell text, with missing or null cells read as ''."""
    value = row.get(column)
    return value if value else ''


def numeric_values(rows: List[Dict[str, str]], column: str) -> List[float]:
    """Coerced values of ``column`` in row order, failures dropped."""
    values = []
    for row in rows:
        number = to_float(cell(row, column))
        if number is not None:
            values.append(number)
    return values


def indexed_numeric_values(rows: List[Dict[str, str]], column: str) -> List[Tuple[int, float]]:
    """Like numeric_values but keeps each value's original row index."""
    values = []
    for index, row in enumerate(rows):
        number = to_float(cell(row, column))
        if number is not None:
            values.append((index, number))
    return values


def format_number(number: float) -> str:
    """Canonical text for a coerced number ("1234", "1234.56")."""
    if number.is_integer():
        return str(int(number))
    return repr(number)
