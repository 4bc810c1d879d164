import logging
import re
import pandas as pd
from typing import Dict, Iterable, List, Optional
from csvviz.core.schemas import Column, ColumnType, DataQuality, MissingColumn
from csvviz.services.coercion import cell, to_float

logger = logging.getLogger(__name__)

# Type inference looks at no more than this many non-empty values
TYPE_SAMPLE_SIZE = 100
# Share of the sample that must match a type for the column to take it
TYPE_THRESHOLD = 0.7
CATEGORICAL_MAX_DISTINCT = 20
CATEGORICAL_MAX_RATIO = 0.3
# Raw values kept on each column for UI previews
PREVIEW_SIZE = 5

BOOLEAN_TOKENS = frozenset({'true', 'false', 'yes', 'no', '1', '0'})

DATE_PATTERNS = [
    re.compile(r'\d{4}-\d{2}-\d{2}', re.ASCII),          # 2024-01-31
    re.compile(r'\d{2}/\d{2}/\d{4}', re.ASCII),          # 01/31/2024
    re.compile(r'\d{2}-\d{2}-\d{4}', re.ASCII),          # 01-31-2024
    re.compile(r'\d{4}/\d{2}/\d{2}', re.ASCII),          # 2024/01/31
    re.compile(r'\d{1,2}/\d{1,2}/\d{2,4}', re.ASCII),    # 1/31/24
    re.compile(r'\w{3}\s+\d{1,2},?\s+\d{4}', re.ASCII),  # Jan 31, 2024
]


def is_boolean_like(value: str) -> bool:
    return value.strip().lower() in BOOLEAN_TOKENS


def is_date_like(value: str) -> bool:
    normalized = value.strip().lower()
    return any(pattern.fullmatch(normalized) for pattern in DATE_PATTERNS)


def is_numeric_like(value: str) -> bool:
    return to_float(value) is not None


def detect_column_type(values: Iterable[Optional[str]]) -> ColumnType:
    """
    Classify a column from its raw cell strings.

    The first 100 non-empty values are tested independently for being
    boolean-like, numeric-like and date-like. A type wins when at least 70%
    of the sample matches it, checked in the order date, boolean, numeric.
    Otherwise the column is categorical when it has few distinct values
    (at most 20, and at most 30% of the sample), else free text.
    """
    non_empty = [v for v in values if v is not None and v != '']
    if not non_empty:
        return 'text'

    sample = non_empty[:TYPE_SAMPLE_SIZE]
    sample_size = len(sample)

    boolean_count = sum(1 for v in sample if is_boolean_like(v))
    numeric_count = sum(1 for v in sample if is_numeric_like(v))
    date_count = sum(1 for v in sample if is_date_like(v))

    threshold = sample_size * TYPE_THRESHOLD

    if date_count >= threshold:
        return 'date'
    if boolean_count >= threshold:
        return 'boolean'
    if numeric_count >= threshold:
        return 'numeric'

    if len(set(sample)) <= min(CATEGORICAL_MAX_DISTINCT, sample_size * CATEGORICAL_MAX_RATIO):
        return 'categorical'

    return 'text'


def column_values(rows: List[Dict[str, str]], column: str) -> List[str]:
    return [cell(row, column) for row in rows]


def profile_columns(
    headers: List[str],
    rows: List[Dict[str, str]],
    identifier_columns: Optional[Iterable[str]] = None,
) -> List[Column]:
    """Infer a type and basic profile for every header, in header order."""
    identifiers = set(identifier_columns or [])
    row_count = len(rows)
    columns = []

    for header in headers:
        values = column_values(rows, header)
        present = [v for v in values if v.strip()]
        missing_count = row_count - len(present)
        cardinality = len(set(present))

        columns.append(Column(
            name=header,
            type=detect_column_type(values),
            sample_values=values[:PREVIEW_SIZE],
            missing_count=missing_count,
            missing_percent=_percent(missing_count, row_count),
            cardinality=cardinality,
            unique_percent=_percent(cardinality, row_count),
            is_identifier=header in identifiers,
        ))

    return columns


def profile_data_quality(headers: List[str], rows: List[Dict[str, str]]) -> DataQuality:
    """Count duplicate rows and per-column missing cells."""
    row_count = len(rows)
    if row_count == 0 or not headers:
        return DataQuality(total_rows=row_count, duplicate_rows=0)

    df = pd.DataFrame(rows, columns=headers).fillna('').astype(str)

    duplicate_rows = int(df.duplicated(keep='first').sum())

    missing = df.apply(lambda series: series.str.strip().eq('')).sum()
    columns_with_missing = [
        MissingColumn(
            column=header,
            missing_count=int(missing.iloc[position]),
            missing_percent=_percent(int(missing.iloc[position]), row_count),
        )
        for position, header in enumerate(headers)
        if missing.iloc[position] > 0
    ]

    if duplicate_rows:
        logger.debug(f"Found {duplicate_rows} duplicate rows")

    return DataQuality(
        total_rows=row_count,
        duplicate_rows=duplicate_rows,
        columns_with_missing=columns_with_missing,
    )


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0
