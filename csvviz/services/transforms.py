"""
Data prep transforms applied before a re-analysis.

Column changes (exclude, rename, retype) and row changes (dedupe, missing
value handling) produce a brand new header list and row list; the input
rows are never modified. The result is analyzed from scratch.
"""
import logging
import numpy as np
import pandas as pd
from typing import Dict, Iterable, List, Optional, Tuple
from csvviz.core.schemas import AnalysisResult, DataPrepState
from csvviz.core.sanitization import validate_column_name
from csvviz.services.analysis import analyze_data
from csvviz.services.coercion import format_number, to_float, to_float_localized
from csvviz.services.profiler import detect_column_type

logger = logging.getLogger(__name__)

_TRUE_TOKENS = frozenset({'true', 'yes', '1'})
_FALSE_TOKENS = frozenset({'false', 'no', '0'})


class TransformError(ValueError):
    """A data prep request that cannot be applied to this table."""


class EmptyTableError(TransformError):
    """The transforms left no columns or no rows to analyze."""


def _normalize_number(value: str) -> str:
    if not value.strip():
        return value
    number = to_float_localized(value)
    return value if number is None else format_number(number)


def _normalize_boolean(value: str) -> str:
    token = value.strip().lower()
    if token in _TRUE_TOKENS:
        return 'true'
    if token in _FALSE_TOKENS:
        return 'false'
    return value


def _is_blank(series: pd.Series) -> pd.Series:
    return series.str.strip().eq('')


def _resolve_columns(headers: List[str], state: DataPrepState) -> Dict[str, str]:
    """Map each kept original header to its final name, validating renames."""
    transforms = {t.original_name: t for t in state.column_transforms}

    unknown = [name for name in transforms if name not in headers]
    if unknown:
        raise TransformError(f"Unknown column(s): {', '.join(unknown)}")

    mapping: Dict[str, str] = {}
    for header in headers:
        transform = transforms.get(header)
        if transform is None:
            mapping[header] = header
            continue
        if transform.excluded:
            continue
        new_name = transform.new_name.strip()
        if not validate_column_name(new_name):
            raise TransformError(f"Invalid name for column '{header}'")
        mapping[header] = new_name

    final_names = list(mapping.values())
    duplicates = sorted({name for name in final_names if final_names.count(name) > 1})
    if duplicates:
        raise TransformError(f"Duplicate column name(s): {', '.join(duplicates)}")

    return mapping


def apply_transforms(
    headers: List[str],
    rows: List[Dict[str, str]],
    state: DataPrepState,
) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Apply a data prep state and return the new (headers, rows).

    Steps run in a fixed order: drop excluded columns, rename, normalize
    retyped values, remove duplicate rows, then handle missing values.

    Raises:
        TransformError: unknown column, blank or clashing new names
    """
    mapping = _resolve_columns(headers, state)
    new_headers = list(mapping.values())

    df = pd.DataFrame(rows, columns=headers).fillna('').astype(str)
    df = df[list(mapping.keys())].rename(columns=mapping)

    for transform in state.column_transforms:
        if transform.excluded:
            continue
        name = mapping[transform.original_name]
        if transform.new_type == 'numeric':
            df[name] = df[name].map(_normalize_number)
        elif transform.new_type == 'boolean':
            df[name] = df[name].map(_normalize_boolean)

    row_transform = state.row_transform

    if row_transform.remove_duplicates:
        before = len(df)
        df = df.drop_duplicates(keep='first')
        logger.debug(f"Removed {before - len(df)} duplicate rows")

    action = row_transform.missing_value_action
    if action == 'remove_rows' and new_headers:
        df = df[~df.apply(_is_blank).any(axis=1)]
    elif action in ('fill_zero', 'fill_mean'):
        for name in new_headers:
            blank = _is_blank(df[name])
            if not blank.any() or detect_column_type(df[name].tolist()) != 'numeric':
                continue
            if action == 'fill_zero':
                fill = '0'
            else:
                values = [v for v in (to_float(x) for x in df[name]) if v is not None]
                fill = format_number(float(np.mean(values)))
            df.loc[blank, name] = fill

    return new_headers, df.to_dict(orient='records')


def reanalyze(
    headers: List[str],
    rows: List[Dict[str, str]],
    file_name: str,
    state: DataPrepState,
    unique_column_names: Optional[Iterable[str]] = None,
) -> AnalysisResult:
    """
    Apply data prep transforms, then run a fresh analysis on the result.

    Identifier columns are followed through renames; excluded ones drop out.

    Raises:
        TransformError: the state does not fit the table
        EmptyTableError: nothing is left to analyze
    """
    new_headers, new_rows = apply_transforms(headers, rows, state)
    if not new_headers or not new_rows:
        raise EmptyTableError("No data is left after your changes.")

    mapping = _resolve_columns(headers, state)
    identifiers = [mapping[name] for name in (unique_column_names or []) if name in mapping]

    return analyze_data(new_headers, new_rows, file_name, identifiers)
