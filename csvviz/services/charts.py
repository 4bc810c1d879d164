"""
Chart payload generation.

Picks charts from column type combinations with fixed rules, in this
priority order: time series, category aggregates, scatter, histograms.
Each chart carries its own materialized, size-bounded data records.
"""
import logging
import math
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional
from csvviz.core.schemas import ChartConfig, Column
from csvviz.services.coercion import cell, numeric_values, to_float
from csvviz.services.statistics import scaled_mean

logger = logging.getLogger(__name__)

MAX_CHARTS = 6
TIME_SERIES_NUMERIC_COLUMNS = 2
CATEGORY_COLUMNS = 2
CATEGORY_NUMERIC_COLUMNS = 1
MAX_CATEGORY_GROUPS = 15
MAX_SCATTER_POINTS = 200
MIN_SCATTER_POINTS = 6
HISTOGRAM_COLUMNS = 2
HISTOGRAM_MIN_VALUES = 5
MAX_HISTOGRAM_BINS = 15
UNKNOWN_CATEGORY = "Unknown"

_TENTH = Decimal("0.1")
# enough digits to quantize any finite float
_WIDE = Context(prec=400)


def _series_value(row: Dict[str, str], column: str) -> Optional[float]:
    # empty cells plot as 0 to keep series aligned with their x values
    return to_float(cell(row, column) or '0')


def time_series_data(rows: List[Dict[str, str]], date_column: str, value_column: str) -> List[Dict[str, Any]]:
    data = []
    for row in rows:
        value = _series_value(row, value_column)
        if value is not None:
            data.append({date_column: cell(row, date_column), value_column: value})
    return data


def category_average_data(rows: List[Dict[str, str]], category_column: str, value_column: str) -> List[Dict[str, Any]]:
    """Mean of ``value_column`` per category, groups in first-seen order."""
    groups: Dict[str, List[float]] = {}
    for row in rows:
        value = _series_value(row, value_column)
        if value is None:
            continue
        category = cell(row, category_column) or UNKNOWN_CATEGORY
        groups.setdefault(category, []).append(value)

    data = [
        {category_column: category, value_column: scaled_mean(values)}
        for category, values in groups.items()
    ]
    return data[:MAX_CATEGORY_GROUPS]


def scatter_data(rows: List[Dict[str, str]], x_column: str, y_column: str) -> List[Dict[str, Any]]:
    data = []
    for row in rows:
        x = _series_value(row, x_column)
        y = _series_value(row, y_column)
        if x is not None and y is not None:
            data.append({x_column: x, y_column: y})
    return data[:MAX_SCATTER_POINTS]


def _fixed(number: float) -> str:
    # one decimal, ties rounded away from zero on the exact binary value
    return str(Decimal(number).quantize(_TENTH, rounding=ROUND_HALF_UP, context=_WIDE))


def histogram_data(values: List[float]) -> Optional[List[Dict[str, Any]]]:
    """
    Fixed-width bins over [min, max], labelled "start-end".

    Returns None for too few values, a constant column, or a range too
    wide to represent as a float. The maximum value falls in the last bin.
    """
    if len(values) < HISTOGRAM_MIN_VALUES:
        return None

    low, high = min(values), max(values)
    bin_count = min(MAX_HISTOGRAM_BINS, math.ceil(math.sqrt(len(values))))
    bin_width = (high - low) / bin_count
    if bin_width == 0 or not math.isfinite(bin_width):
        return None

    def label(index: int) -> str:
        start = low + index * bin_width
        end = start + bin_width
        if not math.isfinite(end):
            end = high
        return f"{_fixed(start)}-{_fixed(end)}"

    bins: Dict[str, int] = {label(i): 0 for i in range(bin_count)}
    for value in values:
        index = min(int(math.floor((value - low) / bin_width)), bin_count - 1)
        key = label(index)
        bins[key] = bins.get(key, 0) + 1

    return [{"range": key, "count": count} for key, count in bins.items()]


def generate_charts(columns: List[Column], rows: List[Dict[str, str]]) -> List[ChartConfig]:
    """
    Build at most six charts from the column types.

    Ids are assigned as ``chart-{n}`` across all phases before the list is
    cut to six, so later phases can be dropped when earlier ones fill it.
    """
    charts: List[ChartConfig] = []

    date_columns = [c for c in columns if c.type == 'date']
    numeric_columns = [c for c in columns if c.type == 'numeric']
    categorical_columns = [c for c in columns if c.type == 'categorical']

    def add(chart_type: str, title: str, x_axis: str, y_axis: str, data: List[Dict[str, Any]]):
        charts.append(ChartConfig(
            id=f"chart-{len(charts)}",
            type=chart_type,
            title=title,
            x_axis=x_axis,
            y_axis=y_axis,
            data=data,
        ))

    # 1. Time series
    for date_col in date_columns:
        for num_col in numeric_columns[:TIME_SERIES_NUMERIC_COLUMNS]:
            data = time_series_data(rows, date_col.name, num_col.name)
            if len(data) > 2:
                add('line', f"{num_col.name} Over Time", date_col.name, num_col.name, data)

    # 2. Category averages
    for cat_col in categorical_columns[:CATEGORY_COLUMNS]:
        for num_col in numeric_columns[:CATEGORY_NUMERIC_COLUMNS]:
            data = category_average_data(rows, cat_col.name, num_col.name)
            if len(data) > 1:
                add('bar', f"{num_col.name} by {cat_col.name}", cat_col.name, num_col.name, data)

    # 3. Scatter of the first two numeric columns
    if len(numeric_columns) >= 2:
        x_col, y_col = numeric_columns[0], numeric_columns[1]
        data = scatter_data(rows, x_col.name, y_col.name)
        if len(data) >= MIN_SCATTER_POINTS:
            add('scatter', f"{x_col.name} vs {y_col.name}", x_col.name, y_col.name, data)

    # 4. Histograms
    for num_col in numeric_columns[:HISTOGRAM_COLUMNS]:
        data = histogram_data(numeric_values(rows, num_col.name))
        if data is not None:
            add('histogram', f"Distribution of {num_col.name}", 'range', 'count', data)

    if len(charts) > MAX_CHARTS:
        logger.debug(f"Dropping {len(charts) - MAX_CHARTS} charts over the limit")

    return charts[:MAX_CHARTS]
