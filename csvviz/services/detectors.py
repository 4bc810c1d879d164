"""
Outlier and trend detection over single numeric columns.

Both detectors return "no finding" (an empty list or None) on samples that
are too small or have no spread, so NaN or Infinity never reach a result.
"""
import logging
import numpy as np
from typing import Dict, List, Optional
from csvviz.core.schemas import Outlier, Trend, TrendDirection
from csvviz.services.coercion import indexed_numeric_values, numeric_values

logger = logging.getLogger(__name__)

OUTLIER_MIN_VALUES = 5
OUTLIER_Z_THRESHOLD = 2.5
MAX_OUTLIERS_PER_COLUMN = 10

TREND_MIN_VALUES = 5
VOLATILITY_THRESHOLD = 0.5
TREND_CHANGE_THRESHOLD = 10.0  # percent


def is_outlier(z_score: float) -> bool:
    return abs(z_score) >= OUTLIER_Z_THRESHOLD


def detect_outliers(column: str, rows: List[Dict[str, str]]) -> List[Outlier]:
    """
    Flag values at least 2.5 sample standard deviations from the mean.

    Returns the ten most extreme, largest |z| first. Each outlier keeps the
    row index it came from so the UI can point back at it.
    """
    indexed = indexed_numeric_values(rows, column)
    if len(indexed) < OUTLIER_MIN_VALUES:
        return []

    values = np.asarray([value for _, value in indexed], dtype=float)
    mean = float(values.mean())
    std_dev = float(values.std(ddof=1))

    if std_dev == 0 or not np.isfinite(std_dev):
        logger.debug(f"No spread in {column}, skipping outlier detection")
        return []

    outliers = []
    for index, value in indexed:
        z_score = (value - mean) / std_dev
        if not is_outlier(z_score):
            continue

        if z_score > 0:
            kind = 'high'
            description = (
                f"Value {value:.2f} in {column} at row {index + 1} is unusually high "
                f"({z_score:.1f} standard deviations above average)"
            )
        else:
            kind = 'low'
            description = (
                f"Value {value:.2f} in {column} at row {index + 1} is unusually low "
                f"({abs(z_score):.1f} standard deviations below average)"
            )

        outliers.append(Outlier(
            column=column,
            value=value,
            index=index,
            type=kind,
            z_score=abs(z_score),
            description=description,
        ))

    outliers.sort(key=lambda o: o.z_score, reverse=True)
    return outliers[:MAX_OUTLIERS_PER_COLUMN]


def classify_trend(percent_change: float, volatility: float) -> TrendDirection:
    # volatility wins over any direction
    if volatility > VOLATILITY_THRESHOLD:
        return 'volatile'
    if percent_change > TREND_CHANGE_THRESHOLD:
        return 'increasing'
    if percent_change < -TREND_CHANGE_THRESHOLD:
        return 'decreasing'
    return 'stable'


def detect_trend(date_column: str, value_column: str, rows: List[Dict[str, str]]) -> Optional[Trend]:
    """
    Compare the mean of the first half of a column with the second half.

    Rows are taken in the order given and assumed to already be in
    chronological order; the date column only labels the finding and is
    not parsed or sorted.
    """
    values = numeric_values(rows, value_column)
    if len(values) < TREND_MIN_VALUES:
        return None

    arr = np.asarray(values, dtype=float)
    midpoint = len(arr) // 2
    first_avg = float(arr[:midpoint].mean())
    second_avg = float(arr[midpoint:].mean())
    overall_mean = float(arr.mean())
    overall_std = float(arr.std(ddof=1))

    percent_change = (second_avg - first_avg) / abs(first_avg or 1) * 100
    volatility = overall_std / abs(overall_mean or 1)

    if not (np.isfinite(percent_change) and np.isfinite(volatility)):
        return None

    direction = classify_trend(percent_change, volatility)

    if direction == 'volatile':
        description = f"{value_column} shows high variability over time with frequent ups and downs."
    elif direction == 'increasing':
        description = (
            f"{value_column} shows a clear upward trend over time, "
            f"increasing by approximately {percent_change:.1f}%."
        )
    elif direction == 'decreasing':
        description = (
            f"{value_column} shows a downward trend over time, "
            f"decreasing by approximately {abs(percent_change):.1f}%."
        )
    else:
        description = f"{value_column} remains relatively stable over time with minimal overall change."

    return Trend(
        date_column=date_column,
        value_column=value_column,
        direction=direction,
        rate_of_change=percent_change,
        description=description,
    )
