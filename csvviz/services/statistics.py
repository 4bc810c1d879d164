"""
Descriptive statistics and pairwise correlation for numeric columns.
"""
import logging
import math
import sys
import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple
from csvviz.core.schemas import Column, Correlation, CorrelationStrength, NumericStats
from csvviz.services.coercion import cell, to_float

logger = logging.getLogger(__name__)

# Fewest row pairs a correlation is computed from
MIN_CORRELATION_PAIRS = 3

# Aggregates too large for a float (e.g. the total of several 1e308 values)
# are reported as the largest finite float of the same sign
FLOAT_MAX = sys.float_info.max

# (lower bound, inclusive?, band), checked top to bottom
CORRELATION_BANDS: List[Tuple[float, bool, CorrelationStrength]] = [
    (0.7, True, 'strong_positive'),
    (0.4, True, 'moderate_positive'),
    (0.1, True, 'weak_positive'),
    (-0.1, False, 'none'),
    (-0.4, True, 'weak_negative'),
    (-0.7, True, 'moderate_negative'),
]

CORRELATION_DESCRIPTIONS: Dict[str, str] = {
    'strong_positive': "Strong positive correlation between {a} and {b}. As {a} increases, {b} tends to increase significantly.",
    'moderate_positive': "Moderate positive correlation between {a} and {b}. There's a noticeable tendency for both to move together.",
    'weak_positive': "Weak positive correlation between {a} and {b} ({r:.2f}). The relationship is subtle.",
    'none': "No significant correlation between {a} and {b}. They appear to be independent.",
    'weak_negative': "Weak negative correlation between {a} and {b} ({r:.2f}). The inverse relationship is subtle.",
    'moderate_negative': "Moderate negative correlation between {a} and {b}. As one increases, the other tends to decrease.",
    'strong_negative': "Strong negative correlation between {a} and {b}. They move in opposite directions.",
}


def calculate_numeric_stats(column: str, values: Sequence[float]) -> NumericStats:
    """
    Summarize the coerced values of one column.

    An empty column yields zeros everywhere with count=0, so callers must
    look at ``count`` before trusting any of the other fields.
    """
    if not values:
        return NumericStats(
            column=column, mean=0.0, median=0.0, min=0.0, max=0.0,
            std_dev=0.0, total=0.0, count=0,
        )

    arr = np.asarray(values, dtype=float)
    scale = _power_of_two_scale(arr)
    scaled = arr / scale
    return NumericStats(
        column=column,
        mean=_bounded(float(scaled.mean()) * scale),
        median=_bounded(float(np.median(scaled)) * scale),
        min=float(arr.min()),
        max=float(arr.max()),
        std_dev=_bounded(float(scaled.std(ddof=1)) * scale) if len(arr) > 1 else 0.0,
        total=_bounded(float(scaled.sum()) * scale),
        count=len(arr),
    )


def _power_of_two_scale(arr: np.ndarray) -> float:
    # dividing by a power of two is exact, so ordinary columns are unaffected
    peak = float(np.max(np.abs(arr)))
    return math.ldexp(1.0, math.frexp(peak)[1] - 1)


def _bounded(value: float) -> float:
    """Clamp an aggregate whose true value is beyond float range."""
    return max(-FLOAT_MAX, min(FLOAT_MAX, value))


def scaled_mean(values: Sequence[float]) -> float:
    """Mean of finite values that cannot overflow, even near the float limit."""
    arr = np.asarray(values, dtype=float)
    scale = _power_of_two_scale(arr)
    return _bounded(float((arr / scale).mean()) * scale)


def classify_correlation(coefficient: float) -> CorrelationStrength:
    for bound, inclusive, band in CORRELATION_BANDS:
        if coefficient >= bound if inclusive else coefficient > bound:
            return band
    return 'strong_negative'


def pearson(x: Sequence[float], y: Sequence[float]) -> Optional[float]:
    """Sample Pearson coefficient, or None when either side has no variance."""
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denominator = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denominator == 0 or not np.isfinite(denominator):
        return None
    r = float(np.sum(dx * dy) / denominator)
    if not np.isfinite(r):
        return None
    return max(-1.0, min(1.0, r))


def paired_values(rows: List[Dict[str, str]], column1: str, column2: str) -> Tuple[List[float], List[float]]:
    """Row-aligned values of two columns, keeping rows where both coerce."""
    xs, ys = [], []
    for row in rows:
        x = to_float(cell(row, column1))
        y = to_float(cell(row, column2))
        if x is not None and y is not None:
            xs.append(x)
            ys.append(y)
    return xs, ys


def calculate_correlation(
    column1: str,
    values1: Sequence[float],
    column2: str,
    values2: Sequence[float],
) -> Optional[Correlation]:
    """
    Correlate two already-paired value lists.

    Returns None for fewer than three pairs, for degenerate (zero variance)
    input, and for any numeric failure; those mean "no finding".
    """
    if min(len(values1), len(values2)) < MIN_CORRELATION_PAIRS:
        return None

    try:
        r = pearson(values1, values2)
    except Exception as e:
        logger.debug(f"Correlation {column1}/{column2} skipped: {e}")
        return None

    if r is None:
        return None

    strength = classify_correlation(r)
    return Correlation(
        column1=column1,
        column2=column2,
        coefficient=r,
        strength=strength,
        description=CORRELATION_DESCRIPTIONS[strength].format(a=column1, b=column2, r=r),
    )


def detect_correlations(numeric_columns: List[Column], rows: List[Dict[str, str]]) -> List[Correlation]:
    """
    Correlate every unordered pair of numeric columns once.

    "none" pairs are dropped; the rest are ordered by |coefficient|,
    strongest first, ties kept in pair order.
    """
    correlations = []
    for i, first in enumerate(numeric_columns):
        for second in numeric_columns[i + 1:]:
            xs, ys = paired_values(rows, first.name, second.name)
            correlation = calculate_correlation(first.name, xs, second.name, ys)
            if correlation is not None and correlation.strength != 'none':
                correlations.append(correlation)

    correlations.sort(key=lambda c: abs(c.coefficient), reverse=True)
    return correlations
