"""
Unit tests for descriptive statistics and correlation detection.
"""
import math
import sys
import pytest
from csvviz.core.schemas import Column
from csvviz.services.statistics import (
    calculate_correlation,
    calculate_numeric_stats,
    classify_correlation,
    detect_correlations,
    paired_values,
    pearson,
    scaled_mean,
)


def numeric_column(name: str) -> Column:
    return Column(name=name, type='numeric', sample_values=[])


@pytest.mark.unit
def test_numeric_stats_basic():
    stats = calculate_numeric_stats("score", [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])

    assert stats.column == "score"
    assert stats.count == 8
    assert stats.mean == 5.0
    assert stats.median == 4.5
    assert stats.min == 2.0
    assert stats.max == 9.0
    assert stats.total == 40.0
    # sample standard deviation: sqrt(32 / 7)
    assert stats.std_dev == pytest.approx(math.sqrt(32 / 7))


@pytest.mark.unit
def test_numeric_stats_empty_column():
    stats = calculate_numeric_stats("empty", [])

    assert stats.count == 0
    assert stats.mean == 0.0
    assert stats.median == 0.0
    assert stats.std_dev == 0.0
    assert stats.total == 0.0


@pytest.mark.unit
def test_numeric_stats_single_value():
    stats = calculate_numeric_stats("one", [42.0])
    assert stats.count == 1
    assert stats.mean == 42.0
    assert stats.std_dev == 0.0


@pytest.mark.unit
@pytest.mark.parametrize("coefficient,expected", [
    (1.0, 'strong_positive'),
    (0.7, 'strong_positive'),
    (0.69, 'moderate_positive'),
    (0.4, 'moderate_positive'),
    (0.1, 'weak_positive'),
    (0.05, 'none'),
    (-0.1, 'weak_negative'),
    (-0.4, 'weak_negative'),
    (-0.41, 'moderate_negative'),
    (-0.7, 'moderate_negative'),
    (-0.71, 'strong_negative'),
    (-1.0, 'strong_negative'),
])
def test_classify_correlation_bands(coefficient, expected):
    assert classify_correlation(coefficient) == expected


@pytest.mark.unit
def test_pearson_perfect_and_inverse():
    assert pearson([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)
    assert pearson([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)


@pytest.mark.unit
def test_pearson_zero_variance_is_none():
    assert pearson([1, 2, 3], [5, 5, 5]) is None


@pytest.mark.unit
def test_pearson_is_symmetric():
    x = [1.0, 3.0, 2.0, 5.0, 4.0]
    y = [2.0, 1.0, 4.0, 3.0, 6.0]
    assert pearson(x, y) == pytest.approx(pearson(y, x))


@pytest.mark.unit
def test_calculate_correlation_needs_three_pairs():
    assert calculate_correlation("a", [1.0, 2.0], "b", [2.0, 4.0]) is None


@pytest.mark.unit
def test_calculate_correlation_rejects_non_finite():
    assert calculate_correlation("a", [1.0, 2.0, float('nan')], "b", [1.0, 2.0, 3.0]) is None


@pytest.mark.unit
def test_calculate_correlation_description():
    corr = calculate_correlation("ads", [1.0, 2.0, 3.0, 4.0], "sales", [10.0, 20.0, 30.0, 40.0])

    assert corr is not None
    assert corr.strength == 'strong_positive'
    assert corr.column1 == "ads"
    assert corr.column2 == "sales"
    assert "ads" in corr.description and "sales" in corr.description


@pytest.mark.unit
def test_paired_values_are_row_aligned():
    rows = [
        {"x": "1", "y": "10"},
        {"x": "", "y": "20"},
        {"x": "3", "y": "n/a"},
        {"x": "4", "y": "40"},
    ]
    assert paired_values(rows, "x", "y") == ([1.0, 4.0], [10.0, 40.0])


@pytest.mark.unit
def test_detect_correlations_one_record_per_pair():
    rows = [
        {"a": str(i), "b": str(i * 2), "c": str(100 - i * 3)}
        for i in range(10)
    ]
    columns = [numeric_column("a"), numeric_column("b"), numeric_column("c")]

    correlations = detect_correlations(columns, rows)

    pairs = [(c.column1, c.column2) for c in correlations]
    assert len(pairs) == 3
    assert len({frozenset(p) for p in pairs}) == 3
    assert all(c.column1 != c.column2 for c in correlations)


@pytest.mark.unit
def test_detect_correlations_drops_none_and_sorts_by_strength():
    rows = [
        {"x": "1", "strong": "2", "weak": "5", "flat": "3"},
        {"x": "2", "strong": "4", "weak": "1", "flat": "3"},
        {"x": "3", "strong": "7", "weak": "4", "flat": "3"},
        {"x": "4", "strong": "8", "weak": "2", "flat": "3"},
        {"x": "5", "strong": "10", "weak": "6", "flat": "3"},
    ]
    columns = [numeric_column(n) for n in ["x", "strong", "weak", "flat"]]

    correlations = detect_correlations(columns, rows)

    assert all(c.strength != 'none' for c in correlations)
    assert all("flat" not in (c.column1, c.column2) for c in correlations)
    magnitudes = [abs(c.coefficient) for c in correlations]
    assert magnitudes == sorted(magnitudes, reverse=True)
    assert (correlations[0].column1, correlations[0].column2) == ("x", "strong")


@pytest.mark.unit
def test_detect_correlations_bounded_by_pair_count():
    """Eight numeric columns give at most 28 pair records."""
    names = [f"c{i}" for i in range(8)]
    rows = [
        {name: str((i + 1) * (j + 1) + (i * j) % 5) for j, name in enumerate(names)}
        for i in range(12)
    ]

    correlations = detect_correlations([numeric_column(n) for n in names], rows)

    assert len(correlations) <= 28
    for corr in correlations:
        assert -1.0 <= corr.coefficient <= 1.0
        assert math.isfinite(corr.coefficient)


@pytest.mark.unit
def test_numeric_stats_near_float_limit_stay_finite():
    values = [1.0e308, 1.2e308, 1.4e308, 1.5e308, 1.6e308, 1.7e308]

    stats = calculate_numeric_stats("huge", values)

    assert stats.count == 6
    assert stats.mean == pytest.approx(1.4e308)
    assert stats.median == pytest.approx(1.45e308)
    assert math.isfinite(stats.std_dev) and stats.std_dev > 0
    # the true total is beyond float range and saturates
    assert stats.total == sys.float_info.max


@pytest.mark.unit
def test_numeric_stats_opposite_extremes():
    stats = calculate_numeric_stats("wide", [-1e308, 1e308, 0.0, 1.0, 2.0, 3.0])

    for value in (stats.mean, stats.median, stats.std_dev, stats.total):
        assert math.isfinite(value)
    assert stats.total == pytest.approx(6.0)


@pytest.mark.unit
def test_scaled_mean():
    assert scaled_mean([1.0, 2.0, 6.0]) == 3.0
    assert scaled_mean([1.7e308, 1.7e308]) == pytest.approx(1.7e308)
