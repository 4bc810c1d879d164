"""
Unit tests for insight generation.
"""
import pytest
from csvviz.core.schemas import Correlation, NumericStats, Outlier, Trend
from csvviz.services.insights import (
    MAX_INSIGHTS,
    correlation_insights,
    generate_insights,
    outlier_insights,
    trend_insights,
    variability_insights,
)


def make_trend(direction: str, column: str = "revenue") -> Trend:
    return Trend(
        date_column="date",
        value_column=column,
        direction=direction,
        rate_of_change=25.0,
        description=f"{column} is {direction}",
    )


def make_correlation(strength: str, a: str = "a", b: str = "b") -> Correlation:
    return Correlation(column1=a, column2=b, coefficient=0.8, strength=strength, description=f"{a}/{b}")


def make_outlier(column: str, kind: str, z_score: float) -> Outlier:
    return Outlier(column=column, value=1.0, index=0, type=kind, z_score=z_score, description="")


def make_stats(column: str, mean: float, std_dev: float) -> NumericStats:
    return NumericStats(
        column=column, mean=mean, median=mean, min=0.0, max=0.0,
        std_dev=std_dev, total=0.0, count=10,
    )


@pytest.mark.unit
def test_trend_insights():
    insights = trend_insights([
        make_trend('increasing'),
        make_trend('decreasing'),
        make_trend('volatile'),
        make_trend('stable'),
    ])

    assert len(insights) == 3
    up, down, volatile = insights
    assert (up.type, up.icon, up.importance) == ('trend', 'trending-up', 'high')
    assert (down.type, down.icon, down.importance) == ('trend', 'trending-down', 'high')
    assert (volatile.type, volatile.icon, volatile.importance) == ('pattern', 'activity', 'medium')
    assert up.description == "revenue is increasing"


@pytest.mark.unit
def test_correlation_insights_skip_weak():
    insights = correlation_insights([
        make_correlation('strong_negative'),
        make_correlation('moderate_positive'),
        make_correlation('weak_positive'),
    ])

    assert [i.importance for i in insights] == ['high', 'medium']
    assert all(i.type == 'correlation' and i.icon == 'target' for i in insights)
    assert insights[0].title == "Strong Correlation Found"


@pytest.mark.unit
def test_outlier_insights_grouped_per_column():
    insights = outlier_insights([
        make_outlier("price", 'high', 2.7),
        make_outlier("qty", 'low', 3.5),
        make_outlier("price", 'low', 2.6),
    ])

    assert [i.title for i in insights] == ["Outliers Detected in price", "Outliers Detected in qty"]

    price, qty = insights
    assert price.importance == 'medium'
    assert "Found 2 outliers in price" in price.description
    assert "1 unusually high, 1 unusually low" in price.description

    assert qty.importance == 'high'
    assert "Found 1 outlier in qty" in qty.description
    assert "unusually low values" in qty.description


@pytest.mark.unit
def test_outlier_severity_boundary():
    """A z-score of exactly 3 is not severe."""
    assert outlier_insights([make_outlier("x", 'high', 3.0)])[0].importance == 'medium'
    assert outlier_insights([make_outlier("x", 'high', 3.01)])[0].importance == 'high'


@pytest.mark.unit
def test_variability_insights():
    insights = variability_insights([
        make_stats("spiky", mean=10.0, std_dev=25.0),
        make_stats("calm", mean=10.0, std_dev=2.0),
        make_stats("centered", mean=0.0, std_dev=1.5),
    ])

    assert [i.title for i in insights] == ["High Variability in spiky", "High Variability in centered"]
    assert "(250%)" in insights[0].description
    assert all(i.type == 'statistic' and i.importance == 'medium' for i in insights)


@pytest.mark.unit
def test_generate_insights_rule_order():
    insights = generate_insights(
        columns=[],
        numeric_stats=[make_stats("spiky", mean=1.0, std_dev=5.0)],
        correlations=[make_correlation('strong_positive')],
        trends=[make_trend('increasing')],
        outliers=[make_outlier("x", 'high', 2.6)],
    )

    assert [i.type for i in insights] == ['trend', 'correlation', 'outlier', 'statistic']


@pytest.mark.unit
def test_generate_insights_truncates_to_ten():
    """Truncation keeps the earliest rules, so later findings drop first."""
    correlations = [make_correlation('strong_positive', f"a{i}", f"b{i}") for i in range(12)]
    outliers = [make_outlier("x", 'high', 5.0)]

    insights = generate_insights([], [], correlations, [make_trend('increasing')], outliers)

    assert len(insights) == MAX_INSIGHTS
    assert insights[0].type == 'trend'
    assert all(i.type != 'outlier' for i in insights)


@pytest.mark.unit
def test_generate_insights_empty():
    assert generate_insights([], [], [], [], []) == []


@pytest.mark.unit
def test_variability_skipped_when_percentage_overflows():
    insights = variability_insights([make_stats("huge", mean=1e-10, std_dev=1e300)])
    assert insights == []
