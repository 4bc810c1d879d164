"""
Natural language insights generation.

Turns trend, correlation, outlier and statistics findings into short
insight records with an importance tier.
"""
import logging
import math
from typing import Dict, List
from csvviz.core.schemas import Column, Correlation, Insight, NumericStats, Outlier, Trend

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 10
HIGH_VARIABILITY_CV = 1.0
SEVERE_OUTLIER_Z = 3.0


def trend_insights(trends: List[Trend]) -> List[Insight]:
    insights = []
    for trend in trends:
        if trend.direction == 'increasing':
            insights.append(Insight(
                type='trend',
                icon='trending-up',
                title="Upward Trend Detected",
                description=trend.description,
                importance='high',
            ))
        elif trend.direction == 'decreasing':
            insights.append(Insight(
                type='trend',
                icon='trending-down',
                title="Downward Trend Detected",
                description=trend.description,
                importance='high',
            ))
        elif trend.direction == 'volatile':
            insights.append(Insight(
                type='pattern',
                icon='activity',
                title="High Variability",
                description=trend.description,
                importance='medium',
            ))
    return insights


def correlation_insights(correlations: List[Correlation]) -> List[Insight]:
    insights = []
    for corr in correlations:
        if corr.strength in ('strong_positive', 'strong_negative'):
            insights.append(Insight(
                type='correlation',
                icon='target',
                title="Strong Correlation Found",
                description=corr.description,
                importance='high',
            ))
        elif corr.strength in ('moderate_positive', 'moderate_negative'):
            insights.append(Insight(
                type='correlation',
                icon='target',
                title="Moderate Correlation",
                description=corr.description,
                importance='medium',
            ))
    return insights


def outlier_insights(outliers: List[Outlier]) -> List[Insight]:
    """One insight per column that has outliers, in first-seen column order."""
    by_column: Dict[str, List[Outlier]] = {}
    for outlier in outliers:
        by_column.setdefault(outlier.column, []).append(outlier)

    insights = []
    for column, column_outliers in by_column.items():
        high_count = sum(1 for o in column_outliers if o.type == 'high')
        low_count = sum(1 for o in column_outliers if o.type == 'low')
        total = len(column_outliers)

        description = f"Found {total} outlier{'' if total == 1 else 's'} in {column}"
        if high_count and low_count:
            description += f" ({high_count} unusually high, {low_count} unusually low)"
        elif high_count:
            description += " with unusually high values"
        else:
            description += " with unusually low values"
        description += ". These data points may warrant further investigation."

        severe = any(o.z_score > SEVERE_OUTLIER_Z for o in column_outliers)
        insights.append(Insight(
            type='outlier',
            icon='zap',
            title=f"Outliers Detected in {column}",
            description=description,
            importance='high' if severe else 'medium',
        ))
    return insights


def variability_insights(numeric_stats: List[NumericStats]) -> List[Insight]:
    insights = []
    for stat in numeric_stats:
        cv = stat.std_dev / abs(stat.mean or 1)
        # a near-zero mean beside a huge spread has no printable percentage
        if not math.isfinite(cv * 100):
            continue
        if cv > HIGH_VARIABILITY_CV:
            insights.append(Insight(
                type='statistic',
                icon='zap',
                title=f"High Variability in {stat.column}",
                description=(
                    f"{stat.column} has a high coefficient of variation ({cv * 100:.0f}%), "
                    f"indicating significant spread in the data."
                ),
                importance='medium',
            ))
    return insights


def generate_insights(
    columns: List[Column],
    numeric_stats: List[NumericStats],
    correlations: List[Correlation],
    trends: List[Trend],
    outliers: List[Outlier],
) -> List[Insight]:
    """
    Build insights in a fixed rule order and keep the first ten.

    Order is trends, correlations, outliers, then variability. Truncation
    favours earlier rules and earlier columns; it is not a severity sort.
    """
    insights = (
        trend_insights(trends)
        + correlation_insights(correlations)
        + outlier_insights(outliers)
        + variability_insights(numeric_stats)
    )

    if len(insights) > MAX_INSIGHTS:
        logger.debug(f"Truncating {len(insights)} insights to {MAX_INSIGHTS}")

    return insights[:MAX_INSIGHTS]
