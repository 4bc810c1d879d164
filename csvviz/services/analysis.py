"""
Analysis orchestrator.

Runs the whole engine over one parsed table: type inference, statistics,
correlations, trends, outliers, insights and charts. The function is
stateless; the same input always gives the same result, which the
transform-then-reanalyze workflow relies on.
"""
import logging
from typing import Dict, Iterable, List, Optional
from csvviz.core.schemas import AnalysisResult, Column
from csvviz.core.performance import track_performance
from csvviz.core.sanitization import sanitize_for_logging
from csvviz.services.charts import generate_charts
from csvviz.services.coercion import numeric_values
from csvviz.services.detectors import detect_outliers, detect_trend
from csvviz.services.insights import generate_insights
from csvviz.services.profiler import profile_columns, profile_data_quality
from csvviz.services.statistics import calculate_numeric_stats, detect_correlations

logger = logging.getLogger(__name__)

MAX_CORRELATIONS = 5
TREND_NUMERIC_COLUMNS = 3


@track_performance("analyze_data")
def analyze_data(
    headers: List[str],
    rows: List[Dict[str, str]],
    file_name: str,
    unique_column_names: Optional[Iterable[str]] = None,
) -> AnalysisResult:
    """
    Analyze a parsed table.

    Args:
        headers: Column names, in display order
        rows: One dict per row keyed by the exact header strings; missing
            cells are ''
        file_name: Name reported back in the result
        unique_column_names: Identifier columns (order IDs, emails, ...).
            They are still profiled and listed, but left out of statistics,
            correlations, trends, outliers, insights and charts.

    Returns:
        AnalysisResult, with the input rows preserved as ``raw_data``
    """
    columns = profile_columns(headers, rows, unique_column_names)
    analyzable: List[Column] = [c for c in columns if not c.is_identifier]

    numeric_columns = [c for c in analyzable if c.type == 'numeric']
    date_columns = [c for c in analyzable if c.type == 'date']

    numeric_stats = [
        calculate_numeric_stats(col.name, numeric_values(rows, col.name))
        for col in numeric_columns
    ]

    correlations = detect_correlations(numeric_columns, rows)

    trends = []
    if date_columns:
        date_column = date_columns[0].name
        for col in numeric_columns[:TREND_NUMERIC_COLUMNS]:
            trend = detect_trend(date_column, col.name, rows)
            if trend is not None:
                trends.append(trend)

    outliers = []
    for col in numeric_columns:
        outliers.extend(detect_outliers(col.name, rows))

    insights = generate_insights(analyzable, numeric_stats, correlations, trends, outliers)
    charts = generate_charts(analyzable, rows)

    logger.info(
        f"Analyzed {sanitize_for_logging(file_name)}: {len(rows)} rows, {len(columns)} columns "
        f"({len(numeric_columns)} numeric), {len(insights)} insights, {len(charts)} charts"
    )

    return AnalysisResult(
        file_name=file_name,
        row_count=len(rows),
        column_count=len(columns),
        columns=columns,
        numeric_stats=numeric_stats,
        correlations=correlations[:MAX_CORRELATIONS],
        trends=trends,
        outliers=outliers,
        insights=insights,
        charts=charts,
        data_quality=profile_data_quality(headers, rows),
        raw_data=[dict(row) for row in rows],
    )
