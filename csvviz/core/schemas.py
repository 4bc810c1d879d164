from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Any, Dict, Literal

ColumnType = Literal['numeric', 'categorical', 'date', 'boolean', 'text']
CorrelationStrength = Literal[
    'strong_positive', 'moderate_positive', 'weak_positive', 'none',
    'weak_negative', 'moderate_negative', 'strong_negative',
]
TrendDirection = Literal['increasing', 'decreasing', 'stable', 'volatile']
InsightType = Literal['trend', 'correlation', 'statistic', 'outlier', 'pattern']
Importance = Literal['high', 'medium', 'low']
ChartType = Literal['line', 'bar', 'scatter', 'histogram']
MissingValueAction = Literal['ignore', 'remove_rows', 'fill_zero', 'fill_mean']


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Column(CamelModel):
    name: str
    type: ColumnType
    sample_values: List[str]
    missing_count: int = 0
    missing_percent: float = 0.0
    cardinality: int = 0  # distinct non-empty values
    unique_percent: float = 0.0
    is_identifier: bool = False


class NumericStats(CamelModel):
    column: str
    mean: float
    median: float
    min: float
    max: float
    std_dev: float
    total: float
    count: int  # 0 means "no data", not "all zeros"


class Correlation(CamelModel):
    column1: str
    column2: str
    coefficient: float
    strength: CorrelationStrength
    description: str


class Trend(CamelModel):
    date_column: str
    value_column: str
    direction: TrendDirection
    rate_of_change: float
    description: str


class Outlier(CamelModel):
    column: str
    value: float
    index: int  # 0-based position in the analyzed rows
    type: Literal['high', 'low']
    z_score: float  # absolute value
    description: str


class Insight(CamelModel):
    type: InsightType
    icon: str
    title: str
    description: str
    importance: Importance


class ChartConfig(CamelModel):
    id: str
    type: ChartType
    title: str
    x_axis: str
    y_axis: Optional[str] = None
    data: List[Dict[str, Any]]


class MissingColumn(CamelModel):
    column: str
    missing_count: int
    missing_percent: float


class DataQuality(CamelModel):
    total_rows: int
    duplicate_rows: int
    columns_with_missing: List[MissingColumn] = []


class AnalysisResult(CamelModel):
    file_name: str
    row_count: int
    column_count: int
    columns: List[Column]
    numeric_stats: List[NumericStats]
    correlations: List[Correlation]
    trends: List[Trend]
    outliers: List[Outlier]
    insights: List[Insight]
    charts: List[ChartConfig]
    data_quality: Optional[DataQuality] = None
    raw_data: List[Dict[str, str]] = []


# Data prep (transform then re-analyze)

class ColumnTransform(CamelModel):
    original_name: str
    new_name: str
    new_type: ColumnType
    excluded: bool = False


class RowTransform(CamelModel):
    remove_duplicates: bool = False
    missing_value_action: MissingValueAction = 'ignore'


class DataPrepState(CamelModel):
    column_transforms: List[ColumnTransform] = []
    row_transform: RowTransform = Field(default_factory=RowTransform)


# API payloads

class AnalyzeRequest(CamelModel):
    headers: List[str]
    rows: List[Dict[str, str]]
    file_name: str = "uploaded_file"
    unique_column_names: Optional[List[str]] = None


class ReanalyzeRequest(AnalyzeRequest):
    prep: DataPrepState = Field(default_factory=DataPrepState)


class AnalyzeResponse(CamelModel):
    success: bool
    data: Optional[AnalysisResult] = None
    error: Optional[str] = None
