from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional, Any, Dict


class ColumnType(str, Enum):
    NUMBER = "number"
    DATE = "date"
    CATEGORICAL = "categorical"
    TEXT = "text"


class ChartType(str, Enum):
    LINE = "line"
    BAR = "bar"
    PIE = "pie"
    SCATTER = "scatter"
    TABLE = "table"


class ViewType(str, Enum):
    FREQUENCY = "frequency"  # count per category, no numeric axis
    TIMELINE = "timeline"
    EXPLORER = "explorer"


class ColumnStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid_count: int = Field(ge=0)
    total: int = Field(ge=0)
    unique_count: Optional[int] = Field(default=None, ge=0)
    percent_filled: Optional[int] = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def check_counts(self) -> "ColumnStats":
        if self.valid_count > self.total:
            raise ValueError(
                f"valid_count ({self.valid_count}) cannot exceed total ({self.total})"
            )
        return self


class ColumnProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType
    sample_value: str = ""  # first non-empty value, stringified
    stats: ColumnStats
    use: bool = True  # default-selection hint, False only for text


class ChartSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ChartType
    reason: str
    x: Optional[str] = None
    y: Optional[str] = None
    view_type: Optional[ViewType] = None


class Dataset(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    values: List[float]


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class SeriesPayload(BaseModel):
    """
    Chart-library-agnostic series data.

    Categorical axes fill ``labels`` + ``datasets``; numeric and time axes
    fill ``points`` (x is epoch milliseconds for time axes).
    """
    model_config = ConfigDict(frozen=True)

    labels: Optional[List[str]] = None
    datasets: Optional[List[Dataset]] = None
    points: Optional[List[Point]] = None
    label: Optional[str] = None  # legend text for pointwise series

    @property
    def is_pointwise(self) -> bool:
        return self.points is not None

    @property
    def is_empty(self) -> bool:
        if self.points is not None:
            return not self.points
        return not self.labels


class AnalysisResult(BaseModel):
    row_count: int
    profiles: List[ColumnProfile]
    suggestion: ChartSuggestion
    series: Optional[SeriesPayload] = None


# Request bodies for the HTTP layer

Record = Dict[str, Any]


class ProfileRequest(BaseModel):
    rows: List[Record]
    sample_size: Optional[int] = Field(default=None, ge=1)


class SuggestRequest(BaseModel):
    profiles: List[ColumnProfile]
    selected_x: Optional[str] = None
    selected_y: Optional[str] = None


class SeriesRequest(BaseModel):
    rows: List[Record]
    x: Optional[str] = None
    y: Optional[str] = None
    chart_type: ChartType
    profiles: List[ColumnProfile]


class AnalyzeRequest(BaseModel):
    rows: List[Record]
    selected_x: Optional[str] = None
    selected_y: Optional[str] = None
    chart_type: Optional[ChartType] = None
    sample_size: Optional[int] = Field(default=None, ge=1)
