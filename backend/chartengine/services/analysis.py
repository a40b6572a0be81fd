"""
One-shot pipeline: rows -> profiles -> suggestion -> series.
"""
import logging
from collections import Counter
from typing import Any, Dict, Mapping, Optional, Sequence

from chartengine.core.config import Settings, get_settings
from chartengine.core.schemas import AnalysisResult, ChartType, ColumnProfile, ColumnType
from chartengine.services.generator import build_series
from chartengine.services.inference import override_chart_type, suggest_chart
from chartengine.services.profiler import profile_rows
from chartengine.services.validation import normalize_rows, validate_rows

logger = logging.getLogger(__name__)


def summarize_types(profiles: Sequence[ColumnProfile]) -> Dict[str, int]:
    """Number of columns per column type, every type present."""
    counts = Counter(p.type for p in profiles)
    return {column_type.value: counts.get(column_type, 0) for column_type in ColumnType}


def analyze_rows(
    rows: Sequence[Mapping[str, Any]],
    selected_x: Optional[str] = None,
    selected_y: Optional[str] = None,
    chart_type: Optional[ChartType] = None,
    sample_size: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """
    Validate, profile, suggest and build in one call.

    ``chart_type`` overrides the suggested chart family while keeping the
    suggested axes.
    """
    settings = settings or get_settings()
    rows = normalize_rows(validate_rows(rows, max_rows=settings.max_rows_per_request))

    profiles = profile_rows(rows, sample_size=sample_size, settings=settings)
    suggestion = suggest_chart(profiles, selected_x, selected_y)
    if chart_type is not None:
        suggestion = override_chart_type(suggestion, chart_type)

    series = build_series(rows, suggestion.x, suggestion.y, suggestion.type, profiles)

    logger.info(
        f"Analyzed {len(rows)} rows: {summarize_types(profiles)}, suggested {suggestion.type.value}"
    )
    return AnalysisResult(
        row_count=len(rows),
        profiles=profiles,
        suggestion=suggestion,
        series=series,
    )
