import logging
from typing import List, Optional
from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from chartengine.core.config import get_settings
from chartengine.core.schemas import (
    AnalysisResult,
    AnalyzeRequest,
    ChartSuggestion,
    ColumnProfile,
    ProfileRequest,
    SeriesPayload,
    SeriesRequest,
    SuggestRequest,
)
from chartengine.services.analysis import analyze_rows
from chartengine.services.generator import build_series
from chartengine.services.inference import suggest_chart
from chartengine.services.profiler import profile_rows
from chartengine.services.validation import normalize_rows, validate_rows

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter()


def _rate_limit() -> str:
    return f"{get_settings().rate_limit_per_minute}/minute"


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.post("/profile", response_model=List[ColumnProfile])
@limiter.limit(_rate_limit)
def profile_endpoint(request: Request, body: ProfileRequest):
    """Infer a type and fill stats for every column of the posted rows."""
    settings = get_settings()
    rows = normalize_rows(validate_rows(body.rows, max_rows=settings.max_rows_per_request))
    return profile_rows(rows, sample_size=body.sample_size, settings=settings)


@router.post("/suggest", response_model=ChartSuggestion)
@limiter.limit(_rate_limit)
def suggest_endpoint(request: Request, body: SuggestRequest):
    """Suggest a chart for the given profiles and optional axis selection."""
    return suggest_chart(body.profiles, body.selected_x, body.selected_y)


@router.post("/series", response_model=Optional[SeriesPayload])
@limiter.limit(_rate_limit)
def series_endpoint(request: Request, body: SeriesRequest):
    """Build plottable series; ``null`` when the chart has nothing to plot."""
    settings = get_settings()
    rows = normalize_rows(validate_rows(body.rows, max_rows=settings.max_rows_per_request))
    return build_series(rows, body.x, body.y, body.chart_type, body.profiles)


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(_rate_limit)
def analyze_endpoint(request: Request, body: AnalyzeRequest):
    """Profile, suggest and build in one round trip."""
    return analyze_rows(
        body.rows,
        selected_x=body.selected_x,
        selected_y=body.selected_y,
        chart_type=body.chart_type,
        sample_size=body.sample_size,
    )
