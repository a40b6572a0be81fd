"""
Metrics endpoints for performance monitoring.
"""
from fastapi import APIRouter, HTTPException
from chartengine.core.performance import PerformanceMonitor

ENGINE_METRICS = ("profile_rows", "suggest_chart", "build_series", "request_duration")

router = APIRouter()


@router.get("/metrics")
async def get_metrics():
    """Timing stats for profiling, suggestion, series building and requests."""
    return {'performance': PerformanceMonitor.get_all_metrics()}


@router.get("/metrics/{metric_name}")
async def get_metric(metric_name: str):
    stats = PerformanceMonitor.get_stats(metric_name)
    if stats is None:
        known = ", ".join(ENGINE_METRICS)
        raise HTTPException(status_code=404, detail=f"No samples for '{metric_name}' yet (engine metrics: {known})")
    return {'name': metric_name, **stats}
