"""
Metrics endpoint for performance monitoring.
"""
from fastapi import APIRouter
from csvviz.core.performance import PerformanceMonitor

router = APIRouter()


@router.get("/metrics")
async def get_metrics():
    """
    Timing statistics for every tracked operation (analyze_data,
    request_duration, ...).
    """
    return {'performance': PerformanceMonitor.get_all_metrics()}
