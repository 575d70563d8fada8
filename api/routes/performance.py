"""Performance log and insight routes."""
from fastapi import APIRouter, Request

from models import InsightsResponse, PerformanceLogResponse
from routes.deps import get_app_state
from telemetry.insights import summarize

router = APIRouter(prefix="/api/performance", tags=["performance"])


@router.get("", response_model=PerformanceLogResponse)
async def performance_log(request: Request):
    """
    Recent operations, newest first

    Only operations that reached the store are recorded.
    """
    log = get_app_state(request).get_performance_log()
    entries = log.entries()
    return PerformanceLogResponse(
        entries=[entry.to_dict() for entry in entries],
        count=len(entries),
        capacity=log.max_entries,
    )


@router.get("/insights", response_model=InsightsResponse)
async def performance_insights(request: Request):
    """Health view derived from the current log snapshot"""
    log = get_app_state(request).get_performance_log()
    return InsightsResponse(**summarize(log.entries()).to_dict())


@router.delete("")
async def clear_performance_log(request: Request):
    """Forget every recorded operation"""
    log = get_app_state(request).get_performance_log()
    cleared = len(log)
    log.clear()
    return {"status": "success", "cleared": cleared}
