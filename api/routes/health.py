"""Health and info routes."""
from fastapi import APIRouter, Request
from models import HealthResponse
from config import default_config
from routes.deps import get_app_state

router = APIRouter()


@router.get("/", include_in_schema=False)
async def root():
    """Root endpoint with API information"""
    return {
        "message": "MongoFlow Studio API",
        "docs": "/docs",
        "health": "/health"
    }


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """
    Health check endpoint

    Pings the store and reports how many operations the log holds
    """
    app_state = get_app_state(request)
    connected = await app_state.store_reachable()

    return HealthResponse(
        status="healthy" if connected else "degraded",
        store_connected=connected,
        database=default_config.database.name,
        collection=default_config.database.collection,
        performance_entries=len(app_state.get_performance_log())
    )
