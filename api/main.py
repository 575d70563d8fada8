from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import default_config
from logging_config import configure_logging
from app_state import AppState
from startup.manager import StartupManager
from routes.health import router as health_router
from routes.operations import router as operations_router
from routes.collection import router as collection_router
from routes.performance import router as performance_router
from routes.analysis import router as analysis_router

configure_logging(default_config.logging.level)

# Global state
state = AppState()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan"""
    manager = StartupManager(state)
    await manager.initialize()
    yield
    await state.close_all_resources()

app = FastAPI(
    title="MongoFlow Studio API",
    description="Interactive MongoDB playground: run operations and watch them travel to the database and back",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Store state in app for route access
app.state.app_state = state

# Include route modules
app.include_router(health_router)
app.include_router(operations_router)
app.include_router(collection_router)
app.include_router(performance_router)
app.include_router(analysis_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
