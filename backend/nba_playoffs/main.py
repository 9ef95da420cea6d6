"""
NBA Playoff Simulator - FastAPI Application

Main entry point for the web API.
"""

import logging
import os
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .api.routes import simulations_router, stats_router, teams_router
from .db import create_tables, async_session_maker, get_db, SimulationTaskRepository


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("nba_playoffs")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    try:
        await create_tables()
        async with async_session_maker() as session:
            task_repo = SimulationTaskRepository(session)
            interrupted = await task_repo.fail_interrupted()
            removed = await task_repo.cleanup_old_tasks()
            await session.commit()
        if interrupted or removed:
            logger.info("Odds tasks: %d interrupted, %d expired removed", interrupted, removed)
    except Exception as e:
        logger.error(f"Failed to prepare database on startup: {e}")
        # App still starts; DB may become available later
    yield
    # Shutdown


# Create FastAPI app
app = FastAPI(
    title="NBA Playoff Simulator",
    description="Simulates the NBA play-in, conference playoffs and finals from weighted team ratings.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

# CORS configuration
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(simulations_router, prefix="/api")
app.include_router(stats_router, prefix="/api")
app.include_router(teams_router, prefix="/api")


@app.get("/api/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint, including database reachability."""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning(f"Health check database query failed: {e}")
        database = "unavailable"
    return {"status": "healthy", "version": "1.0.0", "database": database}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "NBA Playoff Simulator API",
        "version": "1.0.0",
        "docs": "/api/docs",
        "health": "/api/health"
    }
