"""
Database module.
"""

from .database import (
    engine,
    async_session_maker,
    build_engine,
    make_session_maker,
    normalize_database_url,
    get_db,
    create_tables
)
from .models import Base, SimulationRecord, TeamStatsRecord, TeamRecord, SimulationTask
from .repositories import (
    SimulationRepository,
    TeamStatsRepository,
    TeamRepository,
    SimulationTaskRepository
)

__all__ = [
    # Database
    "engine",
    "async_session_maker",
    "build_engine",
    "make_session_maker",
    "normalize_database_url",
    "get_db",
    "create_tables",
    # Models
    "Base",
    "SimulationRecord",
    "TeamStatsRecord",
    "TeamRecord",
    "SimulationTask",
    # Repositories
    "SimulationRepository",
    "TeamStatsRepository",
    "TeamRepository",
    "SimulationTaskRepository",
]
