"""
Team statistics API routes.
"""

import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas import (
    StatsUploadRequest,
    StatsRefreshRequest,
    StatsSavedResponse,
    TeamStatsRecordResponse
)
from ...db import get_db, TeamStatsRepository
from ...data_source import get_provider, SeasonNotFoundError, StatsSourceError
from ...core.seasons import get_current_season, utc_now


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.post("", response_model=StatsSavedResponse, status_code=status.HTTP_201_CREATED)
async def upload_team_stats(
    request: StatsUploadRequest,
    db: AsyncSession = Depends(get_db)
) -> StatsSavedResponse:
    """Store a batch of team stat lines as of a date."""
    season = request.season or get_current_season()
    stats_date = request.date or utc_now()

    stats_repo = TeamStatsRepository(db)
    records = await stats_repo.save_many(
        [t.to_stat_line() for t in request.teams],
        season=season,
        date=stats_date,
        data_source=request.data_source
    )
    await db.commit()

    return StatsSavedResponse(
        season=season,
        date=stats_date,
        data_source=request.data_source,
        teams_saved=len(records)
    )


@router.get("", response_model=List[TeamStatsRecordResponse])
async def get_team_stats(
    season: Optional[str] = None,
    date: Optional[datetime] = None,
    conference: Optional[str] = None,
    team_name: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
) -> List[TeamStatsRecordResponse]:
    """
    Get the latest stored stat line per team on or before a date.

    Filter by conference ("Eastern" / "Western") or a single team.
    """
    stats_repo = TeamStatsRepository(db)
    records = await stats_repo.get_team_stats(
        season or get_current_season(),
        date=date,
        conference=conference,
        team_name=team_name
    )
    return [TeamStatsRecordResponse.model_validate(r) for r in records]


@router.post("/refresh", response_model=StatsSavedResponse, status_code=status.HTTP_201_CREATED)
async def refresh_team_stats(
    request: StatsRefreshRequest,
    db: AsyncSession = Depends(get_db)
) -> StatsSavedResponse:
    """Fetch current stats from an external source and store them."""
    season = request.season or get_current_season()

    try:
        provider = get_provider(request.source)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    try:
        lines = await provider.fetch_team_stats(season)
    except SeasonNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StatsSourceError as e:
        logger.error("Stats refresh from %s failed: %s", request.source, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error communicating with {request.source}: {str(e)}"
        )

    stats_date = utc_now()
    stats_repo = TeamStatsRepository(db)
    records = await stats_repo.save_many(
        lines,
        season=season,
        date=stats_date,
        data_source=provider.source_name
    )
    await db.commit()

    logger.info("Stored %d team stat lines from %s for %s", len(records), provider.source_name, season)

    return StatsSavedResponse(
        season=season,
        date=stats_date,
        data_source=provider.source_name,
        teams_saved=len(records)
    )
