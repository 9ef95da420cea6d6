"""
Team directory API routes.
"""

import logging
from typing import List, Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas import TeamCreateRequest, TeamUpdateRequest, TeamResponse
from ...db import get_db, TeamRepository, TeamRecord
from ...core.divisions import DIVISION_CONFERENCES, division_conference


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


def _placement(conference: str, division: str) -> Tuple[str, str]:
    """
    Check that a division exists and belongs to the conference.

    Returns:
        (conference, division) with the division's canonical spelling
    """
    expected = division_conference(division)
    if expected is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown division {division!r}. Expected one of: {', '.join(DIVISION_CONFERENCES)}"
        )
    if conference != expected:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The {division.strip().title()} division is in the {expected} conference, not {conference!r}"
        )
    canonical = next(d for d in DIVISION_CONFERENCES if d.lower() == division.strip().lower())
    return expected, canonical


async def _team_or_404(repo: TeamRepository, team_id: str) -> TeamRecord:
    team = await repo.get_by_id(team_id)
    if team is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Team not found"
        )
    return team


async def _check_name_free(repo: TeamRepository, name: str) -> None:
    if await repo.get_by_name(name) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A team named {name!r} already exists"
        )


@router.get("", response_model=List[TeamResponse])
async def list_teams(
    conference: Optional[str] = None,
    division: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
) -> List[TeamResponse]:
    """List teams, optionally filtered by conference and/or division."""
    teams = await TeamRepository(db).list(conference=conference, division=division)
    return [TeamResponse.model_validate(t) for t in teams]


@router.get("/by-name/{name}", response_model=TeamResponse)
async def get_team_by_name(
    name: str,
    db: AsyncSession = Depends(get_db)
) -> TeamResponse:
    """Look a team up by its exact name."""
    team = await TeamRepository(db).get_by_name(name)
    if team is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Team {name!r} not found"
        )
    return TeamResponse.model_validate(team)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: str,
    db: AsyncSession = Depends(get_db)
) -> TeamResponse:
    """Get a team by ID."""
    return TeamResponse.model_validate(await _team_or_404(TeamRepository(db), team_id))


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    request: TeamCreateRequest,
    db: AsyncSession = Depends(get_db)
) -> TeamResponse:
    """
    Add a team to the directory.

    Returns 400 when the division isn't in the given conference and 409 when
    the name is taken.
    """
    repo = TeamRepository(db)
    conference, division = _placement(request.conference, request.division)
    await _check_name_free(repo, request.name)

    details = request.model_dump(exclude={"name", "conference", "division"})
    team = await repo.create(request.name, conference, division, **details)
    await db.commit()

    logger.info("Added %s (%s, %s) to the team directory", team.name, conference, division)
    return TeamResponse.model_validate(team)


@router.patch("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: str,
    request: TeamUpdateRequest,
    db: AsyncSession = Depends(get_db)
) -> TeamResponse:
    """Update some of a team's fields."""
    repo = TeamRepository(db)
    team = await _team_or_404(repo, team_id)
    changes = request.model_dump(exclude_unset=True)
    for required in ("name", "conference", "division"):
        if changes.get(required) is None:
            changes.pop(required, None)

    if "conference" in changes or "division" in changes:
        changes["conference"], changes["division"] = _placement(
            changes.get("conference") or team.conference,
            changes.get("division") or team.division
        )
    if changes.get("name") and changes["name"] != team.name:
        await _check_name_free(repo, changes["name"])

    team = await repo.update(team, **changes)
    await db.commit()
    return TeamResponse.model_validate(team)


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(
    team_id: str,
    db: AsyncSession = Depends(get_db)
) -> None:
    """Remove a team from the directory."""
    repo = TeamRepository(db)
    team = await _team_or_404(repo, team_id)
    name = team.name
    await repo.delete(team)
    await db.commit()
    logger.info("Removed %s from the team directory", name)
