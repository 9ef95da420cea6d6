"""
Simulation API routes.
"""

import asyncio
import json
import logging
import os
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status, BackgroundTasks
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas import (
    SimulationRunRequest,
    SimulationResponse,
    SimulationSummary,
    SeriesPreviewRequest,
    SeriesPreviewResponse,
    OddsRequest,
    OddsResultsResponse,
    SimulationTaskResponse,
    SimulationErrorResponse,
    TeamStatLineSchema
)
from ...db import (
    get_db,
    async_session_maker,
    SimulationRepository,
    SimulationTaskRepository,
    TeamStatsRepository,
    SimulationRecord
)
from ...simulator import (
    SimulationError,
    PairingError,
    TeamStatLine,
    RatedTeam,
    SimulationResult,
    compute_ratings,
    compute_weighted_rating,
    validate_weighting,
    win_probability,
    run_series,
    run_simulation,
    estimate_championship_odds,
    make_rng
)
from ...core.seasons import get_current_season, season_end_year, utc_now


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulations", tags=["simulations"])

# Worker processes for odds tasks (0 = one per CPU)
ODDS_MAX_WORKERS = int(os.getenv("ODDS_MAX_WORKERS", "0"))

ERROR_RESPONSES = {
    400: {"model": SimulationErrorResponse, "description": "Simulation failed"},
}


def simulation_http_error(e: SimulationError) -> HTTPException:
    """Map an engine failure to an HTTP error carrying its kind and stage."""
    status_code = (
        status.HTTP_500_INTERNAL_SERVER_ERROR
        if isinstance(e, PairingError)
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(status_code=status_code, detail=e.to_dict())


def _resolve_season(season: Optional[str]) -> str:
    season = season or get_current_season()
    try:
        season_end_year(season)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return season


async def _load_stat_lines(
    db: AsyncSession,
    season: str,
    date: datetime,
    teams: Optional[List[TeamStatLineSchema]]
) -> List[TeamStatLine]:
    """Use inline teams when given, else the stored stats on or before the date."""
    if teams:
        return [t.to_stat_line() for t in teams]

    records = await TeamStatsRepository(db).get_team_stats(season, date)
    if not records:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No team stats stored for season {season} on or before {date.date().isoformat()}"
        )
    return [r.to_stat_line() for r in records]


def _simulation_response(record: SimulationRecord, result: SimulationResult) -> SimulationResponse:
    return SimulationResponse(
        id=record.id,
        created_at=record.created_at,
        use_luck_factor=record.use_luck_factor,
        use_home_court_advantage=record.use_home_court_advantage,
        seed=record.seed,
        result=result.to_dict()
    )


@router.post("/run", response_model=SimulationResponse, responses=ERROR_RESPONSES)
async def run_playoff_simulation(
    request: SimulationRunRequest,
    db: AsyncSession = Depends(get_db)
) -> SimulationResponse:
    """
    Simulate the play-in, both conference brackets and the finals.

    The result is stored and returned with its ID.
    """
    season = _resolve_season(request.season)
    sim_date = request.date or utc_now()
    lines = await _load_stat_lines(db, season, sim_date, request.teams)

    try:
        result = run_simulation(
            lines,
            season=season,
            date=sim_date,
            rng=make_rng(request.seed),
            weighting=request.weighting.to_config(),
            use_luck_factor=request.use_luck_factor,
            use_home_court_advantage=request.use_home_court_advantage
        )
    except SimulationError as e:
        logger.warning("Simulation for %s failed: %s", season, e)
        raise simulation_http_error(e)

    sim_repo = SimulationRepository(db)
    record = await sim_repo.create(
        result,
        use_luck_factor=request.use_luck_factor,
        use_home_court_advantage=request.use_home_court_advantage,
        seed=request.seed
    )
    await db.commit()

    return _simulation_response(record, result)


@router.get("", response_model=List[SimulationSummary])
async def list_simulations(
    season: Optional[str] = None,
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
) -> List[SimulationSummary]:
    """List stored simulations, newest first."""
    sim_repo = SimulationRepository(db)
    records = await sim_repo.list(season=season, limit=limit)
    return [SimulationSummary.model_validate(r) for r in records]


@router.get("/latest", response_model=SimulationResponse)
async def get_latest_simulation(
    season: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
) -> SimulationResponse:
    """Get the most recent stored simulation."""
    sim_repo = SimulationRepository(db)
    record = await sim_repo.get_latest(season=season)

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No simulations found"
        )

    return _simulation_response(record, sim_repo.load_result(record))


@router.post("/series", response_model=SeriesPreviewResponse, responses=ERROR_RESPONSES)
async def preview_series(request: SeriesPreviewRequest) -> SeriesPreviewResponse:
    """
    Simulate a single best-of-seven series between two teams.

    Nothing is stored. team1 is treated as the higher seed.
    """
    weighting = request.weighting.to_config()

    try:
        validate_weighting(weighting)
        team1, team2 = (
            RatedTeam(stats=line, weighted_rating=compute_weighted_rating(line, weighting))
            for line in (request.team1.to_stat_line(), request.team2.to_stat_line())
        )
        game1_home = True if request.use_home_court_advantage else None
        probability = win_probability(team1, team2, team_a_home=game1_home)
        series = run_series(
            team1, team2, make_rng(request.seed),
            use_luck_factor=request.use_luck_factor,
            use_home_court_advantage=request.use_home_court_advantage
        )
    except SimulationError as e:
        raise simulation_http_error(e)

    return SeriesPreviewResponse(
        game1_win_probability=probability,
        series=series.to_dict()
    )


async def run_odds_task(
    task_id: str,
    rated: List[RatedTeam],
    season: str,
    sim_date: datetime,
    request: OddsRequest
):
    """
    Background task to estimate championship odds.

    The trials run in a worker thread (which fans out to a process pool) so
    the event loop stays free to record progress.

    Args:
        task_id: The odds task ID
        rated: Rated teams for both conferences
        season: Season label
        sim_date: Date recorded on each simulated run
        request: The odds request parameters
    """
    async with async_session_maker() as db:
        task_repo = SimulationTaskRepository(db)

        task = await task_repo.get_by_id(task_id)
        if task is None:
            return

        try:
            await task_repo.update_progress(task, 5)
            await db.commit()

            loop = asyncio.get_running_loop()
            progress: asyncio.Queue = asyncio.Queue()

            def progress_callback(pct: float):
                loop.call_soon_threadsafe(progress.put_nowait, pct)

            worker = asyncio.ensure_future(asyncio.to_thread(
                estimate_championship_odds,
                rated,
                request.n_trials,
                season=season,
                date=sim_date,
                seed=request.seed,
                use_luck_factor=request.use_luck_factor,
                use_home_court_advantage=request.use_home_court_advantage,
                max_workers=ODDS_MAX_WORKERS or None,
                progress_callback=progress_callback
            ))

            while not worker.done():
                try:
                    pct = await asyncio.wait_for(progress.get(), timeout=0.5)
                except asyncio.TimeoutError:
                    continue
                # Map trial progress (0-100) to task progress (5-95)
                await task_repo.update_progress(task, int(5 + pct * 0.9))
                await db.commit()

            odds = worker.result()

            response_data = OddsResultsResponse(**odds.to_dict())
            await task_repo.complete(task, response_data.model_dump())
            await db.commit()

        except Exception as e:
            logger.error("Odds task %s failed: %s", task_id, e)
            await task_repo.fail(task, str(e))
            await db.commit()


@router.post(
    "/odds",
    response_model=SimulationTaskResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses=ERROR_RESPONSES
)
async def start_odds_estimate(
    request: OddsRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
) -> SimulationTaskResponse:
    """
    Start a championship odds estimate.

    Returns a task ID that can be used to poll for status and results.
    The trials run in the background.
    """
    season = _resolve_season(request.season)
    sim_date = request.date or utc_now()
    lines = await _load_stat_lines(db, season, sim_date, request.teams)

    # Rating problems are reported now rather than from the background task
    try:
        rated = compute_ratings(lines, request.weighting.to_config())
    except SimulationError as e:
        e.stage = e.stage or "rating computation"
        raise simulation_http_error(e)

    task_repo = SimulationTaskRepository(db)
    task = await task_repo.create(season, request.n_trials)
    await db.commit()

    background_tasks.add_task(run_odds_task, task.id, rated, season, sim_date, request)

    return SimulationTaskResponse(
        task_id=task.id,
        status="pending",
        progress=0
    )


FINISHED_STATUSES = ("completed", "failed")


async def _task_or_404(db: AsyncSession, task_id: str):
    task = await SimulationTaskRepository(db).get_by_id(task_id)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


def _task_response(task) -> SimulationTaskResponse:
    return SimulationTaskResponse(
        task_id=task.id,
        status=task.status,
        progress=task.progress,
        season=task.season,
        n_trials=task.n_trials,
        error=task.error_message
    )


@router.get("/tasks/{task_id}/status", response_model=SimulationTaskResponse)
async def get_task_status(
    task_id: str,
    db: AsyncSession = Depends(get_db)
) -> SimulationTaskResponse:
    """Get the status of an odds task."""
    return _task_response(await _task_or_404(db, task_id))


@router.get("/tasks/{task_id}/results", response_model=OddsResultsResponse)
async def get_task_results(
    task_id: str,
    db: AsyncSession = Depends(get_db)
) -> OddsResultsResponse:
    """
    Get the odds computed by a finished task.

    Unfinished tasks give 400, failed ones 500 with the failure message.
    """
    task = await _task_or_404(db, task_id)

    if task.status not in FINISHED_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Odds estimate is still {task.status} ({task.progress}%)"
        )
    if task.status == "failed" or task.results_json is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Odds estimate failed: {task.error_message or 'no results stored'}"
        )

    return OddsResultsResponse(**json.loads(task.results_json))


@router.get("/tasks/{task_id}/stream")
async def stream_task_progress(
    task_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Stream odds task progress as Server-Sent Events.

    Each event carries the same payload as the status endpoint; the
    stream closes once the task has completed or failed.
    """
    await _task_or_404(db, task_id)

    async def event_generator():
        while True:
            async with async_session_maker() as session:
                task = await SimulationTaskRepository(session).get_by_id(task_id)

            if task is None:
                yield f"event: error\ndata: {json.dumps({'error': 'Task not found'})}\n\n"
                return

            payload = _task_response(task).model_dump_json()
            if task.status in FINISHED_STATUSES:
                yield f"event: {task.status}\ndata: {payload}\n\n"
                return
            yield f"data: {payload}\n\n"

            await asyncio.sleep(0.5)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"}
    )


@router.get("/{simulation_id}", response_model=SimulationResponse)
async def get_simulation(
    simulation_id: str,
    db: AsyncSession = Depends(get_db)
) -> SimulationResponse:
    """Get a stored simulation by ID."""
    sim_repo = SimulationRepository(db)
    record = await sim_repo.get_by_id(simulation_id)

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Simulation not found"
        )

    return _simulation_response(record, sim_repo.load_result(record))
