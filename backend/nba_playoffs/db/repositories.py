"""
Repository classes for database operations.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, List
from uuid import uuid4

from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SimulationRecord, TeamStatsRecord, TeamRecord, SimulationTask
from ..simulator.models import SimulationResult, TeamStatLine


def to_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SimulationRepository:
    """Repository for stored simulation runs."""

    DEFAULT_LIMIT = 10

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        result: SimulationResult,
        use_luck_factor: bool = False,
        use_home_court_advantage: bool = True,
        seed: Optional[int] = None
    ) -> SimulationRecord:
        """Store a completed simulation."""
        record = SimulationRecord(
            id=str(uuid4()),
            season=result.season,
            date=to_utc(result.date),
            champion=result.champion.name,
            use_luck_factor=use_luck_factor,
            use_home_court_advantage=use_home_court_advantage,
            seed=seed,
            results_json=json.dumps(result.to_dict())
        )
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def get_by_id(self, simulation_id: str) -> Optional[SimulationRecord]:
        """Get a simulation by ID."""
        result = await self.session.execute(
            select(SimulationRecord).where(SimulationRecord.id == simulation_id)
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        season: Optional[str] = None,
        limit: int = DEFAULT_LIMIT
    ) -> List[SimulationRecord]:
        """Get the most recent simulations, newest first."""
        query = select(SimulationRecord)
        if season:
            query = query.where(SimulationRecord.season == season)
        query = query.order_by(SimulationRecord.created_at.desc()).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_latest(self, season: Optional[str] = None) -> Optional[SimulationRecord]:
        """Get the most recent simulation, optionally for one season."""
        records = await self.list(season=season, limit=1)
        return records[0] if records else None

    @staticmethod
    def load_result(record: SimulationRecord) -> SimulationResult:
        """Rebuild the result tree from a stored record."""
        return SimulationResult.from_dict(json.loads(record.results_json))


class TeamStatsRepository:
    """Repository for dated team stat lines."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save_many(
        self,
        lines: Iterable[TeamStatLine],
        season: str,
        date: datetime,
        data_source: str = "manual"
    ) -> List[TeamStatsRecord]:
        """Store a batch of stat lines as of one date."""
        records = [
            TeamStatsRecord(
                team_name=line.name,
                conference=line.conference,
                season=season,
                date=to_utc(date),
                offensive_rating=line.offensive_rating,
                defensive_rating=line.defensive_rating,
                three_point_pct=line.three_point_pct,
                wins=line.wins,
                losses=line.losses,
                data_source=data_source
            )
            for line in lines
        ]
        self.session.add_all(records)
        await self.session.flush()
        return records

    async def get_team_stats(
        self,
        season: str,
        date: Optional[datetime] = None,
        conference: Optional[str] = None,
        team_name: Optional[str] = None
    ) -> List[TeamStatsRecord]:
        """
        Get the latest stat line per team on or before a date.

        Args:
            season: Season label
            date: Cut-off date (defaults to no cut-off)
            conference: Only this conference
            team_name: Only this team

        Returns:
            One record per team, ordered by team name
        """
        conditions = [TeamStatsRecord.season == season]
        if date is not None:
            conditions.append(TeamStatsRecord.date <= to_utc(date))
        if conference:
            conditions.append(TeamStatsRecord.conference == conference)
        if team_name:
            conditions.append(TeamStatsRecord.team_name == team_name)

        result = await self.session.execute(
            select(TeamStatsRecord)
            .where(*conditions)
            .order_by(TeamStatsRecord.date.desc(), TeamStatsRecord.id.desc())
        )

        latest = {}
        for record in result.scalars().all():
            latest.setdefault(record.team_name, record)

        return [latest[name] for name in sorted(latest)]


class TeamRepository:
    """Repository for the team directory."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, conference: str, division: str, **details) -> TeamRecord:
        """Add a team. `details` holds the optional abbreviation, logo and colors."""
        team = TeamRecord(
            id=str(uuid4()),
            name=name,
            conference=conference,
            division=division,
            **details
        )
        self.session.add(team)
        await self.session.flush()
        await self.session.refresh(team)
        return team

    async def get_by_id(self, team_id: str) -> Optional[TeamRecord]:
        result = await self.session.execute(
            select(TeamRecord).where(TeamRecord.id == team_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[TeamRecord]:
        result = await self.session.execute(
            select(TeamRecord).where(TeamRecord.name == name)
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        conference: Optional[str] = None,
        division: Optional[str] = None
    ) -> List[TeamRecord]:
        """List teams by name, optionally within one conference or division."""
        query = select(TeamRecord)
        if conference:
            query = query.where(TeamRecord.conference == conference)
        if division:
            query = query.where(TeamRecord.division == division)

        result = await self.session.execute(query.order_by(TeamRecord.name))
        return list(result.scalars().all())

    async def update(self, team: TeamRecord, **changes) -> TeamRecord:
        """Apply field changes to a team."""
        for field, value in changes.items():
            setattr(team, field, value)
        await self.session.flush()
        await self.session.refresh(team)
        return team

    async def delete(self, team: TeamRecord) -> None:
        await self.session.delete(team)
        await self.session.flush()


class SimulationTaskRepository:
    """Repository for championship odds task operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, season: str, n_trials: int) -> SimulationTask:
        """Create a new odds task."""
        task = SimulationTask(
            id=str(uuid4()),
            season=season,
            n_trials=n_trials,
            status="pending",
            progress=0
        )
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def get_by_id(self, task_id: str) -> Optional[SimulationTask]:
        """Get a task by ID."""
        result = await self.session.execute(
            select(SimulationTask).where(SimulationTask.id == task_id)
        )
        return result.scalar_one_or_none()

    async def update_progress(self, task: SimulationTask, progress: int) -> None:
        """Record progress on a running task; it never moves backwards or reaches 100 before completion."""
        task.progress = max(task.progress, min(progress, 99))
        task.status = "running"
        await self.session.flush()

    async def complete(self, task: SimulationTask, results: dict) -> None:
        """Mark task as completed with results."""
        task.status = "completed"
        task.progress = 100
        task.results_json = json.dumps(results)
        task.completed_at = datetime.now(timezone.utc)
        await self.session.flush()

    async def fail(self, task: SimulationTask, error_message: str) -> None:
        """Mark task as failed with error message."""
        task.status = "failed"
        task.error_message = error_message
        task.completed_at = datetime.now(timezone.utc)
        await self.session.flush()

    async def fail_interrupted(self) -> int:
        """
        Fail tasks left pending or running by a previous process.

        Returns:
            Number of tasks marked failed
        """
        result = await self.session.execute(
            update(SimulationTask)
            .where(SimulationTask.status.in_(("pending", "running")))
            .values(
                status="failed",
                error_message="Interrupted by server restart",
                completed_at=datetime.now(timezone.utc)
            )
        )
        return result.rowcount

    async def cleanup_old_tasks(self, hours: int = 24) -> int:
        """
        Remove finished tasks completed more than `hours` ago.

        Returns:
            Number of tasks deleted
        """
        cutoff = datetime.now(timezone.utc) - timedelta(hours=hours)
        result = await self.session.execute(
            delete(SimulationTask)
            .where(SimulationTask.completed_at.is_not(None))
            .where(SimulationTask.completed_at < cutoff)
        )
        return result.rowcount
