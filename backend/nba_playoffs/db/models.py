"""
SQLAlchemy database models.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import String, Integer, Float, Boolean, DateTime, Text, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..simulator.models import TeamStatLine


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class TeamStatsRecord(Base):
    """A team's stat line as of a given date."""

    __tablename__ = "team_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_name: Mapped[str] = mapped_column(String(100), nullable=False)
    conference: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    season: Mapped[str] = mapped_column(String(9), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    offensive_rating: Mapped[float] = mapped_column(Float, nullable=False)
    defensive_rating: Mapped[float] = mapped_column(Float, nullable=False)
    three_point_pct: Mapped[float] = mapped_column(Float, nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    data_source: Mapped[str] = mapped_column(String(50), nullable=False, default="manual")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("ix_team_stats_lookup", "season", "date", "team_name"),
    )

    def __repr__(self) -> str:
        return f"<TeamStatsRecord(team={self.team_name}, season={self.season}, date={self.date})>"

    def to_stat_line(self) -> TeamStatLine:
        return TeamStatLine(
            name=self.team_name,
            conference=self.conference,
            offensive_rating=self.offensive_rating,
            defensive_rating=self.defensive_rating,
            three_point_pct=self.three_point_pct,
            wins=self.wins,
            losses=self.losses
        )


class TeamRecord(Base):
    """A team in the league directory."""

    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    conference: Mapped[str] = mapped_column(String(20), nullable=False)
    division: Mapped[str] = mapped_column(String(20), nullable=False)
    abbreviation: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    primary_color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    secondary_color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("ix_teams_conference_division", "conference", "division"),
    )

    def __repr__(self) -> str:
        return f"<TeamRecord(name={self.name}, conference={self.conference}, division={self.division})>"

class SimulationRecord(Base):
    """A stored playoff simulation run."""

    __tablename__ = "simulations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID
    season: Mapped[str] = mapped_column(String(9), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    champion: Mapped[str] = mapped_column(String(100), nullable=False)
    use_luck_factor: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    use_home_court_advantage: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    seed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    results_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("ix_simulations_season_created", "season", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<SimulationRecord(id={self.id}, season={self.season}, champion={self.champion})>"


class SimulationTask(Base):
    """Background championship odds task tracking."""

    __tablename__ = "simulation_tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID
    season: Mapped[str] = mapped_column(String(9), nullable=False)
    n_trials: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    results_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    __table_args__ = (
        Index("ix_simulation_tasks_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<SimulationTask(id={self.id}, season={self.season}, status={self.status})>"
