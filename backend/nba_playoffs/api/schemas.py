"""
Pydantic schemas for API request/response validation.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from ..simulator.models import (
    TeamStatLine,
    WeightingConfig,
    DEFAULT_OFFENSIVE_WEIGHT,
    DEFAULT_DEFENSIVE_WEIGHT,
    DEFAULT_THREE_POINT_WEIGHT,
)


SEASON_PATTERN = r"^\d{4}-\d{4}$"


# ============== Team Schemas ==============

class TeamStatLineSchema(BaseModel):
    """One team's statistics."""
    name: str = Field(..., min_length=1, max_length=100)
    conference: Optional[str] = None  # "Eastern" or "Western"
    offensive_rating: float
    defensive_rating: float
    three_point_pct: float  # fraction, e.g. 0.365
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)

    def to_stat_line(self) -> TeamStatLine:
        return TeamStatLine(**self.model_dump())


class WeightingSchema(BaseModel):
    """Rating weights. Applied as given, never normalized."""
    offensive_weight: float = DEFAULT_OFFENSIVE_WEIGHT
    defensive_weight: float = DEFAULT_DEFENSIVE_WEIGHT
    three_point_weight: float = DEFAULT_THREE_POINT_WEIGHT

    def to_config(self) -> WeightingConfig:
        return WeightingConfig(**self.model_dump())


class RatedTeamSchema(BaseModel):
    """A team with its weighted rating."""
    name: str
    conference: Optional[str]
    weighted_rating: float
    wins: int
    losses: int
    stats: TeamStatLineSchema


# ============== Simulation Schemas ==============

class SimulationRunRequest(BaseModel):
    """Run a single playoff simulation."""
    season: Optional[str] = Field(None, pattern=SEASON_PATTERN)  # Defaults to current season
    date: Optional[datetime] = None  # Defaults to now
    weighting: WeightingSchema = Field(default_factory=WeightingSchema)
    use_luck_factor: bool = False
    use_home_court_advantage: bool = True
    seed: Optional[int] = None  # Set to replay a run exactly
    teams: Optional[List[TeamStatLineSchema]] = None  # Stored stats are used when omitted


class GameSchema(BaseModel):
    """One game of a series."""
    game_number: int
    winner: str
    home_team: bool


class SeriesSchema(BaseModel):
    """A best-of-seven series."""
    team1: RatedTeamSchema
    team2: RatedTeamSchema
    winner: RatedTeamSchema
    team1_wins: int
    team2_wins: int
    games: List[GameSchema]


class PlayInGameSchema(BaseModel):
    """A single play-in game."""
    label: str
    team1: RatedTeamSchema
    team2: RatedTeamSchema
    winner: RatedTeamSchema
    home_team: bool


class PlayInSchema(BaseModel):
    """A conference's play-in tournament."""
    games: List[PlayInGameSchema]
    seeds: List[RatedTeamSchema]
    eliminated: List[RatedTeamSchema]


class RoundSchema(BaseModel):
    """One conference round."""
    round: int
    series: List[SeriesSchema]


class ConferenceSchema(BaseModel):
    """A conference bracket and its champion."""
    name: str
    rounds: List[RoundSchema]
    champion: RatedTeamSchema
    play_in: Optional[PlayInSchema] = None


class SimulationResultSchema(BaseModel):
    """Full bracket of one simulation."""
    season: str
    date: datetime
    conferences: List[ConferenceSchema]
    champion: RatedTeamSchema
    weighting: WeightingSchema
    finals: Optional[SeriesSchema] = None


class SimulationResponse(BaseModel):
    """A stored simulation with its bracket."""
    id: str
    created_at: datetime
    use_luck_factor: bool
    use_home_court_advantage: bool
    seed: Optional[int]
    result: SimulationResultSchema


class SimulationSummary(BaseModel):
    """List entry for a stored simulation."""
    id: str
    season: str
    date: datetime
    champion: str
    created_at: datetime

    class Config:
        from_attributes = True


class SeriesPreviewRequest(BaseModel):
    """Simulate one series between two teams."""
    team1: TeamStatLineSchema  # Higher seed, hosts games 1, 2, 5 and 7
    team2: TeamStatLineSchema
    weighting: WeightingSchema = Field(default_factory=WeightingSchema)
    use_luck_factor: bool = False
    use_home_court_advantage: bool = True
    seed: Optional[int] = None


class SeriesPreviewResponse(BaseModel):
    """Series outcome plus the team1 win probability for a game 1 without luck."""
    game1_win_probability: float
    series: SeriesSchema


# ============== Odds Schemas ==============

class OddsRequest(BaseModel):
    """Estimate championship odds over many simulations."""
    season: Optional[str] = Field(None, pattern=SEASON_PATTERN)
    date: Optional[datetime] = None
    weighting: WeightingSchema = Field(default_factory=WeightingSchema)
    use_luck_factor: bool = False
    use_home_court_advantage: bool = True
    seed: Optional[int] = None
    n_trials: int = Field(default=1000, ge=1, le=100000)
    teams: Optional[List[TeamStatLineSchema]] = None


class SimulationTaskResponse(BaseModel):
    """Odds task status response."""
    task_id: str
    status: str  # pending, running, completed, failed
    progress: int  # 0-100
    season: Optional[str] = None
    n_trials: Optional[int] = None
    error: Optional[str] = None


class TeamOddsSchema(BaseModel):
    """Share of simulations in which a team reached each stage."""
    name: str
    conference: Optional[str]
    weighted_rating: float
    playoff_pct: float
    second_round_pct: float
    conference_finals_pct: float
    finals_pct: float
    championship_pct: float


class OddsResultsResponse(BaseModel):
    """Championship odds for every team."""
    season: str
    n_trials: int
    seed: Optional[int]
    teams: List[TeamOddsSchema]


# ============== Stats Schemas ==============

class StatsUploadRequest(BaseModel):
    """Store team stat lines as of a date."""
    season: Optional[str] = Field(None, pattern=SEASON_PATTERN)
    date: Optional[datetime] = None
    data_source: str = Field(default="manual", max_length=50)
    teams: List[TeamStatLineSchema] = Field(..., min_length=1)


class StatsRefreshRequest(BaseModel):
    """Fetch and store stats from an external source."""
    season: Optional[str] = Field(None, pattern=SEASON_PATTERN)
    source: str = "espn"


class StatsSavedResponse(BaseModel):
    """Result of storing a batch of stat lines."""
    season: str
    date: datetime
    data_source: str
    teams_saved: int


class TeamStatsRecordResponse(BaseModel):
    """A stored team stat line."""
    team_name: str
    conference: Optional[str]
    season: str
    date: datetime
    offensive_rating: float
    defensive_rating: float
    three_point_pct: float
    wins: int
    losses: int
    data_source: str

    class Config:
        from_attributes = True


# ============== Team Directory Schemas ==============

class TeamCreateRequest(BaseModel):
    """Add a team to the directory."""
    name: str = Field(..., min_length=1, max_length=100)
    conference: str  # "Eastern" or "Western"
    division: str  # e.g. "Atlantic"
    abbreviation: Optional[str] = Field(None, max_length=5)
    logo_url: Optional[str] = Field(None, max_length=500)
    primary_color: Optional[str] = Field(None, max_length=20)
    secondary_color: Optional[str] = Field(None, max_length=20)


class TeamUpdateRequest(BaseModel):
    """Change some of a team's fields. Omitted fields are left as they are."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    conference: Optional[str] = None
    division: Optional[str] = None
    abbreviation: Optional[str] = Field(None, max_length=5)
    logo_url: Optional[str] = Field(None, max_length=500)
    primary_color: Optional[str] = Field(None, max_length=20)
    secondary_color: Optional[str] = Field(None, max_length=20)


class TeamResponse(BaseModel):
    """A team in the directory."""
    id: str
    name: str
    conference: str
    division: str
    abbreviation: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None

    class Config:
        from_attributes = True


# ============== Error Schemas ==============

class SimulationErrorDetail(BaseModel):
    """Engine failure detail."""
    kind: str
    stage: Optional[str] = None
    message: str


class SimulationErrorResponse(BaseModel):
    """Error body for a failed simulation."""
    detail: SimulationErrorDetail
