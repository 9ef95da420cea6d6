"""
NBA Playoff Bracket Simulator

Rates teams from their stats, resolves the play-in, and plays out both
conference brackets and the finals.
"""

from .models import (
    TeamStatLine,
    WeightingConfig,
    RatedTeam,
    GameRecord,
    SeriesResult,
    PlayInGame,
    PlayInResult,
    RoundResult,
    ConferenceResult,
    SimulationResult,
)
from .errors import (
    SimulationError,
    InvalidStatError,
    InvalidWeightingError,
    InvalidRatingError,
    MissingTeamDataError,
    InsufficientTeamsError,
    PairingError,
)
from .ratings import CONFERENCES, compute_weighted_rating, compute_ratings, validate_weighting
from .seeding import rank_teams, split_by_conference
from .games import win_probability, simulate_game
from .series import run_series
from .play_in import resolve_play_in
from .engine import Stage, simulate_conference, run_playoffs, run_simulation
from .rng import RandomSource, make_rng
from .trials import TeamOdds, OddsResult, estimate_championship_odds

__all__ = [
    # Models
    "TeamStatLine",
    "WeightingConfig",
    "RatedTeam",
    "GameRecord",
    "SeriesResult",
    "PlayInGame",
    "PlayInResult",
    "RoundResult",
    "ConferenceResult",
    "SimulationResult",
    # Errors
    "SimulationError",
    "InvalidStatError",
    "InvalidWeightingError",
    "InvalidRatingError",
    "MissingTeamDataError",
    "InsufficientTeamsError",
    "PairingError",
    # Ratings and seeding
    "CONFERENCES",
    "compute_weighted_rating",
    "compute_ratings",
    "validate_weighting",
    "rank_teams",
    "split_by_conference",
    # Games and series
    "win_probability",
    "simulate_game",
    "run_series",
    "resolve_play_in",
    # Engine
    "Stage",
    "simulate_conference",
    "run_playoffs",
    "run_simulation",
    # Randomness
    "RandomSource",
    "make_rng",
    # Trials
    "TeamOdds",
    "OddsResult",
    "estimate_championship_odds",
]
