"""
Data models for the playoff simulator.

Everything here is immutable: a run builds fresh objects and never changes
them afterwards. Collections are tuples for the same reason.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


DEFAULT_OFFENSIVE_WEIGHT = 0.30
DEFAULT_DEFENSIVE_WEIGHT = 0.50
DEFAULT_THREE_POINT_WEIGHT = 0.20


@dataclass(frozen=True)
class TeamStatLine:
    """Per-team statistics supplied for one simulation run."""

    name: str
    conference: Optional[str]
    offensive_rating: float
    defensive_rating: float
    three_point_pct: float
    wins: int = 0
    losses: int = 0

    @property
    def record_str(self) -> str:
        return f"{self.wins}-{self.losses}"

    @property
    def win_pct(self) -> float:
        total = self.wins + self.losses
        if total == 0:
            return 0.0
        return self.wins / total

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "conference": self.conference,
            "offensive_rating": self.offensive_rating,
            "defensive_rating": self.defensive_rating,
            "three_point_pct": self.three_point_pct,
            "wins": self.wins,
            "losses": self.losses
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TeamStatLine':
        return cls(
            name=data["name"],
            conference=data.get("conference"),
            offensive_rating=data["offensive_rating"],
            defensive_rating=data["defensive_rating"],
            three_point_pct=data["three_point_pct"],
            wins=data.get("wins", 0),
            losses=data.get("losses", 0)
        )


@dataclass(frozen=True)
class WeightingConfig:
    """Weights for the three rating terms. Applied as-is, never normalized."""

    offensive_weight: float = DEFAULT_OFFENSIVE_WEIGHT
    defensive_weight: float = DEFAULT_DEFENSIVE_WEIGHT
    three_point_weight: float = DEFAULT_THREE_POINT_WEIGHT

    def to_dict(self) -> dict:
        return {
            "offensive_weight": self.offensive_weight,
            "defensive_weight": self.defensive_weight,
            "three_point_weight": self.three_point_weight
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WeightingConfig':
        return cls(
            offensive_weight=data.get("offensive_weight", DEFAULT_OFFENSIVE_WEIGHT),
            defensive_weight=data.get("defensive_weight", DEFAULT_DEFENSIVE_WEIGHT),
            three_point_weight=data.get("three_point_weight", DEFAULT_THREE_POINT_WEIGHT)
        )


@dataclass(frozen=True)
class RatedTeam:
    """A team's stat line plus its derived weighted rating."""

    stats: TeamStatLine
    weighted_rating: float

    @property
    def name(self) -> str:
        return self.stats.name

    @property
    def conference(self) -> Optional[str]:
        return self.stats.conference

    @property
    def wins(self) -> int:
        return self.stats.wins

    @property
    def losses(self) -> int:
        return self.stats.losses

    @property
    def win_pct(self) -> float:
        return self.stats.win_pct

    def __str__(self) -> str:
        return f"{self.name} ({self.weighted_rating:.4f})"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "conference": self.conference,
            "weighted_rating": self.weighted_rating,
            "wins": self.wins,
            "losses": self.losses,
            "stats": self.stats.to_dict()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'RatedTeam':
        return cls(
            stats=TeamStatLine.from_dict(data["stats"]),
            weighted_rating=data["weighted_rating"]
        )


@dataclass(frozen=True)
class GameRecord:
    """One game of a series."""

    game_number: int
    winner: str
    home_team: bool  # True when the first-named team had home court

    def to_dict(self) -> dict:
        return {
            "game_number": self.game_number,
            "winner": self.winner,
            "home_team": self.home_team
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'GameRecord':
        return cls(
            game_number=data["game_number"],
            winner=data["winner"],
            home_team=data["home_team"]
        )


@dataclass(frozen=True)
class SeriesResult:
    """A completed best-of-seven series."""

    team1: RatedTeam
    team2: RatedTeam
    winner: RatedTeam
    team1_wins: int
    team2_wins: int
    games: Tuple[GameRecord, ...]

    @property
    def loser(self) -> RatedTeam:
        return self.team2 if self.winner == self.team1 else self.team1

    @property
    def score_str(self) -> str:
        return f"{max(self.team1_wins, self.team2_wins)}-{min(self.team1_wins, self.team2_wins)}"

    def to_dict(self) -> dict:
        return {
            "team1": self.team1.to_dict(),
            "team2": self.team2.to_dict(),
            "winner": self.winner.to_dict(),
            "team1_wins": self.team1_wins,
            "team2_wins": self.team2_wins,
            "games": [g.to_dict() for g in self.games]
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SeriesResult':
        team1 = RatedTeam.from_dict(data["team1"])
        team2 = RatedTeam.from_dict(data["team2"])
        winner_name = data["winner"]["name"]
        return cls(
            team1=team1,
            team2=team2,
            winner=team1 if team1.name == winner_name else team2,
            team1_wins=data["team1_wins"],
            team2_wins=data["team2_wins"],
            games=tuple(GameRecord.from_dict(g) for g in data["games"])
        )


@dataclass(frozen=True)
class PlayInGame:
    """A single play-in game."""

    label: str  # "7v8", "9v10" or "final"
    team1: RatedTeam
    team2: RatedTeam
    winner: RatedTeam
    home_team: bool

    @property
    def loser(self) -> RatedTeam:
        return self.team2 if self.winner == self.team1 else self.team1

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "team1": self.team1.to_dict(),
            "team2": self.team2.to_dict(),
            "winner": self.winner.to_dict(),
            "home_team": self.home_team
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PlayInGame':
        team1 = RatedTeam.from_dict(data["team1"])
        team2 = RatedTeam.from_dict(data["team2"])
        return cls(
            label=data["label"],
            team1=team1,
            team2=team2,
            winner=team1 if team1.name == data["winner"]["name"] else team2,
            home_team=data["home_team"]
        )


@dataclass(frozen=True)
class PlayInResult:
    """Outcome of a conference play-in: the three games and the final 8 seeds."""

    games: Tuple[PlayInGame, ...]
    seeds: Tuple[RatedTeam, ...]
    eliminated: Tuple[RatedTeam, ...]

    @property
    def seventh_seed(self) -> RatedTeam:
        return self.seeds[6]

    @property
    def eighth_seed(self) -> RatedTeam:
        return self.seeds[7]

    def to_dict(self) -> dict:
        return {
            "games": [g.to_dict() for g in self.games],
            "seeds": [t.to_dict() for t in self.seeds],
            "eliminated": [t.to_dict() for t in self.eliminated]
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PlayInResult':
        return cls(
            games=tuple(PlayInGame.from_dict(g) for g in data["games"]),
            seeds=tuple(RatedTeam.from_dict(t) for t in data["seeds"]),
            eliminated=tuple(RatedTeam.from_dict(t) for t in data["eliminated"])
        )


@dataclass(frozen=True)
class RoundResult:
    """All series of one conference round."""

    round: int
    series: Tuple[SeriesResult, ...]

    @property
    def winners(self) -> Tuple[RatedTeam, ...]:
        return tuple(s.winner for s in self.series)

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "series": [s.to_dict() for s in self.series]
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'RoundResult':
        return cls(
            round=data["round"],
            series=tuple(SeriesResult.from_dict(s) for s in data["series"])
        )


@dataclass(frozen=True)
class ConferenceResult:
    """A conference's play-in, three rounds and champion."""

    name: str
    rounds: Tuple[RoundResult, ...]
    champion: RatedTeam
    play_in: Optional[PlayInResult] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "rounds": [r.to_dict() for r in self.rounds],
            "champion": self.champion.to_dict(),
            "play_in": self.play_in.to_dict() if self.play_in else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ConferenceResult':
        play_in = data.get("play_in")
        return cls(
            name=data["name"],
            rounds=tuple(RoundResult.from_dict(r) for r in data["rounds"]),
            champion=RatedTeam.from_dict(data["champion"]),
            play_in=PlayInResult.from_dict(play_in) if play_in else None
        )


@dataclass(frozen=True)
class SimulationResult:
    """The full result tree of one playoff run."""

    season: str
    date: datetime
    conferences: Tuple[ConferenceResult, ...]
    champion: RatedTeam
    weighting: WeightingConfig = field(default_factory=WeightingConfig)
    finals: Optional[SeriesResult] = None

    def conference(self, name: str) -> ConferenceResult:
        for conf in self.conferences:
            if conf.name == name:
                return conf
        raise KeyError(name)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "season": self.season,
            "date": self.date.isoformat(),
            "conferences": [c.to_dict() for c in self.conferences],
            "champion": self.champion.to_dict(),
            "weighting": self.weighting.to_dict(),
            "finals": self.finals.to_dict() if self.finals else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationResult':
        finals = data.get("finals")
        return cls(
            season=data["season"],
            date=datetime.fromisoformat(data["date"]),
            conferences=tuple(ConferenceResult.from_dict(c) for c in data["conferences"]),
            champion=RatedTeam.from_dict(data["champion"]),
            weighting=WeightingConfig.from_dict(data.get("weighting") or {}),
            finals=SeriesResult.from_dict(finals) if finals else None
        )
