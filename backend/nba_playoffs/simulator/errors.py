"""
Exceptions raised by the bracket simulation engine.

Every error carries the stage of the run it came from ("rating computation",
"play-in", "round 2", "finals", ...). Lower-level functions raise without a
stage; the engine fills it in before re-raising.
"""

from typing import Optional


class SimulationError(Exception):
    """Base class for all simulation failures."""

    kind = "SimulationError"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"{self.kind} during {self.stage}: {self.message}"
        return f"{self.kind}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "stage": self.stage,
            "message": self.message
        }


class InvalidStatError(SimulationError):
    """Raised when a team stat line can't be rated (zero divisor, missing conference, ...)."""

    kind = "InvalidStat"


class InvalidWeightingError(SimulationError):
    """Raised when a weighting config has a negative or non-numeric weight."""

    kind = "InvalidWeighting"


class InvalidRatingError(SimulationError):
    """Raised when two effective ratings don't sum to a positive number."""

    kind = "InvalidRating"


class MissingTeamDataError(SimulationError):
    """Raised when a team is absent or unrated before a series starts."""

    kind = "MissingTeamData"


class InsufficientTeamsError(SimulationError):
    """Raised when a conference can't fill the play-in or the bracket."""

    kind = "InsufficientTeams"


class PairingError(SimulationError):
    """Raised when a round is left with an odd number of teams."""

    kind = "PairingError"
