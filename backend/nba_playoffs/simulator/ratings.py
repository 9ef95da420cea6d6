"""
Weighted team ratings.

rating = offensive_rating * offensive_weight
       + (1 / defensive_rating) * defensive_weight
       + three_point_pct * three_point_weight

The defensive term is inverted because a lower defensive rating is better,
so a higher weighted rating is uniformly better.
"""

import math
from typing import Iterable, List, Optional

from .errors import InvalidStatError, InvalidWeightingError
from .models import TeamStatLine, WeightingConfig, RatedTeam


CONFERENCES = ("Eastern", "Western")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_weighting(weighting: WeightingConfig) -> None:
    """Reject negative or non-numeric weights. Weights are not normalized."""
    for name, value in weighting.to_dict().items():
        if not _is_number(value):
            raise InvalidWeightingError(f"{name} must be a finite number, got {value!r}")
        if value < 0:
            raise InvalidWeightingError(f"{name} must be non-negative, got {value}")


def compute_weighted_rating(stats: TeamStatLine, weighting: WeightingConfig) -> float:
    """Compute a single team's weighted rating."""
    validate_weighting(weighting)

    for name in ("offensive_rating", "defensive_rating", "three_point_pct"):
        value = getattr(stats, name)
        if not _is_number(value):
            raise InvalidStatError(f"{stats.name}: {name} must be a finite number, got {value!r}")

    if stats.defensive_rating == 0:
        raise InvalidStatError(f"{stats.name}: defensive rating is zero, rating is undefined")

    return (
        stats.offensive_rating * weighting.offensive_weight
        + (1 / stats.defensive_rating) * weighting.defensive_weight
        + stats.three_point_pct * weighting.three_point_weight
    )


def compute_ratings(
    stats: Iterable[TeamStatLine],
    weighting: Optional[WeightingConfig] = None
) -> List[RatedTeam]:
    """
    Rate every team in a stat set.

    Args:
        stats: One stat line per team
        weighting: Weights to apply (defaults to 0.30 / 0.50 / 0.20)

    Returns:
        Rated teams, in input order

    Raises:
        InvalidWeightingError: If any weight is negative
        InvalidStatError: If a line has a zero defensive rating, a blank name,
            a missing or unknown conference, or duplicates another team
    """
    if weighting is None:
        weighting = WeightingConfig()
    validate_weighting(weighting)

    rated = []
    seen = set()
    for line in stats:
        if not line.name or not line.name.strip():
            raise InvalidStatError("Team name is required")
        if line.name in seen:
            raise InvalidStatError(f"Duplicate stat line for team {line.name}")
        seen.add(line.name)

        if not line.conference:
            raise InvalidStatError(f"Conference missing for team {line.name}")
        if line.conference not in CONFERENCES:
            raise InvalidStatError(
                f"Unknown conference {line.conference!r} for team {line.name}. "
                f"Expected one of: {', '.join(CONFERENCES)}"
            )

        rated.append(RatedTeam(
            stats=line,
            weighted_rating=compute_weighted_rating(line, weighting)
        ))

    return rated
