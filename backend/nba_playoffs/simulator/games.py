"""
Single game resolution.

Win probability is the ratio of effective ratings:

    p(A) = effA / (effA + effB)

where each effective rating is the weighted rating plus a shared luck term
and, for the home side, a fixed home court bonus.
"""

from typing import Optional

from .errors import InvalidRatingError
from .models import RatedTeam
from .rng import RandomSource


HOME_COURT_BONUS = 0.03
LUCK_RANGE = 0.02  # luck is uniform on [-LUCK_RANGE, LUCK_RANGE]


def draw_luck(rng: RandomSource) -> float:
    """One uniform draw on [-LUCK_RANGE, LUCK_RANGE]."""
    return rng.random() * (2 * LUCK_RANGE) - LUCK_RANGE


def win_probability(
    team_a: RatedTeam,
    team_b: RatedTeam,
    team_a_home: Optional[bool] = None,
    luck: float = 0.0
) -> float:
    """
    Probability that team A beats team B.

    Args:
        team_a: First-named team
        team_b: Second-named team
        team_a_home: True if A hosts, False if B hosts, None for a neutral court
        luck: Shared luck term added to both sides

    Raises:
        InvalidRatingError: If the effective ratings don't sum to a positive value
    """
    eff_a = team_a.weighted_rating + luck + (HOME_COURT_BONUS if team_a_home is True else 0.0)
    eff_b = team_b.weighted_rating + luck + (HOME_COURT_BONUS if team_a_home is False else 0.0)

    total = eff_a + eff_b
    if total <= 0:
        raise InvalidRatingError(
            f"Effective ratings for {team_a.name} ({eff_a:.4f}) and "
            f"{team_b.name} ({eff_b:.4f}) must sum to a positive value"
        )
    return eff_a / total


def simulate_game(
    team_a: RatedTeam,
    team_b: RatedTeam,
    rng: RandomSource,
    team_a_home: Optional[bool] = None,
    use_luck_factor: bool = False
) -> RatedTeam:
    """
    Resolve one game and return the winner.

    Draws once for luck (when enabled) and once for the outcome, in that order.
    """
    luck = draw_luck(rng) if use_luck_factor else 0.0
    p_a = win_probability(team_a, team_b, team_a_home, luck)
    return team_a if rng.random() < p_a else team_b
