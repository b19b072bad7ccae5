"""Success probability estimation.

The probability of winning starts from match quality, is dampened by how
competitive the scholarship is, and is shifted by overall profile strength:

    p = (match / 100) * competition_factor + (strength - 50) / 100

clamped to [0.05, 0.95] so no result claims certainty either way.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from scholarmatch.criteria import Scholarship
from scholarmatch.scorers.base import round_half_up


DEFAULT_COMPETITION_FACTOR = 0.3
MIN_COMPETITION_FACTOR = 0.05
MAX_COMPETITION_FACTOR = 0.95
MAX_POOL_COMPETITION_FACTOR = 0.8

MIN_PROBABILITY = 0.05
MAX_PROBABILITY = 0.95
NEUTRAL_STRENGTH = 50.0


class SuccessTier(str, Enum):
    """Coarse classification of success probability."""
    STRONG_MATCH = "STRONG_MATCH"
    COMPETITIVE_MATCH = "COMPETITIVE_MATCH"
    REACH = "REACH"
    LONG_SHOT = "LONG_SHOT"


# (minimum probability, tier, label, description), checked top down
SUCCESS_TIERS = [
    (70, SuccessTier.STRONG_MATCH, "Strong Match", "Apply immediately, high confidence"),
    (40, SuccessTier.COMPETITIVE_MATCH, "Competitive Match", "Solid opportunity, worth effort"),
    (10, SuccessTier.REACH, "Reach", "Long shot, but possible"),
    (0, SuccessTier.LONG_SHOT, "Long-Shot", "Very competitive, consider if high value"),
]


@dataclass(frozen=True)
class SuccessTierResult:
    """Success tier with display metadata."""
    tier: SuccessTier
    probability: int
    label: str
    description: str

    def display(self) -> str:
        """Return e.g. '72% success probability - Strong Match'."""
        return f"{self.probability}% success probability - {self.label}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.value,
            "probability": self.probability,
            "label": self.label,
            "description": self.description,
        }


@dataclass(frozen=True)
class ProbabilityBreakdown:
    """Intermediate values of the success probability calculation."""
    final_probability: int        # Clamped result (0-100)
    base_probability: int         # Match score
    after_competition: int        # Percent after competition adjustment
    after_strength_adjustment: int  # Percent before clamping
    competition_factor: float
    strength_adjustment: int      # Percentage points added for profile strength

    def to_dict(self) -> Dict[str, Any]:
        return {
            "final_probability": self.final_probability,
            "base_probability": self.base_probability,
            "after_competition": self.after_competition,
            "after_strength_adjustment": self.after_strength_adjustment,
            "competition_factor": self.competition_factor,
            "strength_adjustment": self.strength_adjustment,
        }


def calculate_competition_factor(scholarship: Scholarship) -> float:
    """Estimate how winnable a scholarship is from its metadata.

    Uses the acceptance rate when known, otherwise the ratio of awards to
    applicants, otherwise a moderate default.

    Args:
        scholarship: Scholarship with optional competition metadata

    Returns:
        Factor between 0.05 (very competitive) and 0.95
    """
    if scholarship.acceptance_rate is not None:
        return min(MAX_COMPETITION_FACTOR, max(MIN_COMPETITION_FACTOR, scholarship.acceptance_rate))

    if scholarship.applicant_pool_size is not None:
        pool = scholarship.applicant_pool_size
        awards = scholarship.number_of_awards if scholarship.number_of_awards is not None else 1
        if pool <= 0:
            return DEFAULT_COMPETITION_FACTOR
        if awards <= 0:
            return MIN_COMPETITION_FACTOR
        return max(MIN_COMPETITION_FACTOR, min(MAX_POOL_COMPETITION_FACTOR, awards * 100 / pool))

    return DEFAULT_COMPETITION_FACTOR


def _raw_probability(match_score: float, competition_factor: float, strength: float) -> float:
    return (match_score / 100) * competition_factor + (strength - NEUTRAL_STRENGTH) / 100


def calculate_success_probability(
    match_score: float,
    competition_factor: float,
    strength_score: Optional[float] = None,
) -> int:
    """Calculate the probability of winning as a percentage.

    Args:
        match_score: Overall match score (0-100)
        competition_factor: Result of calculate_competition_factor()
        strength_score: Profile strength (0-100); None counts as average (50)

    Returns:
        Probability from 5 to 95
    """
    strength = NEUTRAL_STRENGTH if strength_score is None else strength_score
    probability = _raw_probability(match_score, competition_factor, strength)
    clamped = max(MIN_PROBABILITY, min(MAX_PROBABILITY, probability))
    return round_half_up(clamped * 100)


def calculate_success_probability_detailed(
    match_score: float,
    competition_factor: float,
    strength_score: Optional[float] = None,
) -> ProbabilityBreakdown:
    """Same as calculate_success_probability() but keeps every step."""
    strength = NEUTRAL_STRENGTH if strength_score is None else strength_score
    after_competition = (match_score / 100) * competition_factor
    strength_adjustment = (strength - NEUTRAL_STRENGTH) / 100
    adjusted = after_competition + strength_adjustment

    return ProbabilityBreakdown(
        final_probability=calculate_success_probability(match_score, competition_factor, strength),
        base_probability=round_half_up(match_score),
        after_competition=round_half_up(after_competition * 100),
        after_strength_adjustment=round_half_up(adjusted * 100),
        competition_factor=round(competition_factor, 2),
        strength_adjustment=round_half_up(strength_adjustment * 100),
    )


def classify_success_tier(probability: int) -> SuccessTierResult:
    """Classify a success probability (0-100) into a tier."""
    for minimum, tier, label, description in SUCCESS_TIERS:
        if probability >= minimum:
            return SuccessTierResult(tier, probability, label, description)
    # Negative input falls through every threshold
    _, tier, label, description = SUCCESS_TIERS[-1]
    return SuccessTierResult(tier, probability, label, description)
