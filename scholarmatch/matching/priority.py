"""Priority tier assignment for scholarship matches."""

from enum import Enum

from scholarmatch.scorers.base import round_half_up


class PriorityTier(str, Enum):
    """How urgently a student should apply."""
    MUST_APPLY = "MUST_APPLY"
    SHOULD_APPLY = "SHOULD_APPLY"
    HIGH_VALUE_REACH = "HIGH_VALUE_REACH"
    IF_TIME_PERMITS = "IF_TIME_PERMITS"

    @property
    def order(self) -> int:
        """Sort position, most urgent first."""
        return list(PriorityTier).index(self)


MUST_APPLY_MATCH = 90
MUST_APPLY_PROBABILITY = 0.7
MUST_APPLY_STRATEGIC_VALUE = 3.0
SHOULD_APPLY_MATCH = 75
SHOULD_APPLY_PROBABILITY = 0.4
HIGH_VALUE_AWARD = 10000
HIGH_VALUE_MAX_PROBABILITY = 0.25

_RATIONALE_SUFFIX = {
    PriorityTier.MUST_APPLY: "Exceptional match with high probability and strong ROI",
    PriorityTier.SHOULD_APPLY: "Strong match with competitive probability",
    PriorityTier.HIGH_VALUE_REACH: "High-value opportunity worth the calculated risk",
    PriorityTier.IF_TIME_PERMITS: "Decent match, apply if time allows",
}


def assign_priority_tier(
    match_score: float,
    success_probability: float,
    strategic_value: float,
    award_amount: float,
) -> PriorityTier:
    """Assign a priority tier.

    Args:
        match_score: Overall match score (0-100)
        success_probability: Probability of success as a fraction (0.0-1.0)
        strategic_value: Strategic value (0-10)
        award_amount: Award in dollars

    Returns:
        MUST_APPLY (match >= 90, probability >= 0.7, value >= 3.0),
        SHOULD_APPLY (match >= 75, probability >= 0.4),
        HIGH_VALUE_REACH (award >= $10,000, probability < 0.25),
        otherwise IF_TIME_PERMITS
    """
    if (
        match_score >= MUST_APPLY_MATCH
        and success_probability >= MUST_APPLY_PROBABILITY
        and strategic_value >= MUST_APPLY_STRATEGIC_VALUE
    ):
        return PriorityTier.MUST_APPLY

    if match_score >= SHOULD_APPLY_MATCH and success_probability >= SHOULD_APPLY_PROBABILITY:
        return PriorityTier.SHOULD_APPLY

    if award_amount >= HIGH_VALUE_AWARD and success_probability < HIGH_VALUE_MAX_PROBABILITY:
        return PriorityTier.HIGH_VALUE_REACH

    return PriorityTier.IF_TIME_PERMITS


def get_tier_rationale(
    tier: PriorityTier,
    match_score: float,
    success_probability: float,
    strategic_value: float,
    award_amount: float,
) -> str:
    """Explain a tier assignment in one line.

    Example:
        "MUST_APPLY: 94 match, $5,000 award, 72% success probability,
        5.0 strategic value - Exceptional match with high probability and strong ROI"
    """
    base = (
        f"{round_half_up(match_score)} match, ${award_amount:,.0f} award, "
        f"{round_half_up(success_probability * 100)}% success probability"
    )
    if tier == PriorityTier.MUST_APPLY:
        base += f", {strategic_value:.1f} strategic value"
    return f"{tier.value}: {base} - {_RATIONALE_SUFFIX[tier]}"
