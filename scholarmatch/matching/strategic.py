"""Application effort and strategic value.

Strategic value is the expected award, discounted by how much work the
application takes, on a 0-10 scale:

    expected = award * probability / 100
    adjusted = expected * effort_multiplier
    value    = min(adjusted / 1000, 10)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from scholarmatch.criteria import Scholarship


MAX_STRATEGIC_VALUE = 10.0
VALUE_SCALE = 1000.0
MATCH_BOOST = 0.1


class EffortLevel(str, Enum):
    """Estimated application effort."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


EFFORT_MULTIPLIERS = {
    EffortLevel.LOW: 1.0,
    EffortLevel.MEDIUM: 0.7,
    EffortLevel.HIGH: 0.4,
}

# Estimated hours to complete an application
TIME_INVESTMENT = {
    EffortLevel.LOW: (2, 3),
    EffortLevel.MEDIUM: (4, 6),
    EffortLevel.HIGH: (8, 12),
}


class StrategicValueTier(str, Enum):
    """Classification of strategic value."""
    BEST_BET = "BEST_BET"
    HIGH_VALUE = "HIGH_VALUE"
    MEDIUM_VALUE = "MEDIUM_VALUE"
    LOW_VALUE = "LOW_VALUE"


# (minimum value, tier, label, recommendation), checked top down
STRATEGIC_TIERS = [
    (5.0, StrategicValueTier.BEST_BET, "Best Bet",
     "Apply immediately - highest expected return per hour invested"),
    (3.0, StrategicValueTier.HIGH_VALUE, "High Value",
     "Strong opportunity worth pursuing after best bets"),
    (1.5, StrategicValueTier.MEDIUM_VALUE, "Medium Value",
     "Apply if time permits after higher priorities"),
    (float("-inf"), StrategicValueTier.LOW_VALUE, "Low Value",
     "Consider skipping unless special circumstances apply"),
]


@dataclass(frozen=True)
class EffortBreakdown:
    """Counts of application components."""
    essays: int
    documents: int
    recommendations: int

    def describe(self) -> str:
        """Return e.g. '2 essays, 1 doc' or 'no requirements'."""
        parts = []
        for count, noun in (
            (self.essays, "essay"),
            (self.documents, "doc"),
            (self.recommendations, "rec"),
        ):
            if count > 0:
                parts.append(f"{count} {noun}{'s' if count > 1 else ''}")
        return ", ".join(parts) if parts else "no requirements"

    def to_dict(self) -> Dict[str, int]:
        return {
            "essays": self.essays,
            "documents": self.documents,
            "recommendations": self.recommendations,
        }


@dataclass(frozen=True)
class EffortEstimate:
    """Effort level with the counts that produced it."""
    level: EffortLevel
    breakdown: EffortBreakdown
    multiplier: float

    @property
    def hours(self) -> Tuple[int, int]:
        return estimate_time_investment(self.level)


@dataclass(frozen=True)
class StrategicValueResult:
    """Strategic value with intermediate amounts (in dollars)."""
    strategic_value: float
    expected_value: float
    effort_adjusted_value: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "strategic_value": round(self.strategic_value, 2),
            "expected_value": round(self.expected_value, 2),
            "effort_adjusted_value": round(self.effort_adjusted_value, 2),
        }


@dataclass(frozen=True)
class StrategicValueClassification:
    """Strategic value tier with display metadata."""
    tier: StrategicValueTier
    value: float
    label: str
    recommendation: str


def count_essays(essay_prompts: Any) -> int:
    """Count essay prompts stored as a list or as a mapping with a 'prompts' list."""
    if not essay_prompts:
        return 0
    if isinstance(essay_prompts, list):
        return len(essay_prompts)
    if isinstance(essay_prompts, dict) and isinstance(essay_prompts.get("prompts"), list):
        return len(essay_prompts["prompts"])
    return 0


def estimate_effort_level(scholarship: Scholarship) -> EffortEstimate:
    """Estimate application effort from essays, documents and recommendations.

    HIGH: 3+ essays, 5+ documents or 2+ recommendations.
    MEDIUM: 2 essays, 3-4 documents or 1 recommendation.
    LOW: everything else.
    """
    essays = count_essays(scholarship.essay_prompts)
    documents = len(scholarship.required_documents)
    recommendations = scholarship.recommendation_count or 0
    breakdown = EffortBreakdown(essays, documents, recommendations)

    if essays >= 3 or documents >= 5 or recommendations >= 2:
        level = EffortLevel.HIGH
    elif essays >= 2 or 3 <= documents <= 4 or recommendations >= 1:
        level = EffortLevel.MEDIUM
    else:
        level = EffortLevel.LOW

    return EffortEstimate(level, breakdown, EFFORT_MULTIPLIERS[level])


def estimate_time_investment(level: EffortLevel) -> Tuple[int, int]:
    """Return the (min, max) hours an application at this effort level takes."""
    return TIME_INVESTMENT[level]


def calculate_strategic_value(
    award_amount: float,
    success_probability: float,
    effort_level: EffortLevel,
) -> StrategicValueResult:
    """Calculate effort-adjusted expected value on a 0-10 scale.

    Args:
        award_amount: Award in dollars
        success_probability: Probability of winning (0-100)
        effort_level: Estimated application effort

    Returns:
        StrategicValueResult; all zeros when the award or probability is not positive
    """
    if award_amount <= 0 or success_probability <= 0:
        return StrategicValueResult(0.0, 0.0, 0.0)

    expected_value = award_amount * (success_probability / 100)
    effort_adjusted_value = expected_value * EFFORT_MULTIPLIERS[effort_level]
    strategic_value = min(effort_adjusted_value / VALUE_SCALE, MAX_STRATEGIC_VALUE)

    return StrategicValueResult(strategic_value, expected_value, effort_adjusted_value)


def calculate_strategic_value_with_match_boost(
    award_amount: float,
    success_probability: float,
    effort_level: EffortLevel,
    match_score: float,
) -> StrategicValueResult:
    """Strategic value boosted by up to 10% for strong matches, still capped at 10."""
    base = calculate_strategic_value(award_amount, success_probability, effort_level)
    boost = 1 + (match_score / 100) * MATCH_BOOST
    return StrategicValueResult(
        strategic_value=min(base.strategic_value * boost, MAX_STRATEGIC_VALUE),
        expected_value=base.expected_value,
        effort_adjusted_value=base.effort_adjusted_value * boost,
    )


def classify_strategic_value(strategic_value: float) -> StrategicValueClassification:
    """Classify a strategic value into a tier."""
    for minimum, tier, label, recommendation in STRATEGIC_TIERS:
        if strategic_value >= minimum:
            return StrategicValueClassification(tier, strategic_value, label, recommendation)
    # Only NaN reaches this point
    _, tier, label, recommendation = STRATEGIC_TIERS[-1]
    return StrategicValueClassification(tier, strategic_value, label, recommendation)


def format_strategic_value_display(
    tier: StrategicValueTier,
    award_amount: float,
    success_probability: float,
    effort: EffortEstimate,
) -> str:
    """Return a one-line summary of a strategic value result.

    Example:
        "Strategic Value: Best Bet - $5,000 award, 72% success probability,
        LOW effort (1 essay)"
    """
    label = next(entry[2] for entry in STRATEGIC_TIERS if entry[1] == tier)
    return (
        f"Strategic Value: {label} - ${award_amount:,.0f} award, "
        f"{round(success_probability)}% success probability, "
        f"{effort.level.value} effort ({effort.breakdown.describe()})"
    )
