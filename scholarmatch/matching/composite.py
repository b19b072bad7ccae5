"""Composite match score calculation."""

from typing import Dict, Optional

from scholarmatch.config import DEFAULT_WEIGHTS, ScoringWeights
from scholarmatch.scorers.base import round_half_up


def calculate_overall_score(
    dimension_scores: Dict[str, int],
    weights: Optional[ScoringWeights] = None,
) -> int:
    """Combine the six dimension scores into the overall match score.

    overall = round(sum(score_i * weight_i))

    Args:
        dimension_scores: Score per dimension key (academic, demographic,
            major_field, experience, financial, special)
        weights: Dimension weights (default: DEFAULT_WEIGHTS)

    Returns:
        Overall score from 0 to 100
    """
    if weights is None:
        weights = DEFAULT_WEIGHTS

    total = sum(
        dimension_scores[dimension] * weight
        for dimension, weight in weights.as_dict().items()
    )
    return min(100, max(0, round_half_up(total)))
