"""Matching module for composite scoring, probability, strategic value and analysis."""

from scholarmatch.matching.analysis import (
    CompetitivePositioning,
    DimensionAnalysis,
    EligibilityAnalysis,
    EligibilityAnalyzer,
    GapAnalysis,
    OverallAssessment,
)
from scholarmatch.matching.composite import calculate_overall_score
from scholarmatch.matching.matcher import (
    MatchEngine,
    MatchScore,
    compute_eligibility_analysis,
    compute_match_score,
    compute_match_scores_batch,
)
from scholarmatch.matching.priority import PriorityTier, assign_priority_tier, get_tier_rationale
from scholarmatch.matching.probability import (
    SuccessTier,
    calculate_competition_factor,
    calculate_success_probability,
    calculate_success_probability_detailed,
    classify_success_tier,
)
from scholarmatch.matching.strategic import (
    EffortLevel,
    StrategicValueTier,
    calculate_strategic_value,
    calculate_strategic_value_with_match_boost,
    classify_strategic_value,
    estimate_effort_level,
    estimate_time_investment,
    format_strategic_value_display,
)

__all__ = [
    "CompetitivePositioning",
    "DimensionAnalysis",
    "EffortLevel",
    "EligibilityAnalysis",
    "EligibilityAnalyzer",
    "GapAnalysis",
    "MatchEngine",
    "MatchScore",
    "OverallAssessment",
    "PriorityTier",
    "StrategicValueTier",
    "SuccessTier",
    "assign_priority_tier",
    "calculate_competition_factor",
    "calculate_overall_score",
    "calculate_strategic_value",
    "calculate_strategic_value_with_match_boost",
    "calculate_success_probability",
    "calculate_success_probability_detailed",
    "classify_strategic_value",
    "classify_success_tier",
    "compute_eligibility_analysis",
    "compute_match_score",
    "compute_match_scores_batch",
    "estimate_effort_level",
    "estimate_time_investment",
    "format_strategic_value_display",
    "get_tier_rationale",
]
