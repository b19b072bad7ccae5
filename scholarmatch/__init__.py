"""ScholarMatch - scholarship match scoring engine."""

from scholarmatch.criteria import EligibilityCriteria, Scholarship, parse_eligibility_criteria
from scholarmatch.errors import MalformedCriteriaError, MissingProfileError, ScholarMatchError
from scholarmatch.matching import (
    EligibilityAnalysis,
    MatchEngine,
    MatchScore,
    compute_eligibility_analysis,
    compute_match_score,
    compute_match_scores_batch,
)
from scholarmatch.profile import StudentProfile
from scholarmatch.profile.strength import StrengthBreakdown, calculate_strength_breakdown

__version__ = "0.1.0"

__all__ = [
    "EligibilityAnalysis",
    "EligibilityCriteria",
    "MalformedCriteriaError",
    "MatchEngine",
    "MatchScore",
    "MissingProfileError",
    "ScholarMatchError",
    "Scholarship",
    "StrengthBreakdown",
    "StudentProfile",
    "calculate_strength_breakdown",
    "compute_eligibility_analysis",
    "compute_match_score",
    "compute_match_scores_batch",
    "parse_eligibility_criteria",
]
