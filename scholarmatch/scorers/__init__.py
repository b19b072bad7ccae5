"""Dimension scorers for profile-to-criteria compatibility."""

from typing import List, Optional

from scholarmatch.scorers.academic import AcademicScorer
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionEvaluation,
    DimensionScorer,
    MatchStatus,
    round_half_up,
)
from scholarmatch.scorers.demographic import DemographicScorer
from scholarmatch.scorers.experience import ExperienceScorer
from scholarmatch.scorers.financial import FinancialScorer
from scholarmatch.scorers.major_field import MajorFieldScorer
from scholarmatch.scorers.special import SpecialCriteriaScorer


def build_scorers(reference_year: Optional[int] = None) -> List[DimensionScorer]:
    """Create one scorer per dimension, in composite weight order."""
    return [
        AcademicScorer(),
        DemographicScorer(reference_year=reference_year),
        MajorFieldScorer(),
        ExperienceScorer(),
        FinancialScorer(),
        SpecialCriteriaScorer(),
    ]


__all__ = [
    "AcademicScorer",
    "CriterionCheck",
    "DemographicScorer",
    "DimensionEvaluation",
    "DimensionScorer",
    "ExperienceScorer",
    "FinancialScorer",
    "MajorFieldScorer",
    "MatchStatus",
    "SpecialCriteriaScorer",
    "build_scorers",
    "round_half_up",
]
