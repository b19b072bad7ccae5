"""Demographic dimension scorer."""

from datetime import date
from typing import List, Optional

from scholarmatch.criteria import DemographicCriteria
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionScorer,
    MatchStatus,
    clamp_score,
    is_any,
    normalize,
    status_for,
)

IN_STATE = "in-state"


def estimate_age(graduation_year: Optional[int], reference_year: int) -> Optional[int]:
    """Estimate age assuming high school graduation at 18."""
    if graduation_year is None:
        return None
    return reference_year - (graduation_year - 18)


class DemographicScorer(DimensionScorer):
    """Scores gender, ethnicity, location, age and residency requirements.

    Every present sub-criterion carries equal weight.
    """

    AGE_OVERAGE_PENALTY = 10  # points per year above the maximum age

    def __init__(self, reference_year: Optional[int] = None):
        """Initialize the scorer.

        Args:
            reference_year: Year used to estimate age (default: current year)
        """
        self.reference_year = reference_year

    @property
    def name(self) -> str:
        return "demographic"

    @property
    def label(self) -> str:
        return "Demographic"

    def _check_criteria(
        self, profile: StudentProfile, criteria: DemographicCriteria
    ) -> List[CriterionCheck]:
        demographics = profile.demographics
        checks: List[CriterionCheck] = []

        if not is_any(criteria.required_gender):
            gender = demographics.gender
            score = 100.0 if normalize(gender) == normalize(criteria.required_gender) else 0.0
            checks.append(CriterionCheck(
                "gender", score, 1.0, status_for(score, gender), gender, criteria.required_gender,
            ))

        if criteria.required_ethnicity:
            student = {normalize(e) for e in demographics.ethnicity}
            required = {normalize(e) for e in criteria.required_ethnicity}
            score = 100.0 if student & required else 0.0
            checks.append(CriterionCheck(
                "ethnicity",
                score,
                1.0,
                status_for(score, demographics.ethnicity or None),
                demographics.ethnicity or None,
                criteria.required_ethnicity,
            ))

        if criteria.required_state:
            checks.append(self._check_membership("state", demographics.state, criteria.required_state))

        if criteria.required_city:
            checks.append(self._check_membership("city", demographics.city, criteria.required_city))

        if criteria.age_min is not None or criteria.age_max is not None:
            checks.append(self._check_age(profile, criteria))

        if not is_any(criteria.residency_required):
            checks.append(self._check_residency(profile, criteria))

        return checks

    def _check_membership(self, key: str, value: Optional[str], accepted: List[str]) -> CriterionCheck:
        score = 100.0 if normalize(value) in {normalize(a) for a in accepted} else 0.0
        return CriterionCheck(key, score, 1.0, status_for(score, value), value, accepted)

    def _check_age(self, profile: StudentProfile, criteria: DemographicCriteria) -> CriterionCheck:
        """Check estimated age against the age window.

        Below the minimum scores proportionally; above the maximum loses
        10 points per year.
        """
        reference_year = self.reference_year or date.today().year
        age = estimate_age(profile.academic.graduation_year, reference_year)
        required = {"min": criteria.age_min, "max": criteria.age_max}
        if age is None:
            return CriterionCheck("age", 0.0, 1.0, MatchStatus.UNKNOWN, None, required)

        gap = None
        if criteria.age_min is not None and age < criteria.age_min:
            score = clamp_score(age / criteria.age_min * 100) if criteria.age_min > 0 else 100.0
            gap = criteria.age_min - age
        elif criteria.age_max is not None and age > criteria.age_max:
            score = clamp_score(100 - (age - criteria.age_max) * self.AGE_OVERAGE_PENALTY)
        else:
            score = 100.0
        return CriterionCheck("age", score, 1.0, status_for(score, age), age, required, gap)

    def _check_residency(self, profile: StudentProfile, criteria: DemographicCriteria) -> CriterionCheck:
        """Check in-state or out-of-state residency against the required states."""
        state = profile.demographics.state
        requirement = criteria.residency_required
        if not state:
            return CriterionCheck("residency", 0.0, 1.0, MatchStatus.UNKNOWN, None, requirement)

        listed = normalize(state) in {normalize(s) for s in criteria.required_state}
        kind = normalize(requirement)
        if kind == IN_STATE:
            met = listed or not criteria.required_state
        else:
            met = not listed
        score = 100.0 if met else 0.0
        return CriterionCheck("residency", score, 1.0, status_for(score, state), state, requirement)
