"""Academic dimension scorer: GPA, SAT, ACT and class rank."""

from typing import List, Optional

from scholarmatch.criteria import AcademicCriteria
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionScorer,
    MatchStatus,
    maximum_score,
    minimum_score,
    status_for,
)


class AcademicScorer(DimensionScorer):
    """Scores GPA, standardized tests and class rank.

    Without a class rank requirement the split is GPA 40%, SAT 30%, ACT 30%.
    When a class rank requirement is present the split becomes GPA 40%,
    rank 30% and the better of SAT/ACT 30%. In both cases the weights are
    renormalized over the components whose criteria are present.
    """

    WEIGHT_GPA = 0.4
    WEIGHT_SAT = 0.3
    WEIGHT_ACT = 0.3
    WEIGHT_RANK = 0.3
    WEIGHT_BEST_TEST = 0.3

    # Penalty points per unit above a maximum
    GPA_OVERAGE_PENALTY = 20      # per GPA point
    SAT_OVERAGE_PENALTY = 0.1     # per SAT point (1 per 10 points)
    ACT_OVERAGE_PENALTY = 10      # per ACT point

    @property
    def name(self) -> str:
        return "academic"

    @property
    def label(self) -> str:
        return "Academic"

    def _check_criteria(
        self, profile: StudentProfile, criteria: AcademicCriteria
    ) -> List[CriterionCheck]:
        academic = profile.academic
        checks: List[CriterionCheck] = []

        if criteria.min_gpa is not None or criteria.max_gpa is not None:
            checks.append(self._check_range(
                "gpa",
                academic.gpa_on_four_scale,
                criteria.min_gpa,
                criteria.max_gpa,
                self.GPA_OVERAGE_PENALTY,
                self.WEIGHT_GPA,
            ))

        if criteria.min_sat is not None or criteria.max_sat is not None:
            checks.append(self._check_range(
                "sat",
                academic.sat_score,
                criteria.min_sat,
                criteria.max_sat,
                self.SAT_OVERAGE_PENALTY,
                self.WEIGHT_SAT,
            ))

        if criteria.min_act is not None or criteria.max_act is not None:
            checks.append(self._check_range(
                "act",
                academic.act_score,
                criteria.min_act,
                criteria.max_act,
                self.ACT_OVERAGE_PENALTY,
                self.WEIGHT_ACT,
            ))

        if criteria.class_rank_percentile is not None:
            checks.append(self._check_class_rank(profile, criteria.class_rank_percentile))

        return checks

    def _check_range(
        self,
        key: str,
        value: Optional[float],
        minimum: Optional[float],
        maximum: Optional[float],
        penalty_per_unit: float,
        weight: float,
    ) -> CriterionCheck:
        """Check a value against an optional minimum and optional maximum."""
        required = minimum if minimum is not None else maximum
        if value is None:
            return CriterionCheck(key, 0.0, weight, MatchStatus.UNKNOWN, None, required)

        gap = None
        if minimum is not None and value < minimum:
            score = minimum_score(value, minimum)
            gap = minimum - value
        elif maximum is not None and value > maximum:
            score = maximum_score(value, maximum, penalty_per_unit)
            required = maximum
        else:
            score = 100.0

        return CriterionCheck(key, score, weight, status_for(score, value), value, required, gap)

    def _check_class_rank(self, profile: StudentProfile, required_percentile: float) -> CriterionCheck:
        """Check class rank as a top-percent position.

        Rank 15 of 100 is the top 15%; a requirement of 10 means top 10%.
        """
        rank = profile.academic.class_rank
        size = profile.academic.class_size
        if rank is None or not size:
            return CriterionCheck(
                "class_rank", 0.0, self.WEIGHT_RANK, MatchStatus.UNKNOWN, None, required_percentile
            )

        percentile = rank / size * 100
        if percentile <= required_percentile:
            score = 100.0
        else:
            score = max(0.0, required_percentile / percentile * 100)

        return CriterionCheck(
            "class_rank",
            score,
            self.WEIGHT_RANK,
            status_for(score, percentile),
            percentile,
            required_percentile,
            percentile - required_percentile if percentile > required_percentile else None,
        )

    def _combine(self, checks: List[CriterionCheck]) -> float:
        by_key = {c.key: c for c in checks}
        rank = by_key.get("class_rank")
        if rank is None:
            return super()._combine(checks)

        components = []
        if "gpa" in by_key:
            components.append((by_key["gpa"].score, self.WEIGHT_GPA))
        components.append((rank.score, self.WEIGHT_RANK))
        tests = [by_key[k].score for k in ("sat", "act") if k in by_key]
        if tests:
            components.append((max(tests), self.WEIGHT_BEST_TEST))

        total_weight = sum(weight for _, weight in components)
        return sum(score * weight for score, weight in components) / total_weight
