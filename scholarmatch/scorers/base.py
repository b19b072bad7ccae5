"""Base class and shared helpers for the six dimension scorers."""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from scholarmatch.criteria import EligibilityCriteria
from scholarmatch.profile.models import StudentProfile

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    """Status of a single sub-criterion check."""
    MATCHED = "matched"      # Student meets requirement
    PARTIAL = "partial"      # Student partially meets requirement
    UNMATCHED = "unmatched"  # Student doesn't meet requirement
    UNKNOWN = "unknown"      # Student value missing, scored as 0
    NOT_APPLICABLE = "n/a"   # Criterion stated but not required


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    The built-in round() uses banker's rounding, which would score 82.5 as 82.
    """
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    return min(100.0, max(0.0, value))


def minimum_score(value: float, minimum: float) -> float:
    """Score a value against a minimum threshold.

    Meeting the minimum scores 100, falling short scores proportionally.
    """
    if value >= minimum or minimum <= 0:
        return 100.0
    return clamp_score(value / minimum * 100)


def maximum_score(value: float, maximum: float, penalty_per_unit: float) -> float:
    """Score a value against a maximum with a linear penalty per unit of overage."""
    if value <= maximum:
        return 100.0
    return clamp_score(100 - (value - maximum) * penalty_per_unit)


def status_for(score: float, student_value: Any = None) -> MatchStatus:
    """Derive a match status from a sub-score and the student's value."""
    if student_value is None:
        return MatchStatus.UNKNOWN
    if score >= 100:
        return MatchStatus.MATCHED
    if score > 0:
        return MatchStatus.PARTIAL
    return MatchStatus.UNMATCHED


def normalize(text: Optional[str]) -> str:
    """Lower-case and trim a string for case-insensitive comparison."""
    if text is None:
        return ""
    return text.strip().casefold()


def is_any(text: Optional[str]) -> bool:
    return normalize(text) in ("", "any")


@dataclass
class CriterionCheck:
    """Result of checking one sub-criterion."""
    key: str                            # Sub-criterion identifier, e.g. "gpa"
    score: float                        # Sub-score (0-100) before rounding
    weight: float                       # Relative weight within the dimension
    status: MatchStatus
    student_value: Any = None           # Student's value for this field
    required_value: Any = None          # Threshold or accepted values
    gap: Optional[float] = None         # Amount still needed to meet the requirement

    @property
    def counts_as_criterion(self) -> bool:
        return self.status != MatchStatus.NOT_APPLICABLE

    @property
    def met(self) -> bool:
        return self.status == MatchStatus.MATCHED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "score": round(self.score, 1),
            "weight": self.weight,
            "status": self.status.value,
            "student_value": self.student_value,
            "required_value": self.required_value,
            "gap": self.gap,
        }


@dataclass
class DimensionEvaluation:
    """Score for one dimension with the checks that produced it."""
    dimension: str
    score: int
    criteria_present: bool = False
    checks: List[CriterionCheck] = field(default_factory=list)

    def get(self, key: str) -> Optional[CriterionCheck]:
        for check in self.checks:
            if check.key == key:
                return check
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "score": self.score,
            "criteria_present": self.criteria_present,
            "checks": [c.to_dict() for c in self.checks],
        }


class DimensionScorer(ABC):
    """Abstract base class for dimension scorers.

    A scorer maps a profile and its dimension's criteria group to a score in
    [0, 100]. An absent criteria group, or a group with no sub-criteria set,
    scores 100. Missing student data scores 0 for the affected sub-criterion.
    Sub-scores are combined by weighted average and rounded once at the end.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the dimension key, e.g. "academic"."""
        pass

    @property
    @abstractmethod
    def label(self) -> str:
        """Return the human-readable dimension name, e.g. "Academic"."""
        pass

    def criteria_for(self, criteria: EligibilityCriteria) -> Any:
        """Return this dimension's criteria group from the full criteria."""
        return getattr(criteria, self.name)

    def score(self, profile: StudentProfile, criteria: Any) -> int:
        """Score a profile against this dimension's criteria group.

        Args:
            profile: Student profile
            criteria: The dimension's criteria group, or None

        Returns:
            Integer score from 0 to 100
        """
        return self.evaluate(profile, criteria).score

    def evaluate(self, profile: StudentProfile, criteria: Any) -> DimensionEvaluation:
        """Score a profile and keep the per-criterion checks."""
        if criteria is None:
            return DimensionEvaluation(dimension=self.name, score=100)

        checks = self._check_criteria(profile, criteria)
        if not checks:
            return DimensionEvaluation(dimension=self.name, score=100, criteria_present=True)

        score = round_half_up(clamp_score(self._combine(checks)))
        logger.debug(f"[{self.name}] {len(checks)} checks -> {score}")
        return DimensionEvaluation(
            dimension=self.name,
            score=score,
            criteria_present=True,
            checks=checks,
        )

    @abstractmethod
    def _check_criteria(self, profile: StudentProfile, criteria: Any) -> List[CriterionCheck]:
        """Produce one check per sub-criterion present in the group."""
        pass

    def _combine(self, checks: List[CriterionCheck]) -> float:
        """Weighted average of sub-scores over the checks present."""
        total_weight = sum(c.weight for c in checks)
        if total_weight <= 0:
            return 100.0
        return sum(c.score * c.weight for c in checks) / total_weight
