"""Match engine.

Composes the dimension scorers, composite calculator, success probability,
strategic value and priority tier into one immutable MatchScore per
student-scholarship pair, and fans that out over many scholarships.
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from scholarmatch.config import EngineSettings
from scholarmatch.criteria import EligibilityCriteria, Scholarship, parse_eligibility_criteria
from scholarmatch.errors import MissingProfileError
from scholarmatch.matching.analysis import EligibilityAnalysis, EligibilityAnalyzer
from scholarmatch.matching.composite import calculate_overall_score
from scholarmatch.matching.priority import PriorityTier, assign_priority_tier, get_tier_rationale
from scholarmatch.matching.probability import (
    SuccessTier,
    calculate_competition_factor,
    calculate_success_probability,
    classify_success_tier,
)
from scholarmatch.matching.strategic import (
    EffortBreakdown,
    EffortLevel,
    StrategicValueTier,
    calculate_strategic_value,
    calculate_strategic_value_with_match_boost,
    classify_strategic_value,
    estimate_effort_level,
)
from scholarmatch.profile.models import StudentProfile
from scholarmatch.profile.strength import calculate_strength_breakdown
from scholarmatch.scorers import build_scorers

logger = logging.getLogger(__name__)

ScholarshipInput = Any  # Scholarship or a raw criteria payload


@dataclass(frozen=True)
class MatchScore:
    """Score of one student against one scholarship."""
    scholarship_id: str
    scholarship_name: str
    overall_match_score: int
    academic_score: int
    demographic_score: int
    major_field_score: int
    experience_score: int
    financial_score: int
    special_criteria_score: int
    success_probability: int                # Percent (0-100)
    success_tier: SuccessTier
    competition_factor: float
    strategic_value: float                  # 0-10
    application_effort: EffortLevel
    effort_breakdown: EffortBreakdown
    strategic_value_tier: StrategicValueTier
    priority_tier: PriorityTier
    tier_rationale: str
    award_amount: float = 0.0
    calculated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def dimension_scores(self) -> Dict[str, int]:
        return {
            "academic": self.academic_score,
            "demographic": self.demographic_score,
            "major_field": self.major_field_score,
            "experience": self.experience_score,
            "financial": self.financial_score,
            "special": self.special_criteria_score,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scholarship_id": self.scholarship_id,
            "scholarship_name": self.scholarship_name,
            "overall_match_score": self.overall_match_score,
            "dimension_scores": self.dimension_scores,
            "success_probability": self.success_probability,
            "success_tier": self.success_tier.value,
            "competition_factor": self.competition_factor,
            "strategic_value": round(self.strategic_value, 2),
            "application_effort": self.application_effort.value,
            "effort_breakdown": self.effort_breakdown.to_dict(),
            "strategic_value_tier": self.strategic_value_tier.value,
            "priority_tier": self.priority_tier.value,
            "tier_rationale": self.tier_rationale,
            "award_amount": self.award_amount,
            "calculated_at": self.calculated_at.isoformat(),
        }


def as_scholarship(item: ScholarshipInput) -> Scholarship:
    """Wrap a criteria payload in a Scholarship with default metadata.

    Raises:
        MalformedCriteriaError: If the payload cannot be parsed
    """
    if isinstance(item, Scholarship):
        return item
    return Scholarship(eligibility_criteria=parse_eligibility_criteria(item))


class MatchEngine:
    """Scores student profiles against scholarships."""

    def __init__(self, settings: Optional[EngineSettings] = None):
        """Initialize the engine.

        Args:
            settings: Engine settings (default: EngineSettings())
        """
        self.settings = settings or EngineSettings()
        self.scorers = build_scorers(reference_year=self.settings.reference_year)
        self.analyzer = EligibilityAnalyzer(self.scorers, self.settings.weights)

    def compute_match_score(
        self,
        profile: Optional[StudentProfile],
        scholarship: ScholarshipInput,
    ) -> MatchScore:
        """Score a profile against one scholarship.

        Args:
            profile: Student profile
            scholarship: Scholarship, or a criteria payload (mapping, JSON
                text, EligibilityCriteria or None)

        Returns:
            MatchScore

        Raises:
            MissingProfileError: If profile is None
            MalformedCriteriaError: If the criteria payload cannot be parsed
        """
        if profile is None:
            raise MissingProfileError()
        return self._score(profile, as_scholarship(scholarship))

    def compute_match_scores_batch(
        self,
        profile: Optional[StudentProfile],
        scholarships: Sequence[ScholarshipInput],
    ) -> List[MatchScore]:
        """Score a profile against many scholarships concurrently.

        Results are returned in input order regardless of completion order.

        Raises:
            MissingProfileError: If profile is None (before any work starts)
            MalformedCriteriaError: If any criteria payload cannot be parsed
        """
        if profile is None:
            raise MissingProfileError()
        items = [as_scholarship(s) for s in scholarships]
        if not items:
            return []

        start = time.perf_counter()
        workers = min(self.settings.worker_count, len(items))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda s: self._score(profile, s), items))

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            f"Scored {len(results)} scholarships for {profile.student_id or 'student'} "
            f"in {elapsed:.1f}ms ({workers} workers)"
        )
        return results

    async def score_batch_async(
        self,
        profile: Optional[StudentProfile],
        scholarships: Sequence[ScholarshipInput],
    ) -> List[MatchScore]:
        """Async variant of compute_match_scores_batch().

        At most max_workers scorings run at once. Cancelling the caller
        cancels every pending scoring task.
        """
        if profile is None:
            raise MissingProfileError()
        items = [as_scholarship(s) for s in scholarships]
        semaphore = asyncio.Semaphore(self.settings.worker_count)

        async def score_one(scholarship: Scholarship) -> MatchScore:
            async with semaphore:
                return await asyncio.to_thread(self._score, profile, scholarship)

        results = await asyncio.gather(*(score_one(s) for s in items))
        logger.info(f"Scored {len(results)} scholarships asynchronously")
        return list(results)

    def compute_eligibility_analysis(
        self,
        profile: Optional[StudentProfile],
        scholarship: ScholarshipInput,
    ) -> EligibilityAnalysis:
        """Explain how a profile fits one scholarship.

        Raises:
            MissingProfileError: If profile is None
            MalformedCriteriaError: If the criteria payload cannot be parsed
        """
        if profile is None:
            raise MissingProfileError()
        item = as_scholarship(scholarship)
        return self.analyzer.analyze(profile, item.eligibility_criteria, scholarship_id=item.id)

    def rank(self, scores: Sequence[MatchScore]) -> List[MatchScore]:
        """Sort by priority tier, then strategic value, then overall score.

        The sort is stable, so ties keep their input order.
        """
        return sorted(
            scores,
            key=lambda s: (s.priority_tier.order, -s.strategic_value, -s.overall_match_score),
        )

    def _score(self, profile: StudentProfile, scholarship: Scholarship) -> MatchScore:
        criteria: EligibilityCriteria = scholarship.eligibility_criteria
        dimension_scores = {
            scorer.name: scorer.score(profile, scorer.criteria_for(criteria))
            for scorer in self.scorers
        }
        overall = calculate_overall_score(dimension_scores, self.settings.weights)

        strength = profile.strength_score
        if strength is None:
            strength = self.settings.default_strength_score
        if strength is None:
            strength = calculate_strength_breakdown(profile).overall_score
        competition_factor = calculate_competition_factor(scholarship)
        probability = calculate_success_probability(overall, competition_factor, strength)
        success_tier = classify_success_tier(probability)

        effort = estimate_effort_level(scholarship)
        if self.settings.apply_match_boost:
            value = calculate_strategic_value_with_match_boost(
                scholarship.award_amount, probability, effort.level, overall
            )
        else:
            value = calculate_strategic_value(scholarship.award_amount, probability, effort.level)
        strategic = classify_strategic_value(value.strategic_value)

        priority = assign_priority_tier(
            overall, probability / 100, value.strategic_value, scholarship.award_amount
        )
        rationale = get_tier_rationale(
            priority, overall, probability / 100, value.strategic_value, scholarship.award_amount
        )

        logger.debug(
            f"{scholarship.id or scholarship.name}: overall={overall} "
            f"probability={probability} value={value.strategic_value:.2f} tier={priority.value}"
        )

        return MatchScore(
            scholarship_id=scholarship.id,
            scholarship_name=scholarship.name,
            overall_match_score=overall,
            academic_score=dimension_scores["academic"],
            demographic_score=dimension_scores["demographic"],
            major_field_score=dimension_scores["major_field"],
            experience_score=dimension_scores["experience"],
            financial_score=dimension_scores["financial"],
            special_criteria_score=dimension_scores["special"],
            success_probability=probability,
            success_tier=success_tier.tier,
            competition_factor=competition_factor,
            strategic_value=value.strategic_value,
            application_effort=effort.level,
            effort_breakdown=effort.breakdown,
            strategic_value_tier=strategic.tier,
            priority_tier=priority,
            tier_rationale=rationale,
            award_amount=scholarship.award_amount,
        )


_default_engine: Optional[MatchEngine] = None


def get_default_engine() -> MatchEngine:
    """Return the shared engine with default settings."""
    global _default_engine
    if _default_engine is None:
        _default_engine = MatchEngine()
    return _default_engine


def compute_match_score(profile: Optional[StudentProfile], scholarship: ScholarshipInput) -> MatchScore:
    """Score one pair with the default engine."""
    return get_default_engine().compute_match_score(profile, scholarship)


def compute_match_scores_batch(
    profile: Optional[StudentProfile],
    scholarships: Sequence[ScholarshipInput],
) -> List[MatchScore]:
    """Score a batch with the default engine, preserving input order."""
    return get_default_engine().compute_match_scores_batch(profile, scholarships)


def compute_eligibility_analysis(
    profile: Optional[StudentProfile],
    scholarship: ScholarshipInput,
) -> EligibilityAnalysis:
    """Analyze one pair with the default engine."""
    return get_default_engine().compute_eligibility_analysis(profile, scholarship)
