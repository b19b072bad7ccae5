"""Profile strength scoring.

Rates how competitive a profile is on its own, independent of any
scholarship, across four dimensions:

    academic      GPA 40 + best of SAT/ACT 30 + class rank 20 + awards 10
    experience    activities 40 + volunteer hours 30 + jobs 30
    leadership    0 roles 0, 1 role 50, 2 roles 75, 3+ roles 100
    demographics  first-generation 40 + financial need 0-30 + military 15 + disability 15

The overall score is the weighted average, scaled by profile completeness
when that is known. It feeds the success probability estimate.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from scholarmatch.profile.models import FinancialNeedLevel, StudentProfile
from scholarmatch.scorers.base import round_half_up

logger = logging.getLogger(__name__)

WEIGHTS = {
    "academic": 0.35,
    "experience": 0.25,
    "leadership": 0.25,
    "demographics": 0.15,
}

# Volunteer hour tiers
VOLUNTEER_EXCELLENT = 200
VOLUNTEER_GOOD = 100
VOLUNTEER_FAIR = 50

NEED_POINTS = {
    FinancialNeedLevel.VERY_HIGH: 30,
    FinancialNeedLevel.HIGH: 20,
    FinancialNeedLevel.MODERATE: 10,
    FinancialNeedLevel.LOW: 0,
}

MILITARY_AFFILIATIONS = {
    "active duty",
    "veteran",
    "reserves/national guard",
    "military dependent",
    "dependent",
    "gold star family",
}

MAX_RECOMMENDATIONS = 5


@dataclass
class StrengthRecommendation:
    """A suggestion for raising profile strength."""
    category: str
    message: str
    impact: int      # Estimated overall points gained
    priority: int    # 1 = highest

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "message": self.message,
            "impact": self.impact,
            "priority": self.priority,
        }


@dataclass
class StrengthBreakdown:
    """Per-dimension strength scores (0-100) and the weighted overall score."""
    overall_score: int
    academic: int
    experience: int
    leadership: int
    demographics: int
    recommendations: List[StrengthRecommendation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "academic": self.academic,
            "experience": self.experience,
            "leadership": self.leadership,
            "demographics": self.demographics,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


def calculate_academic_strength(profile: StudentProfile) -> int:
    academic = profile.academic
    score = 0.0

    if academic.gpa is not None:
        score += academic.gpa / academic.gpa_scale * 40

    test_points = 0.0
    if academic.sat_score is not None:
        test_points = max(test_points, (academic.sat_score - 400) / 1200 * 30)
    if academic.act_score is not None:
        test_points = max(test_points, (academic.act_score - 1) / 35 * 30)
    score += test_points

    if academic.class_rank is not None and academic.class_size:
        score += (1 - academic.class_rank / academic.class_size) * 20

    score += min(len(profile.experience.awards_honors) * 2, 10)

    return min(round_half_up(score), 100)


def calculate_experience_strength(profile: StudentProfile) -> int:
    experience = profile.experience
    score = float(min(len(experience.extracurriculars) * 8, 40))

    hours = experience.volunteer_hours or 0
    if hours >= VOLUNTEER_EXCELLENT:
        score += 30
    elif hours >= VOLUNTEER_GOOD:
        score += 20
    elif hours >= VOLUNTEER_FAIR:
        score += 10
    elif hours > 0:
        score += hours / VOLUNTEER_FAIR * 10

    score += min(len(experience.work_experience) * 15, 30)

    return min(round_half_up(score), 100)


def calculate_leadership_strength(profile: StudentProfile) -> int:
    roles = len(profile.experience.leadership_roles)
    if roles == 0:
        return 0
    if roles == 1:
        return 50
    if roles == 2:
        return 75
    return 100


def calculate_demographics_strength(profile: StudentProfile) -> int:
    score = 0
    if profile.special.first_generation:
        score += 40
    if profile.financial.financial_need is not None:
        score += NEED_POINTS[profile.financial.financial_need]
    affiliation = (profile.special.military_affiliation or "").strip().casefold()
    if affiliation in MILITARY_AFFILIATIONS:
        score += 15
    if profile.special.disabilities and profile.special.disabilities.strip():
        score += 15
    return min(score, 100)


def _weighted(academic: int, experience: int, leadership: int, demographics: int) -> float:
    return (
        academic * WEIGHTS["academic"]
        + experience * WEIGHTS["experience"]
        + leadership * WEIGHTS["leadership"]
        + demographics * WEIGHTS["demographics"]
    )


def generate_recommendations(
    profile: StudentProfile, breakdown: StrengthBreakdown
) -> List[StrengthRecommendation]:
    """Build up to five improvement suggestions, highest priority and impact first.

    Args:
        profile: Student profile
        breakdown: Dimension scores for the profile

    Returns:
        List of StrengthRecommendation
    """
    academic_weight = WEIGHTS["academic"]
    experience_weight = WEIGHTS["experience"]
    leadership_weight = WEIGHTS["leadership"]
    recommendations: List[StrengthRecommendation] = []

    if breakdown.academic < 60:
        recommendations.append(StrengthRecommendation(
            "Academic",
            "Focus on improving GPA and test scores to increase academic competitiveness",
            round_half_up((100 - breakdown.academic) * academic_weight),
            1,
        ))
    if profile.academic.sat_score is None and profile.academic.act_score is None:
        recommendations.append(StrengthRecommendation(
            "Academic",
            "Add SAT or ACT score to boost Academic score by up to 30 points",
            round_half_up(30 * academic_weight),
            1,
        ))
    if profile.academic.class_rank is None or profile.academic.class_size is None:
        recommendations.append(StrengthRecommendation(
            "Academic",
            "Add class rank to gain up to 20 additional points",
            round_half_up(20 * academic_weight),
            2,
        ))

    if breakdown.experience < 60:
        recommendations.append(StrengthRecommendation(
            "Experience",
            "Add more extracurricular activities and increase volunteer hours to 100+",
            round_half_up((100 - breakdown.experience) * experience_weight),
            1,
        ))

    hours = profile.experience.volunteer_hours or 0
    gain = None
    if hours < VOLUNTEER_FAIR:
        gain = (VOLUNTEER_GOOD - hours) / VOLUNTEER_GOOD * 20
    elif hours < VOLUNTEER_GOOD:
        gain = 10
    if gain is not None:
        impact = round_half_up(gain * experience_weight)
        recommendations.append(StrengthRecommendation(
            "Experience",
            f"Reach 100 volunteer hours to gain {impact} additional points",
            impact,
            2,
        ))

    if not profile.experience.work_experience:
        recommendations.append(StrengthRecommendation(
            "Experience",
            "Adding work experience can boost score by up to 30 points",
            round_half_up(30 * experience_weight),
            2,
        ))

    if breakdown.leadership < 50:
        recommendations.append(StrengthRecommendation(
            "Leadership",
            "Seek leadership positions in clubs, sports, or community organizations",
            round_half_up((100 - breakdown.leadership) * leadership_weight),
            1,
        ))

    roles = len(profile.experience.leadership_roles)
    if roles == 0:
        recommendations.append(StrengthRecommendation(
            "Leadership",
            "Leadership roles can add up to 100 points to your strength score",
            round_half_up(100 * leadership_weight),
            1,
        ))
    elif roles == 1:
        recommendations.append(StrengthRecommendation(
            "Leadership",
            "Adding 1 more leadership role increases score by 25 points",
            round_half_up(25 * leadership_weight),
            2,
        ))
    elif roles == 2:
        recommendations.append(StrengthRecommendation(
            "Leadership",
            "Adding 1 more leadership role increases score to maximum (25 additional points)",
            round_half_up(25 * leadership_weight),
            3,
        ))

    special = profile.special
    if not special.first_generation and not special.military_affiliation and not special.disabilities:
        recommendations.append(StrengthRecommendation(
            "Demographics",
            "Many scholarships target first-generation students, military families, and "
            "students with disabilities. Make sure your profile accurately reflects your background.",
            0,
            3,
        ))

    recommendations.sort(key=lambda r: (r.priority, -r.impact))
    return recommendations[:MAX_RECOMMENDATIONS]


def calculate_strength_breakdown(profile: StudentProfile) -> StrengthBreakdown:
    """Score a profile's standalone strength.

    When ``completion_percentage`` is set the weighted score is scaled by
    it; otherwise the profile is taken as complete.

    Args:
        profile: Student profile

    Returns:
        StrengthBreakdown with recommendations
    """
    academic = calculate_academic_strength(profile)
    experience = calculate_experience_strength(profile)
    leadership = calculate_leadership_strength(profile)
    demographics = calculate_demographics_strength(profile)

    weighted = _weighted(academic, experience, leadership, demographics)
    completeness = profile.completion_percentage
    if completeness is not None:
        weighted = weighted * completeness / 100
    overall = round_half_up(weighted)

    logger.debug(
        f"Strength for {profile.student_id or 'student'}: academic={academic} "
        f"experience={experience} leadership={leadership} demographics={demographics} -> {overall}"
    )

    breakdown = StrengthBreakdown(overall, academic, experience, leadership, demographics)
    breakdown.recommendations = generate_recommendations(profile, breakdown)
    return breakdown


def calculate_potential_score(profile: StudentProfile) -> int:
    """Strength the profile would have at 100% completeness."""
    breakdown = calculate_strength_breakdown(profile)
    return round_half_up(_weighted(
        breakdown.academic, breakdown.experience, breakdown.leadership, breakdown.demographics
    ))


def get_score_label(score: Optional[int]) -> str:
    """Return 'Needs Improvement' (0-50), 'Good' (51-75) or 'Excellent' (76-100)."""
    if score is None or score <= 50:
        return "Needs Improvement"
    if score <= 75:
        return "Good"
    return "Excellent"
