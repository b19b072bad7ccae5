"""Eligibility analysis with human-readable gaps and recommendations.

Runs the same dimension scorers as the match engine, then turns each
criterion check into a "met" or "missing" statement, rolls the missing
ones up into a gap analysis and derives recommendations from the gaps.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from scholarmatch.config import DEFAULT_WEIGHTS, ScoringWeights
from scholarmatch.criteria import EligibilityCriteria
from scholarmatch.matching.composite import calculate_overall_score
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers import build_scorers
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionEvaluation,
    DimensionScorer,
    MatchStatus,
    round_half_up,
)

logger = logging.getLogger(__name__)

DEMOGRAPHIC_NOTE = (
    "Note: Some demographic criteria (gender, ethnicity, location) are fixed "
    "factors and cannot be changed."
)
GENERAL_RECOMMENDATION = (
    "Focus on strengthening your overall profile by maintaining high grades "
    "and staying active in extracurriculars."
)
ALL_MET_RECOMMENDATION = (
    "Excellent! You meet all requirements. Focus on crafting a compelling application essay."
)


class OverallAssessment(str, Enum):
    """Overall eligibility verdict."""
    HIGHLY_ELIGIBLE = "Highly Eligible"
    COMPETITIVE = "Competitive"
    NEEDS_IMPROVEMENT = "Needs Improvement"
    NOT_ELIGIBLE = "Not Eligible"


@dataclass(frozen=True)
class DimensionAnalysis:
    """Narrative analysis of one dimension."""
    score: int
    explanation: str
    met_criteria: Tuple[str, ...] = ()
    missing_criteria: Tuple[str, ...] = ()
    details: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "explanation": self.explanation,
            "met_criteria": list(self.met_criteria),
            "missing_criteria": list(self.missing_criteria),
            "details": self.details,
        }


@dataclass(frozen=True)
class GapAnalysis:
    """Criteria counts and every missing criterion, prefixed by dimension."""
    total_criteria: int
    met_criteria: int
    missing_criteria: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_criteria": self.total_criteria,
            "met_criteria": self.met_criteria,
            "missing_criteria": list(self.missing_criteria),
        }


@dataclass(frozen=True)
class CompetitivePositioning:
    """Estimated standing against a typical applicant pool."""
    percentile: int
    message: str
    context: str

    def to_dict(self) -> Dict[str, Any]:
        return {"percentile": self.percentile, "message": self.message, "context": self.context}


@dataclass(frozen=True)
class EligibilityAnalysis:
    """Full eligibility analysis of one student-scholarship pair."""
    overall_score: int
    overall_assessment: OverallAssessment
    academic: DimensionAnalysis
    demographic: DimensionAnalysis
    major_field: DimensionAnalysis
    experience: DimensionAnalysis
    financial: DimensionAnalysis
    special: DimensionAnalysis
    gap_analysis: GapAnalysis
    recommendations: Tuple[str, ...]
    competitive_positioning: CompetitivePositioning
    scholarship_id: str = ""

    @property
    def dimensions(self) -> Dict[str, DimensionAnalysis]:
        return {
            "academic": self.academic,
            "demographic": self.demographic,
            "major_field": self.major_field,
            "experience": self.experience,
            "financial": self.financial,
            "special": self.special,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scholarship_id": self.scholarship_id,
            "overall_score": self.overall_score,
            "overall_assessment": self.overall_assessment.value,
            "dimensions": {name: d.to_dict() for name, d in self.dimensions.items()},
            "gap_analysis": self.gap_analysis.to_dict(),
            "recommendations": list(self.recommendations),
            "competitive_positioning": self.competitive_positioning.to_dict(),
        }


def _num(value: float) -> str:
    """Format a number without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def _money(value: float) -> str:
    return f"${value:,.0f}"


# Statements per criterion key. Each takes the check and the dimension's
# criteria group and returns the met or missing statement for that check.

def _gpa_message(check: CriterionCheck, criteria: Any) -> str:
    minimum, maximum = criteria.min_gpa, criteria.max_gpa
    if check.status == MatchStatus.UNKNOWN:
        if minimum is not None:
            return f"GPA not provided (minimum {minimum:.2f} required)"
        return f"GPA not provided (maximum {maximum:.2f} allowed)"
    gpa = check.student_value
    if check.met:
        if minimum is not None:
            return f"GPA {gpa:.2f} meets minimum {minimum:.2f}"
        return f"GPA {gpa:.2f} within maximum {maximum:.2f}"
    if check.gap is not None:
        return f"GPA {gpa:.2f} below minimum {minimum:.2f} (need {check.gap:.2f} more)"
    return f"GPA {gpa:.2f} above maximum {maximum:.2f}"


def _test_message(name: str, minimum: Optional[int], maximum: Optional[int], check: CriterionCheck) -> str:
    if check.status == MatchStatus.UNKNOWN:
        if minimum is not None:
            return f"{name} score not provided (minimum {minimum} required)"
        return f"{name} score not provided (maximum {maximum} allowed)"
    score = check.student_value
    if check.met:
        if minimum is not None:
            return f"{name} {score} meets minimum {minimum}"
        return f"{name} {score} within maximum {maximum}"
    if check.gap is not None:
        return f"{name} {score} below minimum {minimum} (need {_num(check.gap)} more points)"
    return f"{name} {score} above maximum {maximum}"


def _sat_message(check: CriterionCheck, criteria: Any) -> str:
    return _test_message("SAT", criteria.min_sat, criteria.max_sat, check)


def _act_message(check: CriterionCheck, criteria: Any) -> str:
    return _test_message("ACT", criteria.min_act, criteria.max_act, check)


def _class_rank_message(check: CriterionCheck, criteria: Any) -> str:
    required = _num(criteria.class_rank_percentile)
    if check.status == MatchStatus.UNKNOWN:
        return f"Class rank not provided (top {required}% required)"
    if check.met:
        return f"Class rank top {check.student_value:.1f}% meets requirement (top {required}%)"
    return f"Class rank top {check.student_value:.1f}% does not meet requirement (need top {required}%)"


def _gender_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return f"Gender matches requirement ({criteria.required_gender})"
    return f"Gender requirement: {criteria.required_gender}"


def _ethnicity_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Ethnicity matches requirements"
    return f"Required ethnicity: {' or '.join(criteria.required_ethnicity)}"


def _state_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return f"State residency matches ({check.student_value})"
    return f"Required state: {', '.join(criteria.required_state)}"


def _city_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return f"City matches ({check.student_value})"
    return f"Required city: {', '.join(criteria.required_city)}"


def _age_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Age meets requirements"
    if criteria.age_min is not None and criteria.age_max is not None:
        requirement = f"{criteria.age_min}-{criteria.age_max} years old"
    elif criteria.age_min is not None:
        requirement = f"{criteria.age_min}+ years old"
    else:
        requirement = f"under {criteria.age_max} years old"
    return f"Age requirement: {requirement}"


def _residency_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return f"Residency requirement met ({criteria.residency_required})"
    return f"Residency requirement: {criteria.residency_required}"


def _excluded_major_message(check: CriterionCheck, criteria: Any) -> str:
    return f"Major {check.student_value} is excluded from this scholarship"


def _major_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return f"Major {check.student_value} is eligible"
    if check.status == MatchStatus.PARTIAL:
        return (
            f"Major {check.student_value} only partially matches eligible majors: "
            f"{', '.join(criteria.eligible_majors)}"
        )
    return f"Required major: {', '.join(criteria.eligible_majors)}"


def _field_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Field of study matches requirements"
    if check.status == MatchStatus.PARTIAL:
        return (
            f"Field of study {check.student_value} partially matches: "
            f"{' or '.join(criteria.required_field_of_study)}"
        )
    return f"Required field: {' or '.join(criteria.required_field_of_study)}"


def _career_goals_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Career goals align with scholarship focus"
    return f"Career goals should reflect: {', '.join(criteria.career_goals_keywords)}"


def _volunteer_message(check: CriterionCheck, criteria: Any) -> str:
    required = _num(criteria.min_volunteer_hours)
    if check.status == MatchStatus.UNKNOWN:
        return f"Volunteer hours not provided (minimum {required} required)"
    hours = _num(check.student_value)
    if check.met:
        return f"{hours} volunteer hours meets minimum {required}"
    return f"Need {_num(check.gap)} more volunteer hours (have {hours}, need {required})"


def _leadership_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Has leadership experience"
    return "Leadership position required"


def _extracurriculars_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Has required extracurricular activities"
    return f"Required activities: {', '.join(check.required_value)}"


def _work_message(check: CriterionCheck, criteria: Any) -> str:
    required = _num(criteria.min_work_experience)
    months = _num(check.student_value)
    if check.met:
        return f"{months} months of work experience meets minimum {required}"
    return f"Need {_num(check.gap)} more months of work experience (have {months}, need {required})"


def _awards_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Has awards or honors"
    return "Awards or honors required"


def _financial_need_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Demonstrates financial need"
    if check.status == MatchStatus.PARTIAL:
        return (
            f"Financial need level {check.student_value} below required "
            f"{criteria.financial_need_level.value}"
        )
    return "Financial need required"


def _pell_message(check: CriterionCheck, criteria: Any) -> str:
    if check.required_value is False:
        if check.met:
            return "Not Pell Grant eligible, as required"
        return "Must not be Pell Grant eligible"
    if check.met:
        return "Pell Grant eligible"
    return "Pell Grant eligibility required"


def _efc_message(check: CriterionCheck, criteria: Any) -> str:
    maximum = _money(criteria.max_efc)
    if check.status == MatchStatus.UNKNOWN:
        return f"EFC not provided (maximum {maximum})"
    if check.met:
        return f"EFC up to {_money(check.student_value)} within maximum {maximum}"
    return f"EFC up to {_money(check.student_value)} exceeds maximum {maximum}"


def _first_generation_message(check: CriterionCheck, criteria: Any) -> str:
    if check.required_value is False:
        if check.met:
            return "Not a first-generation college student, as required"
        return "Must not be a first-generation college student"
    if check.met:
        return "First-generation college student"
    return "Must be first-generation college student"


def _military_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return f"Military affiliation: {check.student_value or criteria.military_affiliation}"
    return f"Military affiliation required: {criteria.military_affiliation}"


def _disability_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return "Has documented disability"
    return "Disability status required"


def _citizenship_message(check: CriterionCheck, criteria: Any) -> str:
    if check.met:
        return f"Citizenship: {check.student_value}"
    return f"Citizenship required: {criteria.citizenship_required}"


CRITERION_MESSAGES: Dict[str, Callable[[CriterionCheck, Any], str]] = {
    "gpa": _gpa_message,
    "sat": _sat_message,
    "act": _act_message,
    "class_rank": _class_rank_message,
    "gender": _gender_message,
    "ethnicity": _ethnicity_message,
    "state": _state_message,
    "city": _city_message,
    "age": _age_message,
    "residency": _residency_message,
    "excluded_major": _excluded_major_message,
    "major": _major_message,
    "field_of_study": _field_message,
    "career_goals": _career_goals_message,
    "volunteer_hours": _volunteer_message,
    "leadership": _leadership_message,
    "extracurriculars": _extracurriculars_message,
    "work_experience": _work_message,
    "awards": _awards_message,
    "financial_need": _financial_need_message,
    "pell_grant": _pell_message,
    "efc": _efc_message,
    "first_generation": _first_generation_message,
    "military": _military_message,
    "disability": _disability_message,
    "citizenship": _citizenship_message,
}

NO_REQUIREMENTS = {
    "academic": "No specific academic requirements for this scholarship.",
    "demographic": "No specific demographic requirements for this scholarship.",
    "major_field": "No specific major or field requirements for this scholarship.",
    "experience": "No specific experience requirements for this scholarship.",
    "financial": "No specific financial need requirements for this scholarship.",
    "special": "No special criteria requirements for this scholarship.",
}


def explain_dimension(dimension: str, score: int, met: List[str], missing: List[str]) -> str:
    """Summarize a dimension's result in a sentence or two."""
    if not met and not missing:
        return NO_REQUIREMENTS[dimension]

    first_met = met[0] if met else ""
    first_missing = missing[0] if missing else ""

    if dimension == "academic":
        if score >= 90:
            text = f"Excellent academic match! {first_met or 'You exceed requirements.'}"
        elif score >= 70:
            counts = f"You meet {len(met)} of {len(met) + len(missing)} academic criteria." if met else ""
            text = f"Good academic match. {counts}"
        elif score >= 50:
            text = f"Partial academic match. You're missing {len(missing)} academic criteria."
        else:
            text = f"Academic requirements need improvement. Focus on: {first_missing}"
    elif dimension == "demographic":
        if score >= 90:
            text = f"Strong demographic match. {', '.join(met)}"
        elif score >= 50:
            text = f"Partial demographic match. {f'You meet {len(met)} criteria.' if met else ''}"
        else:
            text = f"Demographic requirements not fully met. {first_missing}"
    elif dimension == "major_field":
        if score >= 90:
            text = f"Perfect major match! {first_met or 'Your intended field aligns with scholarship goals.'}"
        elif score >= 50:
            text = f"Partial major alignment. {first_met}"
        else:
            text = f"Major/field requirements not met. {first_missing}"
    elif dimension == "experience":
        if score >= 90:
            text = f"Excellent experience profile! {'. '.join(met)}"
        elif score >= 70:
            text = f"Good experience match. {f'You meet {len(met)} experience criteria.' if met else ''}"
        else:
            text = f"Experience requirements need attention. {first_missing}"
    elif dimension == "financial":
        if score >= 90:
            text = f"Financial profile matches requirements. {first_met}"
        else:
            text = f"Financial requirements not met. {first_missing}"
    else:
        if score >= 90:
            text = f"Special criteria met. {', '.join(met)}"
        else:
            text = f"Special criteria not fully met. {first_missing}"

    return text.strip()


def determine_overall_assessment(overall_score: int, missing_count: int) -> OverallAssessment:
    """Highly Eligible needs a score of 90+ and no missing criteria."""
    if overall_score >= 90 and missing_count == 0:
        return OverallAssessment.HIGHLY_ELIGIBLE
    if overall_score >= 70:
        return OverallAssessment.COMPETITIVE
    if overall_score >= 50:
        return OverallAssessment.NEEDS_IMPROVEMENT
    return OverallAssessment.NOT_ELIGIBLE


def calculate_competitive_positioning(overall_score: int) -> CompetitivePositioning:
    """Approximate the student's percentile among typical applicants as 90% of the score."""
    percentile = round_half_up(overall_score * 0.9)

    if percentile >= 90:
        message = "Your profile ranks in the top 10% of typical applicants for this scholarship."
        context = (
            "Excellent competitive advantage - your strong credentials exceed "
            "typical requirements significantly."
        )
    elif percentile >= 75:
        message = "Your profile ranks in the top 25% of typical applicants for this scholarship."
        context = "Strong competitive position - you have a good chance of success with this scholarship."
    elif percentile >= 50:
        message = "Your profile ranks in the top 50% of typical applicants for this scholarship."
        context = (
            "Competitive position - you meet most requirements and have a "
            "reasonable chance of success."
        )
    elif percentile >= 25:
        message = "Your profile ranks in the bottom 50% of typical applicants for this scholarship."
        context = (
            "This scholarship is a reach - consider strengthening your profile "
            "or focusing on better-matched opportunities."
        )
    else:
        message = "Your profile ranks below typical applicants for this scholarship."
        context = (
            "Significant reach - focus on improving gaps before applying or "
            "consider better-matched scholarships."
        )

    return CompetitivePositioning(percentile, message, context)


class EligibilityAnalyzer:
    """Produces EligibilityAnalysis records from the dimension scorers."""

    def __init__(
        self,
        scorers: Optional[List[DimensionScorer]] = None,
        weights: Optional[ScoringWeights] = None,
    ):
        """Initialize the analyzer.

        Args:
            scorers: Dimension scorers (default: build_scorers())
            weights: Dimension weights (default: DEFAULT_WEIGHTS)
        """
        self.scorers = scorers if scorers is not None else build_scorers()
        self.weights = weights or DEFAULT_WEIGHTS

    def analyze(
        self,
        profile: StudentProfile,
        criteria: EligibilityCriteria,
        scholarship_id: str = "",
    ) -> EligibilityAnalysis:
        """Analyze a profile against a scholarship's criteria.

        Args:
            profile: Student profile
            criteria: Parsed eligibility criteria
            scholarship_id: ID of the scholarship

        Returns:
            EligibilityAnalysis
        """
        evaluations: Dict[str, DimensionEvaluation] = {}
        dimensions: Dict[str, DimensionAnalysis] = {}
        labels: Dict[str, str] = {}

        for scorer in self.scorers:
            group = scorer.criteria_for(criteria)
            evaluation = scorer.evaluate(profile, group)
            evaluations[scorer.name] = evaluation
            dimensions[scorer.name] = self._analyze_dimension(evaluation, group)
            labels[scorer.name] = scorer.label

        overall = calculate_overall_score(
            {name: d.score for name, d in dimensions.items()}, self.weights
        )
        gap_analysis = self._build_gap_analysis(dimensions, labels)
        recommendations = self._build_recommendations(evaluations, criteria, dimensions, gap_analysis)
        assessment = determine_overall_assessment(overall, len(gap_analysis.missing_criteria))

        logger.debug(
            f"Analyzed {scholarship_id or 'scholarship'}: {overall} ({assessment.value}), "
            f"{len(gap_analysis.missing_criteria)} gaps"
        )

        return EligibilityAnalysis(
            overall_score=overall,
            overall_assessment=assessment,
            gap_analysis=gap_analysis,
            recommendations=tuple(recommendations),
            competitive_positioning=calculate_competitive_positioning(overall),
            scholarship_id=scholarship_id,
            **dimensions,
        )

    def _analyze_dimension(self, evaluation: DimensionEvaluation, group: Any) -> DimensionAnalysis:
        met: List[str] = []
        missing: List[str] = []
        details: Dict[str, Dict[str, Any]] = {}

        for check in evaluation.checks:
            if not check.counts_as_criterion:
                continue
            statement = CRITERION_MESSAGES[check.key](check, group)
            if check.met:
                met.append(statement)
            else:
                missing.append(statement)
            details[check.key] = {
                "student": check.student_value,
                "required": check.required_value,
                "met": check.met,
                "score": round_half_up(check.score),
            }

        return DimensionAnalysis(
            score=evaluation.score,
            explanation=explain_dimension(evaluation.dimension, evaluation.score, met, missing),
            met_criteria=tuple(met),
            missing_criteria=tuple(missing),
            details=details,
        )

    def _build_gap_analysis(
        self, dimensions: Dict[str, DimensionAnalysis], labels: Dict[str, str]
    ) -> GapAnalysis:
        total = 0
        met = 0
        missing: List[str] = []
        for name, analysis in dimensions.items():
            total += len(analysis.met_criteria) + len(analysis.missing_criteria)
            met += len(analysis.met_criteria)
            missing.extend(f"{labels[name]}: {item}" for item in analysis.missing_criteria)
        return GapAnalysis(total_criteria=total, met_criteria=met, missing_criteria=tuple(missing))

    def _build_recommendations(
        self,
        evaluations: Dict[str, DimensionEvaluation],
        criteria: EligibilityCriteria,
        dimensions: Dict[str, DimensionAnalysis],
        gap_analysis: GapAnalysis,
    ) -> List[str]:
        """Actionable steps first, then fixed-factor notes, then a fallback."""
        recommendations: List[str] = []
        academic = evaluations["academic"]
        experience = evaluations["experience"]

        gpa = academic.get("gpa")
        if gpa is not None and gpa.gap is not None:
            recommendations.append(
                f"Raise your GPA by {gpa.gap:.2f} points to {criteria.academic.min_gpa:.2f} "
                "to meet the academic requirement."
            )

        for key, name in (("sat", "SAT"), ("act", "ACT")):
            test = academic.get(key)
            if test is not None and test.gap is not None:
                recommendations.append(
                    f"Improve your {name} score by {_num(test.gap)} points to {_num(test.required_value)} "
                    "through test prep and retaking the exam."
                )

        volunteer = experience.get("volunteer_hours")
        if volunteer is not None and volunteer.gap is not None:
            recommendations.append(
                f"Gain {_num(volunteer.gap)} more volunteer hours to reach the "
                f"{_num(volunteer.required_value)}-hour requirement."
            )

        leadership = experience.get("leadership")
        if leadership is not None and leadership.counts_as_criterion and not leadership.met:
            recommendations.append(
                "Consider joining a student organization and taking on a leadership "
                "position, such as club president or team captain."
            )

        activities = experience.get("extracurriculars")
        if activities is not None and not activities.met:
            recommendations.append(
                f"Get involved in {', '.join(activities.required_value)} to meet the activity requirements."
            )

        work = experience.get("work_experience")
        if work is not None and work.gap is not None:
            recommendations.append(
                f"Gain {_num(work.gap)} more months of work experience to reach the "
                f"{_num(work.required_value)}-month requirement."
            )

        if dimensions["demographic"].missing_criteria:
            recommendations.append(DEMOGRAPHIC_NOTE)

        if not recommendations and gap_analysis.missing_criteria:
            recommendations.append(GENERAL_RECOMMENDATION)

        if not gap_analysis.missing_criteria:
            recommendations.append(ALL_MET_RECOMMENDATION)

        return recommendations
