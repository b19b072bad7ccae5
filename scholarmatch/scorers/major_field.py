"""Major/field dimension scorer."""

from typing import List, Optional, Set

from scholarmatch.criteria import MajorFieldCriteria
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionScorer,
    MatchStatus,
    normalize,
    status_for,
)

# Related-field families used for partial major matches
FIELD_FAMILIES = {
    "stem": ["biology", "chemistry", "physics", "mathematics", "engineering", "computer science", "science"],
    "engineering": ["mechanical", "electrical", "civil", "chemical", "computer", "aerospace", "biomedical"],
    "business": ["business", "finance", "accounting", "economics", "marketing", "management"],
    "health": ["nursing", "medicine", "pharmacy", "public health", "healthcare", "medical"],
    "arts": ["art", "music", "theater", "dance", "design", "fine arts", "performing arts"],
    "humanities": ["english", "history", "philosophy", "literature", "languages", "liberal arts"],
}


def field_families(subject: str) -> Set[str]:
    """Return the families a subject belongs to, by family name or member keyword."""
    subject = normalize(subject)
    families = set()
    for family, members in FIELD_FAMILIES.items():
        if subject == family or any(member in subject for member in members):
            families.add(family)
    return families


def is_partial_match(a: str, b: str) -> bool:
    a, b = normalize(a), normalize(b)
    return bool(a) and bool(b) and (a in b or b in a)


class MajorFieldScorer(DimensionScorer):
    """Scores intended major, field of study and career goals.

    An intended major on the exclusion list scores 0 before anything else
    is considered.
    """

    WEIGHT_MAJOR = 0.5
    WEIGHT_FIELD = 0.3
    WEIGHT_CAREER = 0.2

    SCORE_EXACT = 100.0
    SCORE_PARTIAL_MAJOR = 75.0
    SCORE_RELATED_MAJOR = 50.0
    SCORE_PARTIAL_FIELD = 80.0
    CAREER_KEYWORD_BOOST = 1.2

    @property
    def name(self) -> str:
        return "major_field"

    @property
    def label(self) -> str:
        return "Major/Field"

    def _check_criteria(
        self, profile: StudentProfile, criteria: MajorFieldCriteria
    ) -> List[CriterionCheck]:
        info = profile.major_field
        major = info.intended_major

        if major and criteria.excluded_majors:
            excluded = {normalize(m) for m in criteria.excluded_majors}
            if normalize(major) in excluded:
                return [CriterionCheck(
                    "excluded_major", 0.0, 1.0, MatchStatus.UNMATCHED, major, criteria.excluded_majors,
                )]

        checks: List[CriterionCheck] = []
        if criteria.eligible_majors:
            score = self._score_major(major, criteria.eligible_majors)
            checks.append(CriterionCheck(
                "major", score, self.WEIGHT_MAJOR, status_for(score, major), major, criteria.eligible_majors,
            ))

        if criteria.required_field_of_study:
            field = info.field_of_study
            score = self._score_field(field, criteria.required_field_of_study)
            checks.append(CriterionCheck(
                "field_of_study",
                score,
                self.WEIGHT_FIELD,
                status_for(score, field),
                field,
                criteria.required_field_of_study,
            ))

        if criteria.career_goals_keywords:
            goals = info.career_goals if info.career_goals and info.career_goals.strip() else None
            score = self._score_career_goals(goals, criteria.career_goals_keywords)
            checks.append(CriterionCheck(
                "career_goals",
                score,
                self.WEIGHT_CAREER,
                status_for(score, goals),
                goals,
                criteria.career_goals_keywords,
            ))

        return checks

    def _score_major(self, major: Optional[str], eligible: List[str]) -> float:
        """Exact match 100, substring either way 75, related family 50."""
        if not major:
            return 0.0
        student = normalize(major)
        if student in {normalize(m) for m in eligible}:
            return self.SCORE_EXACT
        if any(is_partial_match(student, m) for m in eligible):
            return self.SCORE_PARTIAL_MAJOR
        student_families = field_families(student)
        if student_families and any(student_families & field_families(m) for m in eligible):
            return self.SCORE_RELATED_MAJOR
        return 0.0

    def _score_field(self, field: Optional[str], required: List[str]) -> float:
        if not field:
            return 0.0
        if normalize(field) in {normalize(f) for f in required}:
            return self.SCORE_EXACT
        if any(is_partial_match(field, f) for f in required):
            return self.SCORE_PARTIAL_FIELD
        return 0.0

    def _score_career_goals(self, goals: Optional[str], keywords: List[str]) -> float:
        """Share of keywords found in the goals text, boosted by 20% and capped at 100."""
        if not goals:
            return 0.0
        text = normalize(goals)
        hits = sum(1 for k in keywords if normalize(k) and normalize(k) in text)
        return min(100.0, hits / len(keywords) * 100 * self.CAREER_KEYWORD_BOOST)

    def _combine(self, checks: List[CriterionCheck]) -> float:
        if checks[0].key == "excluded_major":
            return 0.0
        return super()._combine(checks)
