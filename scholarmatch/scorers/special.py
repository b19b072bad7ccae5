"""Special-criteria dimension scorer."""

from typing import List, Optional

from scholarmatch.criteria import SpecialCriteria
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionScorer,
    MatchStatus,
    is_any,
    normalize,
    status_for,
)

US_CITIZEN = "us citizen"
PERMANENT_RESIDENT = "permanent resident"

# Affiliations that partially satisfy a required affiliation
RELATED_MILITARY = {
    "veteran": ["active duty"],
    "dependent": ["veteran", "active duty"],
}


class SpecialCriteriaScorer(DimensionScorer):
    """Scores first-generation, military, disability and citizenship checks.

    Every present sub-criterion carries equal weight.
    """

    SCORE_RELATED_MILITARY = 75.0
    SCORE_PARTIAL_CITIZENSHIP = 50.0

    @property
    def name(self) -> str:
        return "special"

    @property
    def label(self) -> str:
        return "Special Criteria"

    def _check_criteria(
        self, profile: StudentProfile, criteria: SpecialCriteria
    ) -> List[CriterionCheck]:
        special = profile.special
        checks: List[CriterionCheck] = []

        if criteria.first_generation_required is not None:
            first_gen = special.first_generation
            required = criteria.first_generation_required
            score = 100.0 if first_gen == required else 0.0
            checks.append(CriterionCheck(
                "first_generation", score, 1.0, status_for(score, first_gen), first_gen, required,
            ))

        if not is_any(criteria.military_affiliation):
            checks.append(self._check_military(special.military_affiliation, criteria.military_affiliation))

        if criteria.disability_required is not None:
            disabilities = special.disabilities if special.disabilities and special.disabilities.strip() else None
            if not criteria.disability_required:
                checks.append(CriterionCheck(
                    "disability", 100.0, 1.0, MatchStatus.NOT_APPLICABLE, disabilities, False,
                ))
            else:
                score = 100.0 if disabilities else 0.0
                checks.append(CriterionCheck(
                    "disability", score, 1.0, status_for(score, disabilities), disabilities, True,
                ))

        if not is_any(criteria.citizenship_required):
            checks.append(self._check_citizenship(
                profile.demographics.citizenship, criteria.citizenship_required,
            ))

        return checks

    def _check_military(self, affiliation: Optional[str], required: str) -> CriterionCheck:
        """Exact affiliation 100, related affiliation 75.

        A requirement of "None" is met by a student with no affiliation.
        """
        student = normalize(affiliation)
        wanted = normalize(required)
        if not student or student == "none":
            score = 100.0 if wanted == "none" else 0.0
            status = MatchStatus.MATCHED if score else MatchStatus.UNKNOWN
            return CriterionCheck("military", score, 1.0, status, affiliation, required)

        if student == wanted:
            score = 100.0
        elif student in RELATED_MILITARY.get(wanted, []):
            score = self.SCORE_RELATED_MILITARY
        else:
            score = 0.0
        return CriterionCheck("military", score, 1.0, status_for(score, affiliation), affiliation, required)

    def _check_citizenship(self, citizenship: Optional[str], required: str) -> CriterionCheck:
        """Exact match 100; US citizens meet permanent resident requirements.

        A permanent resident scores 50 against a US citizen requirement.
        """
        if not citizenship:
            return CriterionCheck("citizenship", 0.0, 1.0, MatchStatus.UNKNOWN, None, required)

        student = normalize(citizenship)
        wanted = normalize(required)
        if student == wanted:
            score = 100.0
        elif wanted == PERMANENT_RESIDENT and student == US_CITIZEN:
            score = 100.0
        elif wanted == US_CITIZEN and student == PERMANENT_RESIDENT:
            score = self.SCORE_PARTIAL_CITIZENSHIP
        else:
            score = 0.0
        return CriterionCheck("citizenship", score, 1.0, status_for(score, citizenship), citizenship, required)
