"""Experience dimension scorer."""

from typing import List

from scholarmatch.criteria import ExperienceCriteria
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionScorer,
    MatchStatus,
    minimum_score,
    normalize,
    status_for,
)


class ExperienceScorer(DimensionScorer):
    """Scores volunteer hours, leadership, activities, work and awards."""

    WEIGHT_VOLUNTEER = 0.35
    WEIGHT_LEADERSHIP = 0.25
    WEIGHT_EXTRACURRICULAR = 0.20
    WEIGHT_WORK = 0.15
    WEIGHT_AWARDS = 0.05

    @property
    def name(self) -> str:
        return "experience"

    @property
    def label(self) -> str:
        return "Experience"

    def _check_criteria(
        self, profile: StudentProfile, criteria: ExperienceCriteria
    ) -> List[CriterionCheck]:
        experience = profile.experience
        checks: List[CriterionCheck] = []

        if criteria.min_volunteer_hours is not None:
            hours = experience.volunteer_hours
            required = criteria.min_volunteer_hours
            if hours is None:
                checks.append(CriterionCheck(
                    "volunteer_hours", 0.0, self.WEIGHT_VOLUNTEER, MatchStatus.UNKNOWN, None, required, required,
                ))
            else:
                score = minimum_score(hours, required)
                checks.append(CriterionCheck(
                    "volunteer_hours",
                    score,
                    self.WEIGHT_VOLUNTEER,
                    status_for(score, hours),
                    hours,
                    required,
                    required - hours if hours < required else None,
                ))

        if criteria.leadership_required is not None:
            roles = [r.name for r in experience.leadership_roles]
            checks.append(self._check_required_list(
                "leadership", criteria.leadership_required, roles, self.WEIGHT_LEADERSHIP,
            ))

        if criteria.required_extracurriculars:
            checks.append(self._check_extracurriculars(profile, criteria.required_extracurriculars))

        if criteria.min_work_experience is not None:
            months = experience.total_work_months
            required = criteria.min_work_experience
            score = minimum_score(months, required)
            checks.append(CriterionCheck(
                "work_experience",
                score,
                self.WEIGHT_WORK,
                status_for(score, months),
                months,
                required,
                required - months if months < required else None,
            ))

        if criteria.awards_honors_required is not None:
            awards = [a.name for a in experience.awards_honors]
            checks.append(self._check_required_list(
                "awards", criteria.awards_honors_required, awards, self.WEIGHT_AWARDS,
            ))

        return checks

    def _check_required_list(
        self, key: str, required: bool, entries: List[str], weight: float
    ) -> CriterionCheck:
        """Check a "must have at least one" requirement.

        A requirement explicitly set to False still counts with a full score.
        """
        if not required:
            return CriterionCheck(key, 100.0, weight, MatchStatus.NOT_APPLICABLE, entries, False)
        score = 100.0 if entries else 0.0
        return CriterionCheck(
            key, score, weight, MatchStatus.MATCHED if entries else MatchStatus.UNMATCHED, entries, True,
        )

    def _check_extracurriculars(self, profile: StudentProfile, required: List[str]) -> CriterionCheck:
        """Score the share of required activities the student takes part in."""
        activities = [normalize(a.name) for a in profile.experience.extracurriculars]
        names = [a.name for a in profile.experience.extracurriculars]
        if not activities:
            return CriterionCheck(
                "extracurriculars", 0.0, self.WEIGHT_EXTRACURRICULAR, MatchStatus.UNKNOWN, None, required,
            )

        matched = [
            r for r in required
            if normalize(r) and any(normalize(r) in a or a in normalize(r) for a in activities if a)
        ]
        score = len(matched) / len(required) * 100
        missing = [r for r in required if r not in matched]
        return CriterionCheck(
            "extracurriculars",
            score,
            self.WEIGHT_EXTRACURRICULAR,
            status_for(score, names),
            names,
            missing or required,
            len(missing) or None,
        )
