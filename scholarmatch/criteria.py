"""Eligibility criteria models and the criteria payload parser.

Scholarships store their eligibility rules as a loosely typed JSON document.
The models here give every dimension its own optional, strongly typed group;
a group that is absent means the scholarship states no requirement for that
dimension.
"""

import json
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from scholarmatch.errors import MalformedCriteriaError
from scholarmatch.profile.models import FinancialNeedLevel

RESIDENCY_OPTIONS = {
    "in-state": "In-State",
    "out-of-state": "Out-of-State",
    "any": "Any",
}


class _CriteriaGroup(BaseModel):
    """Shared configuration for criteria groups.

    Payloads use camelCase keys; snake_case field names are accepted as well.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class AcademicCriteria(_CriteriaGroup):
    """Academic thresholds. GPA values are on a 4.0 scale."""

    min_gpa: Optional[float] = Field(None, alias="minGPA")
    max_gpa: Optional[float] = Field(None, alias="maxGPA")
    min_sat: Optional[int] = Field(None, alias="minSAT")
    max_sat: Optional[int] = Field(None, alias="maxSAT")
    min_act: Optional[int] = Field(None, alias="minACT")
    max_act: Optional[int] = Field(None, alias="maxACT")
    class_rank_percentile: Optional[float] = Field(
        None, alias="classRankPercentile", description="Required top percent, e.g. 10"
    )


class DemographicCriteria(_CriteriaGroup):
    """Demographic and location requirements."""

    required_gender: Optional[str] = Field(None, alias="requiredGender")
    required_ethnicity: List[str] = Field(default_factory=list, alias="requiredEthnicity")
    required_state: List[str] = Field(default_factory=list, alias="requiredState")
    required_city: List[str] = Field(default_factory=list, alias="requiredCity")
    age_min: Optional[int] = Field(None, alias="ageMin")
    age_max: Optional[int] = Field(None, alias="ageMax")
    residency_required: Optional[str] = Field(
        None, alias="residencyRequired", description="In-State, Out-of-State or Any"
    )

    @field_validator("required_ethnicity", "required_state", "required_city", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("residency_required", mode="before")
    @classmethod
    def _known_residency(cls, value: Any) -> Any:
        if value is None or not str(value).strip():
            return None
        canonical = RESIDENCY_OPTIONS.get(str(value).strip().casefold())
        if canonical is None:
            raise ValueError(
                f"residencyRequired must be one of {', '.join(RESIDENCY_OPTIONS.values())}, got {value!r}"
            )
        return canonical


class MajorFieldCriteria(_CriteriaGroup):
    """Major, field of study and career direction requirements."""

    eligible_majors: List[str] = Field(default_factory=list, alias="eligibleMajors")
    excluded_majors: List[str] = Field(default_factory=list, alias="excludedMajors")
    required_field_of_study: List[str] = Field(
        default_factory=list, alias="requiredFieldOfStudy"
    )
    career_goals_keywords: List[str] = Field(
        default_factory=list, alias="careerGoalsKeywords"
    )

    @field_validator(
        "eligible_majors", "excluded_majors", "required_field_of_study",
        "career_goals_keywords", mode="before",
    )
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ExperienceCriteria(_CriteriaGroup):
    """Volunteer, leadership, activity, work and award requirements."""

    min_volunteer_hours: Optional[float] = Field(None, alias="minVolunteerHours")
    leadership_required: Optional[bool] = Field(None, alias="leadershipRequired")
    required_extracurriculars: List[str] = Field(
        default_factory=list, alias="requiredExtracurriculars"
    )
    min_work_experience: Optional[float] = Field(
        None, alias="minWorkExperience", description="Minimum months of work experience"
    )
    awards_honors_required: Optional[bool] = Field(None, alias="awardsHonorsRequired")

    @field_validator("required_extracurriculars", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FinancialCriteria(_CriteriaGroup):
    """Financial need requirements."""

    requires_financial_need: Optional[bool] = Field(None, alias="requiresFinancialNeed")
    financial_need_level: Optional[FinancialNeedLevel] = Field(
        None, alias="financialNeedLevel"
    )
    pell_grant_required: Optional[bool] = Field(None, alias="pellGrantRequired")
    max_efc: Optional[float] = Field(None, ge=0, alias="maxEFC")

    @field_validator("financial_need_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper().replace(" ", "_")
        return value


class SpecialCriteria(_CriteriaGroup):
    """First-generation, military, disability and citizenship requirements."""

    first_generation_required: Optional[bool] = Field(None, alias="firstGenerationRequired")
    military_affiliation: Optional[str] = Field(None, alias="militaryAffiliation")
    disability_required: Optional[bool] = Field(None, alias="disabilityRequired")
    citizenship_required: Optional[str] = Field(None, alias="citizenshipRequired")


class EligibilityCriteria(BaseModel):
    """Six independently optional dimension criteria groups."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    academic: Optional[AcademicCriteria] = None
    demographic: Optional[DemographicCriteria] = None
    major_field: Optional[MajorFieldCriteria] = Field(None, alias="majorField")
    experience: Optional[ExperienceCriteria] = None
    financial: Optional[FinancialCriteria] = None
    special: Optional[SpecialCriteria] = None

    def is_empty(self) -> bool:
        """Return True if no dimension group is present."""
        return all(
            group is None
            for group in (
                self.academic,
                self.demographic,
                self.major_field,
                self.experience,
                self.financial,
                self.special,
            )
        )


CriteriaPayload = Union[EligibilityCriteria, Dict[str, Any], str, bytes, None]


def parse_eligibility_criteria(payload: CriteriaPayload) -> EligibilityCriteria:
    """Normalize a criteria payload into an EligibilityCriteria instance.

    Args:
        payload: An EligibilityCriteria, a mapping, JSON text (str or bytes), or None

    Returns:
        EligibilityCriteria. None and an empty object both mean "no requirements".

    Raises:
        MalformedCriteriaError: If the payload is not valid JSON, is not a JSON
            object, or does not fit the criteria model
    """
    if payload is None:
        return EligibilityCriteria()

    if isinstance(payload, EligibilityCriteria):
        return payload

    data: Any = payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedCriteriaError(f"Failed to parse eligibility criteria: {e}") from e
        if data is None:
            return EligibilityCriteria()

    if not isinstance(data, dict):
        raise MalformedCriteriaError(
            f"Eligibility criteria must be an object, got {type(data).__name__}"
        )

    try:
        return EligibilityCriteria.model_validate(data)
    except ValidationError as e:
        raise MalformedCriteriaError(f"Invalid eligibility criteria: {e}") from e


class Scholarship(BaseModel):
    """A scholarship as seen by the scoring engine."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field("", description="Scholarship identifier")
    name: str = Field("Untitled scholarship", description="Display name")
    provider: Optional[str] = Field(None, description="Awarding organization")
    award_amount: float = Field(0, alias="awardAmount", description="Award in dollars")
    acceptance_rate: Optional[float] = Field(None, alias="acceptanceRate")
    applicant_pool_size: Optional[int] = Field(None, alias="applicantPoolSize")
    number_of_awards: Optional[int] = Field(None, alias="numberOfAwards")
    essay_prompts: Optional[Union[List[Any], Dict[str, Any]]] = Field(
        None, alias="essayPrompts"
    )
    required_documents: List[str] = Field(default_factory=list, alias="requiredDocuments")
    recommendation_count: int = Field(0, alias="recommendationCount")
    eligibility_criteria: EligibilityCriteria = Field(
        default_factory=EligibilityCriteria, alias="eligibilityCriteria"
    )

    @field_validator("required_documents", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("recommendation_count", mode="before")
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Scholarship":
        """Build a Scholarship from a raw record whose criteria may be JSON text.

        Raises:
            MalformedCriteriaError: If the criteria payload cannot be parsed
        """
        data = dict(record)
        raw_criteria = None
        for key in ("eligibility_criteria", "eligibilityCriteria"):
            if key in data:
                raw_criteria = data.pop(key)
        scholarship = cls.model_validate(data)
        criteria = parse_eligibility_criteria(raw_criteria)
        return scholarship.model_copy(update={"eligibility_criteria": criteria})
