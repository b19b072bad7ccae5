"""Pydantic models for student profile data."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class FinancialNeedLevel(str, Enum):
    """Self-reported level of financial need, ordered lowest to highest."""

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def rank(self) -> int:
        return _NEED_RANKS[self]


_NEED_RANKS = {
    FinancialNeedLevel.LOW: 1,
    FinancialNeedLevel.MODERATE: 2,
    FinancialNeedLevel.HIGH: 3,
    FinancialNeedLevel.VERY_HIGH: 4,
}


def _coerce_named_entries(value: Any) -> Any:
    """Allow plain strings in place of structured list entries."""
    if value is None:
        return []
    if isinstance(value, list):
        return [{"name": item} if isinstance(item, str) else item for item in value]
    return value


class LeadershipRole(BaseModel):
    """A leadership position held by the student."""

    name: str = Field(..., description="Title of the position, e.g. 'Club President'")
    organization: Optional[str] = Field(None, description="Organization the role was held in")
    years: Optional[float] = Field(None, ge=0, description="Years in the role")


class Activity(BaseModel):
    """An extracurricular activity."""

    name: str = Field(..., description="Activity name, e.g. 'Robotics Club'")
    role: Optional[str] = Field(None, description="Role within the activity")
    years: Optional[float] = Field(None, ge=0, description="Years of participation")


class WorkExperience(BaseModel):
    """A job or internship."""

    name: str = Field(..., description="Job title")
    employer: Optional[str] = Field(None, description="Employer name")
    months: float = Field(0, ge=0, description="Duration in months")


class Award(BaseModel):
    """An award or honor."""

    name: str = Field(..., description="Award name")
    level: Optional[str] = Field(None, description="school, regional, state, national...")


class AcademicInfo(BaseModel):
    """Academic information."""

    gpa: Optional[float] = Field(None, ge=0.0, description="Cumulative GPA")
    gpa_scale: float = Field(4.0, gt=0.0, description="Scale the GPA is reported on")
    sat_score: Optional[int] = Field(None, ge=400, le=1600, description="Composite SAT score")
    act_score: Optional[int] = Field(None, ge=1, le=36, description="Composite ACT score")
    class_rank: Optional[int] = Field(None, ge=1, description="Position in graduating class")
    class_size: Optional[int] = Field(None, ge=0, description="Size of graduating class")
    graduation_year: Optional[int] = Field(None, description="High school graduation year")
    current_grade: Optional[str] = Field(None, description="Current grade or year in school")

    @property
    def gpa_on_four_scale(self) -> Optional[float]:
        """GPA converted to the 4.0 scale scholarship criteria are written in."""
        if self.gpa is None:
            return None
        if self.gpa_scale == 4.0:
            return self.gpa
        return self.gpa * 4.0 / self.gpa_scale


class DemographicInfo(BaseModel):
    """Demographic and location information."""

    gender: Optional[str] = Field(None, description="Gender")
    ethnicity: list[str] = Field(
        default_factory=list,
        description="Ethnicity/race (can be multiple)",
    )
    state: Optional[str] = Field(None, description="US state of residence")
    city: Optional[str] = Field(None, description="City of residence")
    zip_code: Optional[str] = Field(None, description="ZIP code")
    citizenship: Optional[str] = Field(
        None, description="US Citizen, Permanent Resident, International..."
    )

    @field_validator("ethnicity", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FinancialInfo(BaseModel):
    """Financial information."""

    financial_need: Optional[FinancialNeedLevel] = Field(
        None, description="Level of financial need"
    )
    pell_grant_eligible: Optional[bool] = Field(None, description="Pell Grant eligible")
    efc_range: Optional[str] = Field(
        None, description="Expected Family Contribution range, e.g. '0-5000'"
    )


class MajorFieldInfo(BaseModel):
    """Intended study and career direction."""

    intended_major: Optional[str] = Field(None, description="Intended major")
    field_of_study: Optional[str] = Field(None, description="Broader field of study")
    career_goals: Optional[str] = Field(None, description="Free-text career goals")


class ExperienceInfo(BaseModel):
    """Volunteer work, leadership, activities, jobs and awards."""

    volunteer_hours: Optional[float] = Field(None, ge=0, description="Total volunteer hours")
    leadership_roles: list[LeadershipRole] = Field(default_factory=list)
    extracurriculars: list[Activity] = Field(default_factory=list)
    work_experience: list[WorkExperience] = Field(default_factory=list)
    awards_honors: list[Award] = Field(default_factory=list)

    @field_validator(
        "leadership_roles", "extracurriculars", "work_experience", "awards_honors",
        mode="before",
    )
    @classmethod
    def _accept_plain_names(cls, value: Any) -> Any:
        return _coerce_named_entries(value)

    @property
    def total_work_months(self) -> float:
        return sum(job.months for job in self.work_experience)


class SpecialInfo(BaseModel):
    """Special circumstances."""

    first_generation: Optional[bool] = Field(
        None, description="First generation college student"
    )
    military_affiliation: Optional[str] = Field(
        None, description="None, Veteran, Active Duty, Dependent..."
    )
    disabilities: Optional[str] = Field(None, description="Documented disabilities")


class StudentProfile(BaseModel):
    """Complete student profile for scholarship matching."""

    student_id: Optional[str] = Field(None, description="Identifier of the owning student")
    name: Optional[str] = Field(None, description="Student's name")
    strength_score: Optional[float] = Field(
        None, ge=0, le=100, description="Overall profile strength, 50 is average"
    )
    completion_percentage: Optional[float] = Field(
        None, ge=0, le=100, description="Share of the profile filled in, scales derived strength"
    )

    academic: AcademicInfo = Field(default_factory=AcademicInfo)
    demographics: DemographicInfo = Field(default_factory=DemographicInfo)
    financial: FinancialInfo = Field(default_factory=FinancialInfo)
    major_field: MajorFieldInfo = Field(default_factory=MajorFieldInfo)
    experience: ExperienceInfo = Field(default_factory=ExperienceInfo)
    special: SpecialInfo = Field(default_factory=SpecialInfo)

    def get_summary(self) -> dict:
        """Get a summary of key profile attributes for display."""
        return {
            "name": self.name,
            "gpa": self.academic.gpa,
            "sat": self.academic.sat_score,
            "act": self.academic.act_score,
            "major": self.major_field.intended_major,
            "state": self.demographics.state,
            "financial_need": (
                self.financial.financial_need.value if self.financial.financial_need else None
            ),
            "first_gen": self.special.first_generation,
            "volunteer_hours": self.experience.volunteer_hours,
        }
