"""Profile module for student profile data."""

from scholarmatch.profile.models import (
    AcademicInfo,
    Activity,
    Award,
    DemographicInfo,
    ExperienceInfo,
    FinancialInfo,
    FinancialNeedLevel,
    LeadershipRole,
    MajorFieldInfo,
    SpecialInfo,
    StudentProfile,
    WorkExperience,
)

__all__ = [
    "AcademicInfo",
    "Activity",
    "Award",
    "DemographicInfo",
    "ExperienceInfo",
    "FinancialInfo",
    "FinancialNeedLevel",
    "LeadershipRole",
    "MajorFieldInfo",
    "SpecialInfo",
    "StudentProfile",
    "WorkExperience",
]
