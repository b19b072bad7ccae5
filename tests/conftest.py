# tests/conftest.py

"""Shared fixtures for the scoring engine tests."""

import pytest

from scholarmatch.config import EngineSettings
from scholarmatch.criteria import EligibilityCriteria, Scholarship
from scholarmatch.matching.matcher import MatchEngine
from scholarmatch.profile.models import StudentProfile

REFERENCE_YEAR = 2026


@pytest.fixture
def settings():
    """Engine settings pinned to a fixed reference year."""
    return EngineSettings(max_workers=4, reference_year=REFERENCE_YEAR)


@pytest.fixture
def engine(settings):
    return MatchEngine(settings)


@pytest.fixture
def example_profile():
    """Strong student profile used by the worked examples."""
    return StudentProfile.model_validate({
        "student_id": "stu-1",
        "name": "Jordan Lee",
        "academic": {"gpa": 4.0, "sat_score": 1600},
        "demographics": {"gender": "Male"},
        "major_field": {"intended_major": "Biology"},
        "experience": {"volunteer_hours": 150},
        "financial": {"financial_need": "HIGH"},
        "special": {"first_generation": True},
    })


@pytest.fixture
def full_profile():
    """Profile with every section filled in."""
    return StudentProfile.model_validate({
        "student_id": "stu-2",
        "name": "Avery Chen",
        "strength_score": 70,
        "academic": {
            "gpa": 3.8,
            "sat_score": 1450,
            "act_score": 32,
            "class_rank": 8,
            "class_size": 200,
            "graduation_year": 2026,
        },
        "demographics": {
            "gender": "Female",
            "ethnicity": ["Hispanic"],
            "state": "CA",
            "city": "Fresno",
            "citizenship": "US Citizen",
        },
        "financial": {
            "financial_need": "VERY_HIGH",
            "pell_grant_eligible": True,
            "efc_range": "0-2000",
        },
        "major_field": {
            "intended_major": "Computer Science",
            "field_of_study": "STEM",
            "career_goals": "Build software for public health research",
        },
        "experience": {
            "volunteer_hours": 220,
            "leadership_roles": ["Robotics Captain"],
            "extracurriculars": ["Robotics Club", "Debate Team"],
            "work_experience": [{"name": "Tutor", "months": 8}],
            "awards_honors": ["National Merit Finalist"],
        },
        "special": {
            "first_generation": True,
            "military_affiliation": "Dependent",
        },
    })


@pytest.fixture
def full_criteria():
    """Criteria the full profile meets in every dimension."""
    return EligibilityCriteria.model_validate({
        "academic": {"minGPA": 3.5, "minSAT": 1300, "classRankPercentile": 10},
        "demographic": {"requiredGender": "Female", "requiredState": ["CA"], "residencyRequired": "In-State"},
        "majorField": {"eligibleMajors": ["Computer Science", "Engineering"]},
        "experience": {"minVolunteerHours": 100, "leadershipRequired": True},
        "financial": {"requiresFinancialNeed": True, "financialNeedLevel": "HIGH", "maxEFC": 5000},
        "special": {"firstGenerationRequired": True, "citizenshipRequired": "US Citizen"},
    })


@pytest.fixture
def scholarship(full_criteria):
    return Scholarship(
        id="sch-1",
        name="Future Engineers Award",
        award_amount=10000,
        acceptance_rate=0.9,
        essay_prompts=["Why engineering?"],
        eligibility_criteria=full_criteria,
    )
