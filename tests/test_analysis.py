# tests/test_analysis.py

"""Tests for the eligibility analyzer."""

import pytest

from scholarmatch.criteria import parse_eligibility_criteria
from scholarmatch.matching.analysis import (
    ALL_MET_RECOMMENDATION,
    DEMOGRAPHIC_NOTE,
    GENERAL_RECOMMENDATION,
    NO_REQUIREMENTS,
    EligibilityAnalyzer,
    OverallAssessment,
    calculate_competitive_positioning,
    determine_overall_assessment,
    explain_dimension,
)
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers import build_scorers


@pytest.fixture
def analyzer():
    return EligibilityAnalyzer(build_scorers(reference_year=2026))


def analyze(analyzer, profile, payload):
    return analyzer.analyze(profile, parse_eligibility_criteria(payload), scholarship_id="sch-1")


class TestEmptyCriteria:

    def test_everything_met(self, analyzer, example_profile):
        analysis = analyze(analyzer, example_profile, {})
        assert analysis.overall_score == 100
        assert analysis.overall_assessment == OverallAssessment.HIGHLY_ELIGIBLE
        assert analysis.gap_analysis.total_criteria == 0
        assert analysis.gap_analysis.missing_criteria == ()
        assert analysis.recommendations == (ALL_MET_RECOMMENDATION,)

    def test_no_requirement_explanations(self, analyzer, example_profile):
        analysis = analyze(analyzer, example_profile, {})
        for name, dimension in analysis.dimensions.items():
            assert dimension.score == 100
            assert dimension.explanation == NO_REQUIREMENTS[name]


class TestGapStatements:

    def test_gpa_gap(self, analyzer):
        profile = StudentProfile.model_validate({"academic": {"gpa": 3.3}})
        analysis = analyze(analyzer, profile, {"academic": {"minGPA": 3.5}})

        assert analysis.academic.score == 94
        assert analysis.academic.missing_criteria == ("GPA 3.30 below minimum 3.50 (need 0.20 more)",)
        assert analysis.gap_analysis.missing_criteria == (
            "Academic: GPA 3.30 below minimum 3.50 (need 0.20 more)",
        )
        assert analysis.recommendations[0] == (
            "Raise your GPA by 0.20 points to 3.50 to meet the academic requirement."
        )
        assert analysis.overall_assessment == OverallAssessment.COMPETITIVE

    def test_gpa_met(self, analyzer):
        profile = StudentProfile.model_validate({"academic": {"gpa": 3.8}})
        analysis = analyze(analyzer, profile, {"academic": {"minGPA": 3.5}})
        assert analysis.academic.met_criteria == ("GPA 3.80 meets minimum 3.50",)
        assert analysis.academic.explanation == "Excellent academic match! GPA 3.80 meets minimum 3.50"
        assert analysis.academic.details["gpa"]["met"] is True

    def test_missing_gpa(self, analyzer):
        analysis = analyze(analyzer, StudentProfile(), {"academic": {"minGPA": 3.0}})
        assert analysis.academic.missing_criteria == ("GPA not provided (minimum 3.00 required)",)

    def test_sat_gap(self, analyzer):
        profile = StudentProfile.model_validate({"academic": {"sat_score": 1200}})
        analysis = analyze(analyzer, profile, {"academic": {"minSAT": 1400}})
        assert analysis.academic.missing_criteria == ("SAT 1200 below minimum 1400 (need 200 more points)",)
        assert analysis.recommendations[0] == (
            "Improve your SAT score by 200 points to 1400 through test prep and retaking the exam."
        )

    def test_class_rank_gap(self, analyzer):
        profile = StudentProfile.model_validate({"academic": {"class_rank": 15, "class_size": 100}})
        analysis = analyze(analyzer, profile, {"academic": {"classRankPercentile": 10}})
        assert analysis.academic.missing_criteria == (
            "Class rank top 15.0% does not meet requirement (need top 10%)",
        )

    def test_volunteer_gap(self, analyzer):
        profile = StudentProfile.model_validate({"experience": {"volunteer_hours": 50}})
        analysis = analyze(analyzer, profile, {"experience": {"minVolunteerHours": 100}})
        assert analysis.experience.missing_criteria == ("Need 50 more volunteer hours (have 50, need 100)",)
        assert "Gain 50 more volunteer hours to reach the 100-hour requirement." in analysis.recommendations

    def test_leadership_recommendation(self, analyzer):
        analysis = analyze(analyzer, StudentProfile(), {"experience": {"leadershipRequired": True}})
        assert analysis.experience.missing_criteria == ("Leadership position required",)
        assert analysis.recommendations[0].startswith("Consider joining a student organization")

    def test_activity_recommendation(self, analyzer):
        profile = StudentProfile.model_validate({"experience": {"extracurriculars": ["Chess Club"]}})
        analysis = analyze(analyzer, profile, {"experience": {"requiredExtracurriculars": ["Debate"]}})
        assert analysis.experience.missing_criteria == ("Required activities: Debate",)
        assert "Get involved in Debate to meet the activity requirements." in analysis.recommendations

    def test_not_required_flags_are_not_counted(self, analyzer):
        payload = {"experience": {"leadershipRequired": False}, "special": {"disabilityRequired": False}}
        analysis = analyze(analyzer, StudentProfile(), payload)
        assert analysis.gap_analysis.total_criteria == 0
        assert analysis.recommendations == (ALL_MET_RECOMMENDATION,)

    def test_excluded_pell_and_first_generation_statements(self, analyzer):
        profile = StudentProfile.model_validate({
            "financial": {"pell_grant_eligible": True},
            "special": {"first_generation": False},
        })
        payload = {
            "financial": {"pellGrantRequired": False},
            "special": {"firstGenerationRequired": False},
        }
        analysis = analyze(analyzer, profile, payload)
        assert analysis.financial.missing_criteria == ("Must not be Pell Grant eligible",)
        assert analysis.special.met_criteria == ("Not a first-generation college student, as required",)

    def test_financial_need_level(self, analyzer):
        profile = StudentProfile.model_validate({"financial": {"financial_need": "LOW"}})
        payload = {"financial": {"requiresFinancialNeed": True, "financialNeedLevel": "HIGH"}}
        analysis = analyze(analyzer, profile, payload)
        assert analysis.financial.missing_criteria == ("Financial need level LOW below required HIGH",)

    def test_special_statements(self, analyzer):
        profile = StudentProfile.model_validate({"demographics": {"citizenship": "US Citizen"}})
        payload = {"special": {
            "firstGenerationRequired": True,
            "citizenshipRequired": "US Citizen",
            "militaryAffiliation": "Veteran",
        }}
        analysis = analyze(analyzer, profile, payload)
        assert analysis.special.met_criteria == ("Citizenship: US Citizen",)
        assert analysis.special.missing_criteria == (
            "Must be first-generation college student",
            "Military affiliation required: Veteran",
        )
        assert analysis.gap_analysis.missing_criteria[0] == (
            "Special Criteria: Must be first-generation college student"
        )


class TestDemographicGaps:

    def test_fixed_factor_note(self, analyzer, example_profile):
        analysis = analyze(analyzer, example_profile, {"demographic": {"requiredGender": "Female"}})
        assert analysis.overall_score == 85
        assert analysis.demographic.missing_criteria == ("Gender requirement: Female",)
        assert analysis.gap_analysis.missing_criteria == ("Demographic: Gender requirement: Female",)
        assert analysis.recommendations == (DEMOGRAPHIC_NOTE,)
        assert analysis.overall_assessment == OverallAssessment.COMPETITIVE

    def test_ethnicity_and_age_statements(self, analyzer):
        payload = {"demographic": {"requiredEthnicity": ["Hispanic", "Black"], "ageMin": 17, "ageMax": 24}}
        analysis = analyze(analyzer, StudentProfile(), payload)
        assert analysis.demographic.missing_criteria == (
            "Required ethnicity: Hispanic or Black",
            "Age requirement: 17-24 years old",
        )


class TestMajorFieldStatements:

    def test_excluded_major(self, analyzer):
        profile = StudentProfile.model_validate({"major_field": {"intended_major": "Undeclared"}})
        payload = {"majorField": {"excludedMajors": ["Undeclared"], "eligibleMajors": ["Biology"]}}
        analysis = analyze(analyzer, profile, payload)
        assert analysis.major_field.score == 0
        assert analysis.major_field.missing_criteria == ("Major Undeclared is excluded from this scholarship",)

    def test_eligible_major(self, analyzer, example_profile):
        analysis = analyze(analyzer, example_profile, {"majorField": {"eligibleMajors": ["Biology"]}})
        assert analysis.major_field.met_criteria == ("Major Biology is eligible",)
        assert analysis.major_field.explanation == "Perfect major match! Major Biology is eligible"


class TestFallbackRecommendation:

    def test_general_recommendation_when_gaps_are_not_actionable(self, analyzer):
        analysis = analyze(analyzer, StudentProfile(), {"special": {"firstGenerationRequired": True}})
        assert analysis.recommendations == (GENERAL_RECOMMENDATION,)


class TestAssessment:

    @pytest.mark.parametrize("score,missing,expected", [
        (95, 0, OverallAssessment.HIGHLY_ELIGIBLE),
        (95, 1, OverallAssessment.COMPETITIVE),
        (70, 0, OverallAssessment.COMPETITIVE),
        (69, 0, OverallAssessment.NEEDS_IMPROVEMENT),
        (50, 3, OverallAssessment.NEEDS_IMPROVEMENT),
        (49, 0, OverallAssessment.NOT_ELIGIBLE),
    ])
    def test_thresholds(self, score, missing, expected):
        assert determine_overall_assessment(score, missing) == expected

    @pytest.mark.parametrize("score,percentile,fragment", [
        (100, 90, "top 10%"),
        (84, 76, "top 25%"),
        (56, 50, "top 50%"),
        (28, 25, "bottom 50%"),
        (20, 18, "below typical applicants"),
    ])
    def test_competitive_positioning(self, score, percentile, fragment):
        positioning = calculate_competitive_positioning(score)
        assert positioning.percentile == percentile
        assert fragment in positioning.message

    def test_explanation_without_met_criteria(self):
        text = explain_dimension("experience", 40, [], ["Leadership position required"])
        assert text == "Experience requirements need attention. Leadership position required"

    def test_to_dict(self, analyzer, example_profile):
        data = analyze(analyzer, example_profile, {"academic": {"minGPA": 3.0}}).to_dict()
        assert data["scholarship_id"] == "sch-1"
        assert data["overall_assessment"] == "Highly Eligible"
        assert data["dimensions"]["academic"]["met_criteria"] == ["GPA 4.00 meets minimum 3.00"]
