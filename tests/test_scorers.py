# tests/test_scorers.py

"""Tests for the six dimension scorers."""

import pytest
from pydantic import ValidationError

from scholarmatch.criteria import (
    AcademicCriteria,
    DemographicCriteria,
    ExperienceCriteria,
    FinancialCriteria,
    MajorFieldCriteria,
    SpecialCriteria,
)
from scholarmatch.profile.models import StudentProfile
from scholarmatch.scorers import (
    AcademicScorer,
    DemographicScorer,
    ExperienceScorer,
    FinancialScorer,
    MajorFieldScorer,
    MatchStatus,
    SpecialCriteriaScorer,
    build_scorers,
    round_half_up,
)
from scholarmatch.scorers.demographic import estimate_age
from scholarmatch.scorers.financial import parse_efc_upper_bound
from scholarmatch.scorers.major_field import field_families

REFERENCE_YEAR = 2026


def profile(**sections) -> StudentProfile:
    return StudentProfile.model_validate(sections)


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [
        (62.5, 63),
        (82.5, 83),
        (94.2857, 94),
        (0.4, 0),
        (99.5, 100),
    ])
    def test_rounds_halves_up(self, value, expected):
        assert round_half_up(value) == expected


class TestAbsentCriteria:

    @pytest.mark.parametrize("scorer", build_scorers(REFERENCE_YEAR), ids=lambda s: s.name)
    def test_absent_group_scores_100(self, scorer):
        assert scorer.score(StudentProfile(), None) == 100

    def test_empty_group_scores_100(self):
        assert AcademicScorer().score(StudentProfile(), AcademicCriteria()) == 100
        assert DemographicScorer(REFERENCE_YEAR).score(StudentProfile(), DemographicCriteria()) == 100
        assert MajorFieldScorer().score(StudentProfile(), MajorFieldCriteria()) == 100

    def test_scorer_order_matches_weights(self):
        names = [s.name for s in build_scorers()]
        assert names == ["academic", "demographic", "major_field", "experience", "financial", "special"]


class TestAcademicScorer:

    scorer = AcademicScorer()

    def test_gpa_below_minimum_is_proportional(self):
        result = self.scorer.score(profile(academic={"gpa": 2.0}), AcademicCriteria(min_gpa=4.0))
        assert result == 50

    def test_gpa_gap_example(self):
        result = self.scorer.score(profile(academic={"gpa": 3.3}), AcademicCriteria(min_gpa=3.5))
        assert result == 94

    def test_meeting_every_threshold_scores_100(self):
        student = profile(academic={"gpa": 3.9, "sat_score": 1500, "act_score": 34})
        criteria = AcademicCriteria(min_gpa=3.5, min_sat=1400, min_act=30)
        assert self.scorer.score(student, criteria) == 100

    def test_missing_gpa_scores_zero(self):
        assert self.scorer.score(StudentProfile(), AcademicCriteria(min_gpa=3.0)) == 0

    def test_missing_gpa_is_unknown(self):
        evaluation = self.scorer.evaluate(StudentProfile(), AcademicCriteria(min_gpa=3.0))
        assert evaluation.get("gpa").status == MatchStatus.UNKNOWN

    def test_gpa_and_sat_weighting(self):
        student = profile(academic={"gpa": 4.0, "sat_score": 800})
        criteria = AcademicCriteria(min_gpa=3.0, min_sat=1600)
        # (100 * 0.4 + 50 * 0.3) / 0.7
        assert self.scorer.score(student, criteria) == 79

    def test_gpa_above_maximum_is_penalized(self):
        result = self.scorer.score(profile(academic={"gpa": 3.9}), AcademicCriteria(max_gpa=3.5))
        assert result == 92

    def test_sat_above_maximum_is_penalized(self):
        result = self.scorer.score(profile(academic={"sat_score": 1500}), AcademicCriteria(max_sat=1300))
        assert result == 80

    def test_gpa_is_normalized_to_four_point_scale(self):
        student = profile(academic={"gpa": 4.5, "gpa_scale": 5.0})
        assert self.scorer.score(student, AcademicCriteria(min_gpa=3.5)) == 100

    def test_class_rank_below_requirement(self):
        student = profile(academic={"class_rank": 15, "class_size": 100})
        assert self.scorer.score(student, AcademicCriteria(class_rank_percentile=10)) == 67

    def test_class_rank_missing_scores_zero(self):
        assert self.scorer.score(StudentProfile(), AcademicCriteria(class_rank_percentile=10)) == 0


class TestAcademicRankRedistribution:
    """GPA 40 / rank 30 / best test 30, renormalized over present components."""

    scorer = AcademicScorer()

    def test_gpa_and_rank(self):
        student = profile(academic={"gpa": 3.0, "class_rank": 20, "class_size": 100})
        criteria = AcademicCriteria(min_gpa=4.0, class_rank_percentile=10)
        # (75 * 0.4 + 50 * 0.3) / 0.7
        assert self.scorer.score(student, criteria) == 64

    def test_rank_and_tests_use_best_test(self):
        student = profile(academic={"sat_score": 1200, "act_score": 30, "class_rank": 10, "class_size": 100})
        criteria = AcademicCriteria(min_sat=1500, min_act=36, class_rank_percentile=10)
        # (100 * 0.3 + 83.3 * 0.3) / 0.6
        assert self.scorer.score(student, criteria) == 92

    def test_rank_only(self):
        student = profile(academic={"class_rank": 50, "class_size": 100})
        assert self.scorer.score(student, AcademicCriteria(class_rank_percentile=25)) == 50

    def test_all_three_components(self):
        student = profile(academic={"gpa": 4.0, "sat_score": 1600, "class_rank": 20, "class_size": 100})
        criteria = AcademicCriteria(min_gpa=3.0, min_sat=1200, class_rank_percentile=10)
        # 100 * 0.4 + 50 * 0.3 + 100 * 0.3
        assert self.scorer.score(student, criteria) == 85


class TestDemographicScorer:

    scorer = DemographicScorer(reference_year=REFERENCE_YEAR)

    def test_gender_mismatch_scores_zero(self):
        student = profile(demographics={"gender": "Male"})
        assert self.scorer.score(student, DemographicCriteria(required_gender="Female")) == 0

    def test_gender_match_is_case_insensitive(self):
        student = profile(demographics={"gender": "female"})
        assert self.scorer.score(student, DemographicCriteria(required_gender="Female")) == 100

    def test_any_gender_is_skipped(self):
        student = profile(demographics={"gender": "Male"})
        assert self.scorer.score(student, DemographicCriteria(required_gender="Any")) == 100

    def test_ethnicity_overlap(self):
        student = profile(demographics={"ethnicity": ["Asian", "Hispanic"]})
        criteria = DemographicCriteria(required_ethnicity=["hispanic", "Black"])
        assert self.scorer.score(student, criteria) == 100

    def test_empty_ethnicity_scores_zero(self):
        criteria = DemographicCriteria(required_ethnicity=["Hispanic"])
        assert self.scorer.score(StudentProfile(), criteria) == 0

    def test_unweighted_mean(self):
        student = profile(demographics={"gender": "Female", "state": "TX"})
        criteria = DemographicCriteria(required_gender="Female", required_state=["CA"])
        assert self.scorer.score(student, criteria) == 50

    def test_age_below_minimum(self):
        student = profile(academic={"graduation_year": REFERENCE_YEAR})
        assert self.scorer.score(student, DemographicCriteria(age_min=21)) == 86

    def test_age_above_maximum(self):
        student = profile(academic={"graduation_year": REFERENCE_YEAR})
        assert self.scorer.score(student, DemographicCriteria(age_max=16)) == 80

    def test_unknown_age_scores_zero(self):
        assert self.scorer.score(StudentProfile(), DemographicCriteria(age_min=17)) == 0

    def test_in_state_residency(self):
        student = profile(demographics={"state": "CA"})
        criteria = DemographicCriteria(required_state=["CA"], residency_required="In-State")
        assert self.scorer.score(student, criteria) == 100

    def test_out_of_state_residency(self):
        student = profile(demographics={"state": "CA"})
        criteria = DemographicCriteria(required_state=["CA"], residency_required="Out-of-State")
        # state met, residency not met
        assert self.scorer.score(student, criteria) == 50

    def test_residency_case_insensitive(self):
        criteria = DemographicCriteria(residency_required="in-state")
        assert criteria.residency_required == "In-State"

    def test_unknown_residency_rejected(self):
        with pytest.raises(ValidationError, match="residencyRequired must be one of"):
            DemographicCriteria(residency_required="Resident Alien")

    def test_estimate_age(self):
        assert estimate_age(2026, 2026) == 18
        assert estimate_age(2020, 2026) == 24
        assert estimate_age(None, 2026) is None


class TestMajorFieldScorer:

    scorer = MajorFieldScorer()

    def student(self, major=None, field=None, goals=None):
        return profile(major_field={
            "intended_major": major, "field_of_study": field, "career_goals": goals,
        })

    def test_exact_major(self):
        criteria = MajorFieldCriteria(eligible_majors=["Biology"])
        assert self.scorer.score(self.student("biology"), criteria) == 100

    def test_partial_major(self):
        criteria = MajorFieldCriteria(eligible_majors=["Computer Science"])
        assert self.scorer.score(self.student("Computer"), criteria) == 75

    def test_related_family_major(self):
        criteria = MajorFieldCriteria(eligible_majors=["Physics"])
        assert self.scorer.score(self.student("Chemistry"), criteria) == 50

    def test_unrelated_major(self):
        criteria = MajorFieldCriteria(eligible_majors=["Nursing"])
        assert self.scorer.score(self.student("History"), criteria) == 0

    def test_excluded_major_short_circuits(self):
        criteria = MajorFieldCriteria(
            eligible_majors=["Biology"],
            excluded_majors=["Biology"],
            career_goals_keywords=["research"],
        )
        student = self.student("Biology", goals="research")
        assert self.scorer.score(student, criteria) == 0
        evaluation = self.scorer.evaluate(student, criteria)
        assert [c.key for c in evaluation.checks] == ["excluded_major"]

    def test_career_keywords_boosted_and_capped(self):
        criteria = MajorFieldCriteria(career_goals_keywords=["medicine", "research"])
        student = self.student(goals="I want to do research in medicine")
        assert self.scorer.score(student, criteria) == 100

    def test_career_keywords_partial(self):
        criteria = MajorFieldCriteria(career_goals_keywords=["medicine", "research", "teaching"])
        student = self.student(goals="Research scientist")
        assert self.scorer.score(student, criteria) == 40

    def test_field_of_study_partial(self):
        criteria = MajorFieldCriteria(required_field_of_study=["Life Sciences"])
        assert self.scorer.score(self.student(field="Sciences"), criteria) == 80

    def test_weighted_major_and_missing_field(self):
        criteria = MajorFieldCriteria(eligible_majors=["Biology"], required_field_of_study=["STEM"])
        # (100 * 0.5 + 0 * 0.3) / 0.8 = 62.5
        assert self.scorer.score(self.student("Biology"), criteria) == 63

    def test_field_families(self):
        assert "stem" in field_families("Computer Science")
        assert "business" in field_families("Finance")
        assert field_families("Culinary") == set()


class TestExperienceScorer:

    scorer = ExperienceScorer()

    def test_volunteer_hours_partial(self):
        student = profile(experience={"volunteer_hours": 50})
        assert self.scorer.score(student, ExperienceCriteria(min_volunteer_hours=100)) == 50

    def test_missing_volunteer_hours_scores_zero(self):
        assert self.scorer.score(StudentProfile(), ExperienceCriteria(min_volunteer_hours=100)) == 0

    def test_leadership_not_required_is_satisfied(self):
        evaluation = self.scorer.evaluate(StudentProfile(), ExperienceCriteria(leadership_required=False))
        assert evaluation.score == 100
        assert evaluation.get("leadership").status == MatchStatus.NOT_APPLICABLE

    def test_weighted_volunteer_and_leadership(self):
        student = profile(experience={"volunteer_hours": 150})
        criteria = ExperienceCriteria(min_volunteer_hours=100, leadership_required=True)
        # (100 * 0.35 + 0 * 0.25) / 0.6
        assert self.scorer.score(student, criteria) == 58

    def test_extracurricular_share(self):
        student = profile(experience={"extracurriculars": ["Robotics Club"]})
        criteria = ExperienceCriteria(required_extracurriculars=["Robotics", "Debate"])
        evaluation = self.scorer.evaluate(student, criteria)
        assert evaluation.score == 50
        assert evaluation.get("extracurriculars").required_value == ["Debate"]

    def test_work_experience_months(self):
        student = profile(experience={"work_experience": [
            {"name": "Cashier", "months": 3},
            {"name": "Intern", "months": 3},
        ]})
        assert self.scorer.score(student, ExperienceCriteria(min_work_experience=12)) == 50

    def test_awards_required(self):
        student = profile(experience={"awards_honors": ["Eagle Scout"]})
        assert self.scorer.score(student, ExperienceCriteria(awards_honors_required=True)) == 100


class TestFinancialScorer:

    scorer = FinancialScorer()

    def test_need_below_required_level(self):
        student = profile(financial={"financial_need": "MODERATE"})
        criteria = FinancialCriteria(requires_financial_need=True, financial_need_level="HIGH")
        assert self.scorer.score(student, criteria) == 67

    def test_need_without_level(self):
        student = profile(financial={"financial_need": "LOW"})
        assert self.scorer.score(student, FinancialCriteria(requires_financial_need=True)) == 100

    def test_unknown_need_scores_zero(self):
        assert self.scorer.score(StudentProfile(), FinancialCriteria(requires_financial_need=True)) == 0

    def test_need_not_required(self):
        assert self.scorer.score(StudentProfile(), FinancialCriteria(requires_financial_need=False)) == 100

    def test_pell_required(self):
        student = profile(financial={"pell_grant_eligible": False})
        assert self.scorer.score(student, FinancialCriteria(pell_grant_required=True)) == 0

    @pytest.mark.parametrize("eligible,required,expected", [
        (True, False, 0),
        (False, False, 100),
        (True, True, 100),
        (None, False, 0),
    ])
    def test_pell_must_equal_requirement(self, eligible, required, expected):
        student = profile(financial={"pell_grant_eligible": eligible})
        assert self.scorer.score(student, FinancialCriteria(pell_grant_required=required)) == expected

    def test_efc_above_maximum(self):
        student = profile(financial={"efc_range": "0-5000"})
        assert self.scorer.score(student, FinancialCriteria(max_efc=4000)) == 80

    @pytest.mark.parametrize("text,expected", [
        ("0-5000", 5000.0),
        ("$5,001 - $10,000", 10000.0),
        ("20000+", 20000.0),
        ("unknown", None),
        (None, None),
    ])
    def test_parse_efc_upper_bound(self, text, expected):
        assert parse_efc_upper_bound(text) == expected

    def test_zero_efc_within_zero_maximum(self):
        student = profile(financial={"efc_range": "0"})
        assert self.scorer.score(student, FinancialCriteria(max_efc=0)) == 100

    def test_negative_maximum_efc_rejected(self):
        with pytest.raises(ValidationError):
            FinancialCriteria(max_efc=-1)


class TestSpecialCriteriaScorer:

    scorer = SpecialCriteriaScorer()

    def test_first_generation(self):
        student = profile(special={"first_generation": True})
        assert self.scorer.score(student, SpecialCriteria(first_generation_required=True)) == 100

    @pytest.mark.parametrize("first_gen,required,expected", [
        (True, False, 0),
        (False, False, 100),
        (False, True, 0),
        (None, True, 0),
    ])
    def test_first_generation_must_equal_requirement(self, first_gen, required, expected):
        student = profile(special={"first_generation": first_gen})
        assert self.scorer.score(student, SpecialCriteria(first_generation_required=required)) == expected

    def test_related_military_affiliation(self):
        student = profile(special={"military_affiliation": "Active Duty"})
        assert self.scorer.score(student, SpecialCriteria(military_affiliation="Veteran")) == 75

    def test_no_affiliation_against_none_requirement(self):
        assert self.scorer.score(StudentProfile(), SpecialCriteria(military_affiliation="None")) == 100

    def test_citizen_meets_permanent_resident_requirement(self):
        student = profile(demographics={"citizenship": "US Citizen"})
        criteria = SpecialCriteria(citizenship_required="Permanent Resident")
        assert self.scorer.score(student, criteria) == 100

    def test_mean_of_first_gen_and_partial_citizenship(self):
        student = profile(
            special={"first_generation": True},
            demographics={"citizenship": "Permanent Resident"},
        )
        criteria = SpecialCriteria(first_generation_required=True, citizenship_required="US Citizen")
        assert self.scorer.score(student, criteria) == 75

    def test_disability_required(self):
        assert self.scorer.score(StudentProfile(), SpecialCriteria(disability_required=True)) == 0
        student = profile(special={"disabilities": "Dyslexia"})
        assert self.scorer.score(student, SpecialCriteria(disability_required=True)) == 100
