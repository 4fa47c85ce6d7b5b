"""
Tests for the per-dimension job match functions.
"""
import pytest

from personalization.models import EducationLevel, JobType, Language, LanguageLevel, SalaryRange, WorkPreference
from personalization.scorer.dimensions import (
    city_distance,
    culture_match,
    education_match,
    experience_match,
    location_match,
    parse_required_years,
    range_match,
    required_education_level,
    skill_match,
    work_style_match,
)
from tests.factories import make_candidate, make_job


class TestSkillMatch:

    def test_01_partial_coverage(self):
        """Two of three requirements covered; the missing one is reported."""
        result = skill_match(["BIM", "AutoCAD", "PMP"], ["BIM", "AutoCAD"])
        assert result.score == pytest.approx(2 / 3)
        assert result.detail["matches"] == ["bim", "autocad"]
        assert result.detail["gaps"] == ["pmp"]

    def test_02_case_insensitive_and_substring(self):
        result = skill_match(["AutoCAD 2D", "revit"], ["autocad", "REVIT"])
        assert result.score == 1.0
        assert result.detail["gaps"] == []

    def test_03_no_requirements_scores_zero(self):
        assert skill_match([], ["BIM"]).score == 0.0

    def test_04_no_skills_scores_zero(self):
        result = skill_match(["BIM"], [])
        assert result.score == 0.0
        assert result.detail["gaps"] == ["bim"]

    def test_05_blank_entries_ignored(self):
        result = skill_match(["BIM", "  "], ["bim", ""])
        assert result.score == 1.0


class TestExperienceMatch:

    @pytest.mark.parametrize("experience,expected", [
        ("3+ years", 3.0),
        ("2.5 years minimum", 2.5),
        (5, 5.0),
        ("senior", None),
        (None, None),
    ])
    def test_01_parse_required_years(self, experience, expected):
        assert parse_required_years(experience) == expected

    @pytest.mark.parametrize("candidate,required,expected", [
        (5, "3+ years", 1.0),
        (3, "3 years", 1.0),
        (7, "3 years", 0.8),
        (1.5, "3 years", 0.5),
        (None, "3 years", 0.0),
        (0, "3 years", 0.0),
        (2, None, 1.0),
        (2, "no experience needed", 1.0),
        (None, 0, 1.0),
    ])
    def test_02_experience_scores(self, candidate, required, expected):
        assert experience_match(candidate, required).score == pytest.approx(expected)


class TestLocationMatch:

    def test_01_remote_always_matches(self):
        assert location_match("Cusco", None, remote=True).score == 1.0

    def test_02_same_city_ignores_case_and_spacing(self):
        assert location_match("Lima", "  LIMA ").score == 1.0

    def test_03_distance_decay(self):
        result = location_match("Lima", "Trujillo")
        assert result.score == pytest.approx(0.44)
        assert result.detail["distance"] == 560
        assert result.detail["matches"] is False

    def test_04_nearby_city(self):
        assert location_match("Callao", "Lima").score == pytest.approx(0.985)

    def test_05_far_or_unknown_cities_floor_at_zero(self):
        assert location_match("Lima", "Cusco").score == 0.0
        assert location_match("Lima", "Iquitos").score == 0.0

    def test_06_missing_location_scores_zero(self):
        assert location_match("Lima", None).score == 0.0
        assert location_match("", "Lima").score == 0.0

    def test_07_city_distance_symmetric(self):
        assert city_distance("Lima", "Arequipa") == city_distance("Arequipa", "Lima") == 1000
        assert city_distance("Callao", "Lima") == 15
        assert city_distance("Tacna", "Piura") == 1000


class TestRangeMatch:

    def test_01_overlap(self):
        result = range_match(SalaryRange(6000, 9000), SalaryRange(5000, 8000))
        assert result.score == 1.0
        assert result.detail["in_range"] is True
        assert result.detail["difference"] == 1000

    def test_02_gap_decays_relative_to_job_midpoint(self):
        result = range_match(SalaryRange(6000, 9000), SalaryRange(10000, 12000))
        assert result.score == pytest.approx(1 - 1000 / 7500)
        assert result.detail["in_range"] is False

    def test_03_far_apart_floors_at_zero(self):
        assert range_match(SalaryRange(1000, 2000), SalaryRange(9000, 12000)).score == 0.0

    def test_04_missing_range(self):
        assert range_match(None, SalaryRange(1, 2)).score == 0.0
        assert range_match(SalaryRange(1, 2), None).score == 0.0

    def test_05_swapped_bounds_normalized(self):
        salary = SalaryRange(9000, 6000)
        assert (salary.min, salary.max) == (6000, 9000)


class TestWorkStyleMatch:

    def test_01_full_time_onsite(self):
        result = work_style_match(JobType.FULL_TIME, False, {WorkPreference.FULL_TIME, WorkPreference.ONSITE})
        assert result.score == pytest.approx(0.7)
        assert result.detail["preferences"] == ["full-time", "on-site work"]

    def test_02_remote_job(self):
        result = work_style_match(JobType.CONTRACT, True, {WorkPreference.CONTRACT, WorkPreference.REMOTE})
        assert result.score == pytest.approx(0.7)

    def test_03_hybrid_is_flexible(self):
        result = work_style_match(JobType.PART_TIME, False, {WorkPreference.HYBRID})
        assert result.score == pytest.approx(0.2)

    def test_04_no_preferences(self):
        assert work_style_match(JobType.FULL_TIME, False, set()).score == 0.0

    def test_05_internship_has_no_matching_preference(self):
        result = work_style_match(JobType.INTERNSHIP, False, {WorkPreference.FULL_TIME, WorkPreference.ONSITE})
        assert result.score == pytest.approx(0.3)


class TestEducationMatch:

    @pytest.mark.parametrize("text,expected", [
        ("Bachelor's degree in Civil Engineering", EducationLevel.BACHELORS),
        ("", EducationLevel.BACHELORS),
        ("Master's in Structures", EducationLevel.MASTERS),
        ("PhD or Master's", EducationLevel.DOCTORATE),
        ("Technical diploma, master's a plus", EducationLevel.TECHNICAL),
    ])
    def test_01_required_level(self, text, expected):
        assert required_education_level(text) == expected

    @pytest.mark.parametrize("candidate,requirements,expected", [
        (EducationLevel.BACHELORS, ["Bachelor's degree"], 1.0),
        (EducationLevel.MASTERS, ["Bachelor's degree"], 1.0),
        (EducationLevel.DOCTORATE, ["Bachelor's degree"], 0.9),
        (EducationLevel.TECHNICAL, ["Master's in Structures"], 1 / 3),
        (EducationLevel.OTHER, ["Bachelor's degree"], 1.0),
        (None, ["Bachelor's degree"], 0.0),
    ])
    def test_02_scores(self, candidate, requirements, expected):
        assert education_match(candidate, requirements).score == pytest.approx(expected)

    def test_03_detail(self):
        result = education_match(EducationLevel.TECHNICAL, ["Master's in Structures"])
        assert result.detail == {"meets": False, "level": "technical", "required": "masters"}


class TestCultureMatch:

    def test_01_all_factors(self):
        result = culture_match(make_job(), make_candidate())
        assert result.score == pytest.approx(1.0)
        assert result.detail["factors"] == [
            "Industry experience",
            "Career goals alignment",
            "Language proficiency",
            "Professional certifications",
        ]

    def test_02_core_industries_when_job_has_none(self):
        job = make_job(industries=[])
        candidate = make_candidate(industries=["Architecture studio"], career_goals=[], certifications=[], languages=[])
        result = culture_match(job, candidate)
        assert result.score == pytest.approx(0.3)

    def test_03_basic_language_does_not_count(self):
        candidate = make_candidate(
            industries=[], career_goals=[], certifications=[],
            languages=[Language("Spanish", LanguageLevel.BASIC)],
        )
        assert culture_match(make_job(), candidate).score == 0.0

    def test_04_goal_matches_job_title(self):
        candidate = make_candidate(industries=[], career_goals=["site engineer"], certifications=[], languages=[])
        job = make_job(industries=["mining"], department="Operations")
        assert culture_match(job, candidate).detail["factors"] == ["Career goals alignment"]
