"""
Tests for score_job_match - overall score, confidence, fit level and advice.
"""
import pytest

from personalization.models import SalaryRange
from personalization.scorer.criteria import JobMatchWeights
from personalization.scorer.job_scorer import (
    candidate_completeness,
    confidence_for,
    score_job_match,
    weighted_overall,
)
from personalization.scorer.models import DimensionScore, Match, fit_level
from tests.factories import make_candidate, make_empty_candidate, make_job


class TestScoreJobMatch:

    def test_01_strong_candidate(self):
        """Every dimension but work style is a full match."""
        match = score_job_match(make_candidate(), make_job())

        assert match.breakdown["work_style"].score == pytest.approx(0.7)
        assert match.overall_score == pytest.approx(0.97)
        assert match.fit_level == "perfect"
        assert match.confidence == pytest.approx(0.7 + 0.3 * 0.97)
        assert match.recommendations == []
        assert match.kind == "job"
        assert (match.subject_id, match.target_id) == ("cand_1", "job_1")

    def test_02_breakdown_has_every_dimension(self):
        match = score_job_match(make_candidate(), make_job())
        assert list(match.breakdown) == JobMatchWeights().dimensions()

    def test_03_empty_profile(self):
        """A candidate with no fields scores zero everywhere; nothing raises."""
        match = score_job_match(make_empty_candidate(), make_job())

        assert match.overall_score == 0.0
        assert match.fit_level == "poor"
        assert match.confidence == 0.0
        assert match.recommendations == [
            "Develop skills in: bim, autocad",
            "Consider gaining more experience on similar projects",
            "Evaluate relocation or remote work options",
            "Review salary expectations",
        ]

    def test_04_skill_gap_advice_lists_three_gaps(self):
        job = make_job(requirements=["BIM", "Primavera P6", "SAP", "Civil 3D", "LEED"])
        match = score_job_match(make_candidate(), job)

        assert match.breakdown["skills"].score == pytest.approx(0.2)
        assert match.recommendations[0] == "Develop skills in: primavera p6, sap, civil 3d"

    def test_05_remote_job_skips_relocation_advice(self):
        job = make_job(location="Cusco", remote=True)
        match = score_job_match(make_candidate(location="Tacna"), job)

        assert match.breakdown["location"].score == 1.0
        assert "Evaluate relocation or remote work options" not in match.recommendations

    def test_06_salary_advice(self):
        candidate = make_candidate(preferred_salary=SalaryRange(20000, 25000))
        match = score_job_match(candidate, make_job())

        assert match.breakdown["salary"].score == 0.0
        assert "Review salary expectations" in match.recommendations

    def test_07_job_education_text_is_considered(self):
        job = make_job(education="Master's in Structural Engineering")
        match = score_job_match(make_candidate(), job)
        assert match.breakdown["education"].detail["required"] == "masters"
        assert match.breakdown["education"].score == pytest.approx(2 / 3)

    def test_08_custom_weights(self):
        skills_only = JobMatchWeights(
            skills=1.0, experience=0.0, location=0.0, salary=0.0,
            work_style=0.0, education=0.0, culture=0.0,
        )
        job = make_job(requirements=["BIM", "AutoCAD", "PMP"])
        match = score_job_match(make_candidate(skills=["BIM", "AutoCAD"]), job, skills_only)
        assert match.overall_score == pytest.approx(2 / 3)
        assert match.fit_level == "good"

    def test_09_deterministic(self):
        first = score_job_match(make_candidate(), make_job())
        second = score_job_match(make_candidate(), make_job())
        assert first.to_dict() == second.to_dict()


class TestScoringHelpers:

    def test_01_weighted_overall_missing_dimension_scores_zero(self):
        breakdown = {"a": DimensionScore(1.0), "b": DimensionScore(0.5)}
        assert weighted_overall(breakdown, {"a": 0.5, "b": 0.3, "c": 0.2}) == pytest.approx(0.65)

    def test_02_completeness(self):
        assert candidate_completeness(make_candidate()) == 1.0
        assert candidate_completeness(make_empty_candidate()) == 0.0
        partial = make_candidate(languages=[], preferred_salary=None, experience_years=0)
        assert candidate_completeness(partial) == pytest.approx(0.5)

    def test_03_confidence(self):
        assert confidence_for(0.5, 0.5) == pytest.approx(0.5)
        assert confidence_for(1.0, 1.0) == pytest.approx(1.0)

    @pytest.mark.parametrize("score,level", [
        (0.95, "perfect"),
        (0.9, "perfect"),
        (0.8, "excellent"),
        (0.75, "excellent"),
        (0.6, "good"),
        (0.5, "fair"),
        (0.4, "fair"),
        (0.39, "poor"),
        (0.0, "poor"),
    ])
    def test_04_fit_level_thresholds(self, score, level):
        assert fit_level(score) == level

    def test_05_match_dict_round_trip_keeps_breakdown(self):
        match = score_job_match(make_candidate(), make_job())
        restored = Match.from_dict(match.to_dict())

        assert restored.breakdown["skills"].detail["matches"] == ["bim", "autocad"]
        assert restored == match
