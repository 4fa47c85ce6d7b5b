#!/usr/bin/env python3
"""
Job Scorer - Candidate-to-job match score.

Formula:
    overall = Σ dimension_score_i * weight_i        (JobMatchWeights)
    confidence = 0.7 * profile_completeness + 0.3 * overall

Dimensions (see dimensions.py): skills, experience, location, salary,
work_style, education, culture.
"""

from typing import Dict, List

import numpy as np

from personalization.models import CandidateProfile, JobPosting
from personalization.scorer.criteria import DEFAULT_JOB_MATCH_WEIGHTS, JobMatchWeights
from personalization.scorer.dimensions import (
    culture_match,
    education_match,
    experience_match,
    location_match,
    range_match,
    skill_match,
    work_style_match,
)
from personalization.scorer.models import DimensionScore, Match, fit_level
from personalization.utils import clamp01

COMPLETENESS_WEIGHT = 0.7
SCORE_WEIGHT = 0.3

EXPERIENCE_ADVICE_THRESHOLD = 0.8
LOCATION_ADVICE_THRESHOLD = 0.5
SALARY_ADVICE_THRESHOLD = 0.7


def weighted_overall(breakdown: Dict[str, DimensionScore], weights: Dict[str, float]) -> float:
    """Dot product of dimension scores and weights, in the weight set's order."""
    names = list(weights.keys())
    scores = np.array([breakdown[name].score if name in breakdown else 0.0 for name in names], dtype=np.float64)
    w = np.array([weights[name] for name in names], dtype=np.float64)
    return clamp01(float(scores @ w))


def candidate_completeness(candidate: CandidateProfile) -> float:
    """Fraction of the six fields the job scorer relies on that are filled in."""
    filled = [
        bool(candidate.skills),
        bool(candidate.experience_years and candidate.experience_years > 0),
        bool(candidate.location),
        candidate.preferred_salary is not None,
        candidate.education_level is not None,
        bool(candidate.languages),
    ]
    return sum(filled) / len(filled)


def confidence_for(completeness: float, overall: float) -> float:
    return clamp01(COMPLETENESS_WEIGHT * completeness + SCORE_WEIGHT * overall)


def job_recommendations(job: JobPosting, breakdown: Dict[str, DimensionScore]) -> List[str]:
    recommendations = []
    gaps = breakdown["skills"].detail.get("gaps") or []
    if gaps:
        recommendations.append(f"Develop skills in: {', '.join(gaps[:3])}")
    if breakdown["experience"].score < EXPERIENCE_ADVICE_THRESHOLD:
        recommendations.append("Consider gaining more experience on similar projects")
    if breakdown["location"].score < LOCATION_ADVICE_THRESHOLD and not job.remote:
        recommendations.append("Evaluate relocation or remote work options")
    if breakdown["salary"].score < SALARY_ADVICE_THRESHOLD:
        recommendations.append("Review salary expectations")
    return recommendations


def score_job_match(
    candidate: CandidateProfile,
    job: JobPosting,
    weights: JobMatchWeights = DEFAULT_JOB_MATCH_WEIGHTS
) -> Match:
    education_text = list(job.requirements)
    if job.education:
        education_text.append(job.education)

    breakdown = {
        "skills": skill_match(job.requirements, candidate.skills),
        "experience": experience_match(candidate.experience_years, job.experience),
        "location": location_match(job.location, candidate.location, job.remote),
        "salary": range_match(job.salary_range, candidate.preferred_salary),
        "work_style": work_style_match(job.job_type, job.remote, candidate.work_preferences),
        "education": education_match(candidate.education_level, education_text),
        "culture": culture_match(job, candidate),
    }

    overall = weighted_overall(breakdown, weights.weights())
    return Match(
        subject_id=candidate.id,
        target_id=job.id,
        overall_score=overall,
        breakdown=breakdown,
        recommendations=job_recommendations(job, breakdown),
        confidence=confidence_for(candidate_completeness(candidate), overall),
        fit_level=fit_level(overall),
        kind="job",
    )
