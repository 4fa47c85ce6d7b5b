#!/usr/bin/env python3
"""
Scoring Module - Weighted multi-dimension match scores.

Public API:
- score_job_match: candidate vs. job posting (7 dimensions)
- score_content: viewer vs. content item or job posting (4 dimensions)
- Match / DimensionScore / fit_level: result types
- ScoringCriteria / JobMatchWeights / RecommendationWeights: validated weight sets

Modules:
- criteria.py: weight sets and their sum-to-one validation
- dimensions.py: per-dimension job match functions
- job_scorer.py: weighted job match, confidence and advice
- content_scorer.py: content recommendation dimensions and reasons
- gaps.py: skill gap analysis and career paths
"""

from personalization.scorer.criteria import (
    WeightSet,
    ScoringCriteria,
    JobMatchWeights,
    RecommendationWeights,
    DEFAULT_SCORING_CRITERIA,
    DEFAULT_JOB_MATCH_WEIGHTS,
    DEFAULT_RECOMMENDATION_WEIGHTS,
)
from personalization.scorer.models import DimensionScore, Match, fit_level
from personalization.scorer.job_scorer import score_job_match
from personalization.scorer.content_scorer import score_content
from personalization.scorer.gaps import SkillGapAnalysis, CareerPath, skill_gap_analysis, career_path

__all__ = [
    'WeightSet',
    'ScoringCriteria',
    'JobMatchWeights',
    'RecommendationWeights',
    'DEFAULT_SCORING_CRITERIA',
    'DEFAULT_JOB_MATCH_WEIGHTS',
    'DEFAULT_RECOMMENDATION_WEIGHTS',
    'DimensionScore',
    'Match',
    'fit_level',
    'score_job_match',
    'score_content',
    'SkillGapAnalysis',
    'CareerPath',
    'skill_gap_analysis',
    'career_path',
]
