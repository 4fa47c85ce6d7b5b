#!/usr/bin/env python3
"""
Scoring Criteria - Validated weight sets.

Every weighted combination in the engine is driven by one of these frozen
models. The weight-sum invariant is checked when the model is built, so a
misconfigured set fails at load time instead of silently skewing scores:

- ScoringCriteria: trending score (recency/engagement/quality/performance/social)
- JobMatchWeights: candidate-to-job matching (7 dimensions)
- RecommendationWeights: viewer-to-content recommendation (4 dimensions)
"""

import hashlib
import json
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, model_validator

WEIGHT_SUM_TOLERANCE = 1e-6


class WeightSet(BaseModel):
    """Base for named weights that must be non-negative and sum to 1.0."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_weights(self):
        weights = self.weights()
        negative = [name for name, w in weights.items() if w < 0]
        if negative:
            raise ValueError(f"Weights must be non-negative: {', '.join(negative)}")
        total = sum(weights.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(
                f"{type(self).__name__} weights must sum to 1.0 (got {total:.6f})"
            )
        return self

    def weights(self) -> Dict[str, float]:
        return {name: float(value) for name, value in self.model_dump().items()}

    def dimensions(self) -> List[str]:
        return list(type(self).model_fields.keys())

    def version(self) -> str:
        """Short stable hash of the weights, used to key cached rankings."""
        payload = json.dumps(
            {"set": type(self).__name__, "weights": self.weights()}, sort_keys=True
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:10]


class ScoringCriteria(WeightSet):
    """Weights for the trending score of a content item."""
    recency: float = 0.20
    engagement: float = 0.30
    quality: float = 0.25
    performance: float = 0.15
    social: float = 0.10


class JobMatchWeights(WeightSet):
    """Weights for each dimension of a candidate/job match."""
    skills: float = 0.25
    experience: float = 0.20
    location: float = 0.15
    salary: float = 0.15
    work_style: float = 0.10
    education: float = 0.08
    culture: float = 0.07


class RecommendationWeights(WeightSet):
    """Weights for each dimension of a viewer/content recommendation."""
    content_similarity: float = 0.40
    behavioral: float = 0.30
    context: float = 0.15
    preference: float = 0.15


DEFAULT_SCORING_CRITERIA = ScoringCriteria()
DEFAULT_JOB_MATCH_WEIGHTS = JobMatchWeights()
DEFAULT_RECOMMENDATION_WEIGHTS = RecommendationWeights()
