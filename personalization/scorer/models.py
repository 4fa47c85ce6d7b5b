#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class DimensionScore:
    """One dimension's score in [0, 1] plus whatever explains it."""
    score: float
    detail: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "detail": copy.deepcopy(self.detail)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DimensionScore":
        return cls(score=data["score"], detail=copy.deepcopy(data.get("detail") or {}))


# Inclusive lower bounds, highest first
FIT_LEVEL_THRESHOLDS = [
    (0.9, "perfect"),
    (0.75, "excellent"),
    (0.6, "good"),
    (0.4, "fair"),
]
FIT_LEVEL_ORDER = ["poor", "fair", "good", "excellent", "perfect"]


def fit_level(score: float) -> str:
    for threshold, level in FIT_LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return "poor"


@dataclass
class Match:
    """Scored subject/target pair."""
    subject_id: str
    target_id: str
    overall_score: float
    breakdown: Dict[str, DimensionScore] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    confidence: float = 0.0
    fit_level: str = "poor"
    kind: str = "job"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "target_id": self.target_id,
            "overall_score": self.overall_score,
            "breakdown": {name: dim.to_dict() for name, dim in self.breakdown.items()},
            "recommendations": list(self.recommendations),
            "confidence": self.confidence,
            "fit_level": self.fit_level,
            "kind": self.kind,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        return cls(
            subject_id=data["subject_id"],
            target_id=data["target_id"],
            overall_score=data["overall_score"],
            breakdown={
                name: DimensionScore.from_dict(dim)
                for name, dim in (data.get("breakdown") or {}).items()
            },
            recommendations=list(data.get("recommendations") or []),
            confidence=data.get("confidence", 0.0),
            fit_level=data.get("fit_level", "poor"),
            kind=data.get("kind", "job"),
        )
