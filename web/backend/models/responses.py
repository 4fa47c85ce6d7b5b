#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class CacheStatsModel(BaseModel):
    size: int = Field(ge=0)
    hits: int = Field(ge=0)
    misses: int = Field(ge=0)
    evictions: int = Field(ge=0)
    estimated_bytes: int = Field(ge=0)
    hit_rate: float = Field(ge=0, le=1)


class CacheStatsResponse(BaseModel):
    success: bool
    namespace: str
    stats: CacheStatsModel


class CacheOverviewResponse(BaseModel):
    success: bool
    total_hit_rate: float = Field(ge=0, le=1)
    total_estimated_bytes: int = Field(ge=0)
    namespaces: Dict[str, CacheStatsModel]


class CacheValueResponse(BaseModel):
    success: bool
    namespace: str
    key: str
    value: Any = None


class DimensionScoreModel(BaseModel):
    score: float = Field(ge=0, le=1)
    detail: Dict[str, Any] = Field(default_factory=dict)


class MatchModel(BaseModel):
    """One ranked subject/target match."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "subject_id": "cand_1",
                "target_id": "job_42",
                "overall_score": 0.82,
                "breakdown": {"skills": {"score": 0.667, "detail": {"matches": ["bim", "autocad"], "gaps": ["pmp"]}}},
                "recommendations": ["Develop skills in: pmp"],
                "confidence": 0.9,
                "fit_level": "excellent",
                "kind": "job"
            }
        }
    )

    subject_id: str
    target_id: str
    overall_score: float = Field(ge=0, le=1)
    breakdown: Dict[str, DimensionScoreModel]
    recommendations: List[str]
    confidence: float = Field(ge=0, le=1)
    fit_level: str
    kind: str


class RankResponse(BaseModel):
    success: bool
    count: int
    matches: List[MatchModel]


class ContentMetricsModel(BaseModel):
    item_id: str
    views: float
    time_spent_ms: float
    engagement_rate: float
    share_count: float
    favorite_count: float
    comment_count: float
    conversion_rate: float
    quality_score: float
    trending_score: float
    last_updated: Optional[str] = None


class MetricsResponse(BaseModel):
    success: bool
    metrics: ContentMetricsModel
