"""
Trending score, trend direction and period-over-period change.

trending = recency*w_r + engagement*w_e + quality*w_q + performance*w_p
           + social*w_s + velocity*0.1, clamped to [0, 1]

where recency = exp(-days_since_created / 30) and the engagement rate, capped at 1, is
decayed by exp(-days_since_last_update / 7).
"""
import math
from datetime import datetime
from typing import Optional

from personalization.metrics.models import ContentMetrics
from personalization.models import Target, target_created_at
from personalization.scorer.criteria import DEFAULT_SCORING_CRITERIA, ScoringCriteria
from personalization.utils import SECONDS_PER_DAY, clamp01, days_between, ensure_utc

RECENCY_DECAY_DAYS = 30.0
ENGAGEMENT_DECAY_DAYS = 7.0
VELOCITY_WEIGHT = 0.1
VELOCITY_VIEWS_PER_DAY = 100.0

TRENDING_UP_THRESHOLD = 0.3
TRENDING_DOWN_THRESHOLD = 0.1


def social_score(metrics: ContentMetrics) -> float:
    raw = metrics.share_count * 0.1 + metrics.favorite_count * 0.05 + metrics.comment_count * 0.15
    return min(raw / 10.0, 1.0)


def velocity_score(metrics: ContentMetrics, days_since_created: float) -> float:
    return min(metrics.views / max(days_since_created, 1.0) / VELOCITY_VIEWS_PER_DAY, 1.0)


def trending_score(
    item: Target,
    metrics: ContentMetrics,
    quality: float,
    performance: float,
    now: datetime,
    criteria: ScoringCriteria = DEFAULT_SCORING_CRITERIA
) -> float:
    # No creation time: treat as created now
    days_since_created = days_between(target_created_at(item), now)
    days_since_update = days_between(metrics.last_updated, now)

    recency = math.exp(-days_since_created / RECENCY_DECAY_DAYS)
    engagement = clamp01(metrics.engagement_rate) * math.exp(-days_since_update / ENGAGEMENT_DECAY_DAYS)

    score = (
        recency * criteria.recency
        + engagement * criteria.engagement
        + clamp01(quality) * criteria.quality
        + clamp01(performance) * criteria.performance
        + social_score(metrics) * criteria.social
        + velocity_score(metrics, days_since_created) * VELOCITY_WEIGHT
    )
    return clamp01(score)


def trend_direction(metrics: ContentMetrics, now: datetime) -> str:
    """'up' when updated in the last 24h and trending > 0.3, 'down' below 0.1."""
    recently_updated = False
    if metrics.last_updated is not None:
        age = (ensure_utc(now) - ensure_utc(metrics.last_updated)).total_seconds()
        recently_updated = age < SECONDS_PER_DAY

    if recently_updated and metrics.trending_score > TRENDING_UP_THRESHOLD:
        return "up"
    if metrics.trending_score < TRENDING_DOWN_THRESHOLD:
        return "down"
    return "stable"


def change_percentage(current: ContentMetrics, baseline: Optional[ContentMetrics]) -> float:
    """Percentage change in views versus an earlier snapshot of the same item."""
    if baseline is None or baseline.views <= 0:
        return 0.0
    return (current.views - baseline.views) / baseline.views * 100.0
