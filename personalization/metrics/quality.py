"""
Content quality scoring.

Quality is a capped sum of structural signals (length, images, tags for
articles; description, requirements, benefits for job postings) and
engagement signals from ContentMetrics. Page performance comes from an
injected PerformanceSource; without a sample it contributes nothing.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from personalization.metrics.models import ContentMetrics
from personalization.models import ContentItem, JobPosting, Target
from personalization.utils import clamp01

GOOD_LCP_MS = 2500


@dataclass(frozen=True)
class PerformanceSample:
    """Page performance for one item. ``score`` is already normalized to [0, 1]."""
    score: float
    lcp_ms: Optional[float] = None


class PerformanceSource(ABC):

    @abstractmethod
    def sample(self, item_id: str) -> Optional[PerformanceSample]:
        pass


class StaticPerformanceSource(PerformanceSource):
    """Performance samples from a fixed mapping (tests, offline reports)."""

    def __init__(self, samples: Optional[Dict[str, PerformanceSample]] = None):
        self._samples = dict(samples or {})

    def sample(self, item_id: str) -> Optional[PerformanceSample]:
        return self._samples.get(item_id)

    def put(self, item_id: str, sample: PerformanceSample) -> None:
        self._samples[item_id] = sample


def _structure_score(item: Target) -> float:
    score = 0.0
    if isinstance(item, JobPosting):
        if len(item.description or "") > 200:
            score += 0.2
        if len(item.requirements) >= 3:
            score += 0.1
        if item.benefits:
            score += 0.1
    elif isinstance(item, ContentItem):
        words = item.word_count
        if 800 <= words <= 2500:
            score += 0.2
        elif words >= 500:
            score += 0.1
        if item.featured_image:
            score += 0.1
        if len(item.tags) >= 3:
            score += 0.1
    return score


def quality_score(
    item: Target,
    metrics: ContentMetrics,
    performance: Optional[PerformanceSample] = None
) -> float:
    score = _structure_score(item)

    # Engagement bonuses stack
    if metrics.engagement_rate > 0.1:
        score += 0.2
    if metrics.engagement_rate > 0.05:
        score += 0.1

    if metrics.share_count > 5:
        score += 0.15
    if metrics.favorite_count > 10:
        score += 0.1

    if performance is not None and performance.lcp_ms is not None and performance.lcp_ms < GOOD_LCP_MS:
        score += 0.05

    return clamp01(score)
