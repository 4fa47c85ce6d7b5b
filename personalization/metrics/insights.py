#!/usr/bin/env python3
"""
Trend Analyzer - Quality/trending scoring and content insights.

Usage:
    analyzer = TrendAnalyzer(aggregator, performance_source=source)
    insights = analyzer.generate_insights(items, now=utc_now())
    for trending in insights.top_performers:
        print(trending.ranking, trending.item.id, trending.metrics.trending_score)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from personalization.metrics.aggregator import (
    MetricsAggregator,
    average_conversion_rate,
    average_time_spent,
    bounce_rate,
)
from personalization.metrics.models import ContentMetrics
from personalization.metrics.quality import PerformanceSource, quality_score
from personalization.metrics.trending import change_percentage, trend_direction, trending_score
from personalization.models import ContentItem, JobPosting, Target
from personalization.scorer.criteria import DEFAULT_SCORING_CRITERIA, ScoringCriteria
from personalization.utils import safe_ratio, utc_now

logger = logging.getLogger(__name__)

TOP_PERFORMERS = 5
EMERGING_LIMIT = 5
EMERGING_MIN_TRENDING = 0.3
EMERGING_MIN_CHANGE = 20.0
UNDERPERFORMER_MAX_TRENDING = 0.1
UNDERPERFORMER_MIN_VIEWS = 10
UNDERPERFORMER_LIMIT = 5


@dataclass
class TrendingItem:
    item: Target
    metrics: ContentMetrics
    direction: str
    change_percentage: float
    ranking: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item.id,
            "title": self.item.title,
            "metrics": self.metrics.to_dict(),
            "direction": self.direction,
            "change_percentage": self.change_percentage,
            "ranking": self.ranking,
        }


@dataclass
class BehaviorSummary:
    average_time_spent_ms: float = 0.0
    bounce_rate: float = 0.0
    conversion_rate: float = 0.0


@dataclass
class ContentInsights:
    top_performers: List[TrendingItem] = field(default_factory=list)
    emerging_trends: List[TrendingItem] = field(default_factory=list)
    underperformers: List[TrendingItem] = field(default_factory=list)
    category_breakdown: Dict[str, float] = field(default_factory=dict)
    behavior: BehaviorSummary = field(default_factory=BehaviorSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "top_performers": [t.to_dict() for t in self.top_performers],
            "emerging_trends": [t.to_dict() for t in self.emerging_trends],
            "underperformers": [t.to_dict() for t in self.underperformers],
            "category_breakdown": dict(self.category_breakdown),
            "behavior": {
                "average_time_spent_ms": self.behavior.average_time_spent_ms,
                "bounce_rate": self.behavior.bounce_rate,
                "conversion_rate": self.behavior.conversion_rate,
            },
        }


class TrendAnalyzer:
    """Scores items against their aggregated metrics and summarizes the pool."""

    def __init__(
        self,
        aggregator: MetricsAggregator,
        performance_source: Optional[PerformanceSource] = None,
        criteria: ScoringCriteria = DEFAULT_SCORING_CRITERIA
    ):
        self.aggregator = aggregator
        self.performance_source = performance_source
        self.criteria = criteria

    def analyze(
        self,
        item: Target,
        now: Optional[datetime] = None,
        baseline: Optional[ContentMetrics] = None
    ) -> TrendingItem:
        """Compute quality and trending for one item and store them with its metrics."""
        now = now or utc_now()
        metrics = self.aggregator.get_or_empty(item.id)
        sample = self.performance_source.sample(item.id) if self.performance_source else None
        performance = sample.score if sample is not None else 0.0

        quality = quality_score(item, metrics, sample)
        trending = trending_score(item, metrics, quality, performance, now, self.criteria)
        metrics = self.aggregator.update_scores(item.id, quality, trending)

        return TrendingItem(
            item=item,
            metrics=metrics,
            direction=trend_direction(metrics, now),
            change_percentage=change_percentage(metrics, baseline),
        )

    def generate_insights(
        self,
        items: Sequence[Target],
        now: Optional[datetime] = None,
        baselines: Optional[Dict[str, ContentMetrics]] = None
    ) -> ContentInsights:
        now = now or utc_now()
        baselines = baselines or {}

        trending_items = [self.analyze(item, now, baselines.get(item.id)) for item in items]

        category_breakdown: Dict[str, float] = {}
        for trending in trending_items:
            category = trending.item.category or "uncategorized"
            category_breakdown[category] = category_breakdown.get(category, 0) + trending.metrics.views

        # Stable: equal scores keep input order
        trending_items.sort(key=lambda t: t.metrics.trending_score, reverse=True)
        for index, trending in enumerate(trending_items):
            trending.ranking = index + 1

        top_performers = trending_items[:TOP_PERFORMERS]
        top_ids = {t.item.id for t in top_performers}
        emerging = [
            t for t in trending_items
            if t.metrics.trending_score > EMERGING_MIN_TRENDING
            and t.change_percentage > EMERGING_MIN_CHANGE
            and t.item.id not in top_ids
        ][:EMERGING_LIMIT]
        underperformers = [
            t for t in trending_items
            if t.metrics.trending_score < UNDERPERFORMER_MAX_TRENDING
            and t.metrics.views > UNDERPERFORMER_MIN_VIEWS
        ][-UNDERPERFORMER_LIMIT:]

        all_metrics = [t.metrics for t in trending_items]
        behavior = BehaviorSummary(
            average_time_spent_ms=average_time_spent(all_metrics),
            bounce_rate=bounce_rate(all_metrics),
            conversion_rate=average_conversion_rate(all_metrics),
        )

        logger.info(
            f"Generated insights for {len(items)} items: "
            f"{len(top_performers)} top, {len(emerging)} emerging, {len(underperformers)} under"
        )
        return ContentInsights(
            top_performers=top_performers,
            emerging_trends=emerging,
            underperformers=underperformers,
            category_breakdown=category_breakdown,
            behavior=behavior,
        )

    def performance_recommendations(self, item: Target) -> List[str]:
        """Editorial suggestions from the item's stored metrics."""
        metrics = self.aggregator.get(item.id)
        if metrics is None:
            return []

        recommendations = []
        if metrics.engagement_rate < 0.05:
            recommendations.append("Improve engagement with clearer calls to action")
            recommendations.append("Add interactive elements")

        if metrics.share_count < 3 and metrics.views > 100:
            recommendations.append("Optimize for sharing on social networks")
            recommendations.append("Make share buttons more visible")

        if isinstance(item, ContentItem) and safe_ratio(metrics.time_spent_ms, metrics.views) < 60000:
            recommendations.append("Improve the content structure")
            recommendations.append("Add visual elements to hold attention")

        if isinstance(item, JobPosting) and metrics.conversion_rate < 0.05:
            recommendations.append("Simplify the application process")
            recommendations.append("Improve the job description")

        return recommendations
