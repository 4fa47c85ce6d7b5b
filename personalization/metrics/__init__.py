"""Metrics Module - Interaction ledger, aggregation, quality and trend analysis."""
from personalization.metrics.models import ContentMetrics, InteractionEvent, InteractionType
from personalization.metrics.ledger import InteractionLedger, InMemoryLedger
from personalization.metrics.aggregator import (
    MetricsAggregator,
    engagement_rate,
    bounce_rate,
    average_time_spent,
    average_conversion_rate,
)
from personalization.metrics.quality import (
    PerformanceSample,
    PerformanceSource,
    StaticPerformanceSource,
    quality_score,
)
from personalization.metrics.trending import trending_score, trend_direction, change_percentage
from personalization.metrics.insights import (
    TrendAnalyzer,
    TrendingItem,
    ContentInsights,
    BehaviorSummary,
)

__all__ = [
    'ContentMetrics',
    'InteractionEvent',
    'InteractionType',
    'InteractionLedger',
    'InMemoryLedger',
    'MetricsAggregator',
    'engagement_rate',
    'bounce_rate',
    'average_time_spent',
    'average_conversion_rate',
    'PerformanceSample',
    'PerformanceSource',
    'StaticPerformanceSource',
    'quality_score',
    'trending_score',
    'trend_direction',
    'change_percentage',
    'TrendAnalyzer',
    'TrendingItem',
    'ContentInsights',
    'BehaviorSummary',
]
