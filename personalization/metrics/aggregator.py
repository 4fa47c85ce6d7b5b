#!/usr/bin/env python3
"""
Metrics Aggregator - Folds interaction events into per-item ContentMetrics.

Metrics are persisted through a CacheStore (normally the ``content_metrics``
namespace) under the item id, as plain dicts so any backend can hold them.

Update rules per event type (n = event value):
- view:     views += n
- engage:   time_spent_ms += n, engagement rate recomputed
- share/favorite/comment: counter += n
- convert:  conversion_rate = (conversion_rate * views + n) / (views + 1)

Replaying the same events in the same order always yields the same metrics.
"""

import logging
import threading
from datetime import datetime
from typing import Iterable, List, Optional

from personalization.cache.models import MISS
from personalization.cache.store import CacheStore
from personalization.metrics.ledger import InteractionLedger
from personalization.metrics.models import ContentMetrics, InteractionEvent, InteractionType
from personalization.utils import clamp01, safe_ratio

logger = logging.getLogger(__name__)

# 30 seconds per view counts as fully engaged time
ENGAGED_MS_PER_VIEW = 30000
ACTION_WEIGHT = 0.6
TIME_WEIGHT = 0.4
BOUNCE_THRESHOLD_MS = 15000


def engagement_rate(metrics: ContentMetrics) -> float:
    """0.6 * actions/views + 0.4 * min(time/(views*30s), 1); 0 without views."""
    if metrics.views <= 0:
        return 0.0
    actions = metrics.share_count + metrics.favorite_count + metrics.comment_count
    time_engagement = min(metrics.time_spent_ms / (metrics.views * ENGAGED_MS_PER_VIEW), 1.0)
    return (actions / metrics.views) * ACTION_WEIGHT + time_engagement * TIME_WEIGHT


class MetricsAggregator:
    """Applies interaction events to ContentMetrics held in a cache store."""

    def __init__(self, store: CacheStore, ledger: Optional[InteractionLedger] = None):
        self.store = store
        self.ledger = ledger
        # Serializes read-modify-write of a metrics record
        self._lock = threading.Lock()

    def get(self, item_id: str) -> Optional[ContentMetrics]:
        raw = self.store.get(item_id)
        if raw is MISS:
            return None
        return ContentMetrics.from_dict(raw)

    def get_or_empty(self, item_id: str) -> ContentMetrics:
        return self.get(item_id) or ContentMetrics(item_id=item_id)

    def all_metrics(self) -> List[ContentMetrics]:
        metrics = []
        for item_id in self.store.keys():
            current = self.get(item_id)
            if current is not None:
                metrics.append(current)
        return metrics

    def apply(self, event: InteractionEvent) -> ContentMetrics:
        with self._lock:
            metrics = self.get_or_empty(event.item_id)
            n = event.value

            if event.type == InteractionType.VIEW:
                metrics.views += n
            elif event.type == InteractionType.ENGAGE:
                metrics.time_spent_ms += n
                metrics.engagement_rate = engagement_rate(metrics)
            elif event.type == InteractionType.SHARE:
                metrics.share_count += n
            elif event.type == InteractionType.FAVORITE:
                metrics.favorite_count += n
            elif event.type == InteractionType.COMMENT:
                metrics.comment_count += n
            elif event.type == InteractionType.CONVERT:
                metrics.conversion_rate = (
                    (metrics.conversion_rate * metrics.views + n) / (metrics.views + 1)
                )

            metrics.last_updated = event.timestamp
            self.store.set(event.item_id, metrics.to_dict())

        logger.debug(f"Applied {event.type.value} ({event.value}) to {event.item_id}")
        return metrics

    def record(
        self,
        item_id: str,
        type: InteractionType,
        value: float = 1.0,
        timestamp: Optional[datetime] = None
    ) -> ContentMetrics:
        """Build an event, append it to the ledger (if any) and apply it."""
        kwargs = {"item_id": item_id, "type": type, "value": value}
        if timestamp is not None:
            kwargs["timestamp"] = timestamp
        event = InteractionEvent(**kwargs)
        if self.ledger is not None:
            self.ledger.append(event)
        return self.apply(event)

    def apply_all(self, events: Iterable[InteractionEvent]) -> int:
        count = 0
        for event in events:
            self.apply(event)
            count += 1
        return count

    def rebuild(self, events: Iterable[InteractionEvent]) -> int:
        """Drop every stored metric and fold ``events`` from scratch."""
        self.store.clear()
        count = self.apply_all(events)
        logger.info(f"Rebuilt content metrics from {count} events")
        return count

    def rebuild_from_ledger(self) -> int:
        if self.ledger is None:
            return 0
        return self.rebuild(self.ledger.events())

    def update_scores(self, item_id: str, quality: float, trending: float) -> ContentMetrics:
        """Store analyzer outputs without touching interaction counters."""
        with self._lock:
            metrics = self.get_or_empty(item_id)
            metrics.quality_score = clamp01(quality)
            metrics.trending_score = clamp01(trending)
            self.store.set(item_id, metrics.to_dict())
        return metrics


def bounce_rate(metrics: List[ContentMetrics]) -> float:
    """Fraction of items whose total time spent is under 15 seconds."""
    if not metrics:
        return 0.0
    quick_exits = sum(1 for m in metrics if m.time_spent_ms < BOUNCE_THRESHOLD_MS)
    return quick_exits / len(metrics)


def average_time_spent(metrics: List[ContentMetrics]) -> float:
    """Milliseconds spent per view across all items."""
    total_views = sum(m.views for m in metrics)
    return safe_ratio(sum(m.time_spent_ms for m in metrics), total_views)


def average_conversion_rate(metrics: List[ContentMetrics]) -> float:
    if not metrics:
        return 0.0
    return sum(m.conversion_rate for m in metrics) / len(metrics)

