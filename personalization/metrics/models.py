#!/usr/bin/env python3
"""
Metrics Models - Interaction events and per-item content metrics.
"""

from dataclasses import dataclass, field
import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from personalization.exceptions import InvalidInteractionError
from personalization.utils import ensure_utc, utc_now


class InteractionType(str, Enum):
    VIEW = "view"
    ENGAGE = "engage"      # value = milliseconds spent
    SHARE = "share"
    FAVORITE = "favorite"
    COMMENT = "comment"
    CONVERT = "convert"    # value = conversion outcome (1 = converted)


@dataclass(frozen=True)
class InteractionEvent:
    """One ledger entry. Values are non-negative; no event decreases a counter."""
    item_id: str
    type: InteractionType
    value: float = 1.0
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.item_id:
            raise InvalidInteractionError("Interaction event requires an item_id")
        try:
            object.__setattr__(self, "type", InteractionType(self.type))
        except ValueError:
            raise InvalidInteractionError(f"Unknown interaction type: {self.type!r}")
        if self.value is None or not math.isfinite(self.value) or self.value < 0:
            raise InvalidInteractionError(
                f"Interaction value must be finite and non-negative (got {self.value!r} for {self.item_id})"
            )
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "type": self.type.value,
            "value": self.value,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ContentMetrics:
    """Aggregate engagement for one content id."""
    item_id: str
    views: float = 0
    time_spent_ms: float = 0
    engagement_rate: float = 0.0
    share_count: float = 0
    favorite_count: float = 0
    comment_count: float = 0
    conversion_rate: float = 0.0
    quality_score: float = 0.0
    trending_score: float = 0.0
    last_updated: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "views": self.views,
            "time_spent_ms": self.time_spent_ms,
            "engagement_rate": self.engagement_rate,
            "share_count": self.share_count,
            "favorite_count": self.favorite_count,
            "comment_count": self.comment_count,
            "conversion_rate": self.conversion_rate,
            "quality_score": self.quality_score,
            "trending_score": self.trending_score,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentMetrics":
        last_updated = data.get("last_updated")
        return cls(
            item_id=data["item_id"],
            views=data.get("views", 0),
            time_spent_ms=data.get("time_spent_ms", 0),
            engagement_rate=data.get("engagement_rate", 0.0),
            share_count=data.get("share_count", 0),
            favorite_count=data.get("favorite_count", 0),
            comment_count=data.get("comment_count", 0),
            conversion_rate=data.get("conversion_rate", 0.0),
            quality_score=data.get("quality_score", 0.0),
            trending_score=data.get("trending_score", 0.0),
            last_updated=ensure_utc(datetime.fromisoformat(last_updated)) if last_updated else None,
        )
