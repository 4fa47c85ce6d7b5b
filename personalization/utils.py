import hashlib
import json
import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def clamp01(value: float) -> float:
    """Clamp a score into [0, 1], mapping NaN to 0."""
    if value is None or math.isnan(value):
        return 0.0
    return 0.0 if value < 0.0 else (1.0 if value > 1.0 else float(value))


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero or missing."""
    if not denominator:
        return default
    return numerator / denominator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes so arithmetic never mixes aware/naive."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def days_between(earlier: Optional[datetime], later: datetime) -> float:
    """
    Fractional days from ``earlier`` to ``later``.

    Missing ``earlier`` is treated as ``later`` (zero days). Negative spans
    (clock skew, future-dated items) are floored at zero.
    """
    if earlier is None:
        return 0.0
    delta = (ensure_utc(later) - ensure_utc(earlier)).total_seconds()
    return max(0.0, delta / SECONDS_PER_DAY)


def normalize_token(text: Any) -> str:
    return " ".join(str(text or "").split()).strip().lower()


class Fingerprinter:
    """
    Pure logic for deterministic cache-key fragments.
    """

    @staticmethod
    def of_ids(ids: Iterable[str]) -> str:
        """
        Order-independent hash of a set of ids.
        Formula: SHA256("|".join(sorted(ids)))[:16]
        """
        raw_string = "|".join(sorted(str(i) for i in ids))
        return hashlib.sha256(raw_string.encode("utf-8")).hexdigest()[:16]

    @staticmethod
    def of_mapping(data: dict) -> str:
        """Stable hash of a JSON-serializable mapping."""
        raw_string = json.dumps(data, sort_keys=True, default=str)
        return hashlib.sha256(raw_string.encode("utf-8")).hexdigest()[:12]
