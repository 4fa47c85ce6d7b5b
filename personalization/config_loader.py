import yaml
import os
import logging
from typing import Dict, Optional, Literal
from pydantic import BaseModel, Field

from personalization.scorer.criteria import (
    ScoringCriteria,
    JobMatchWeights,
    RecommendationWeights,
)

logger = logging.getLogger(__name__)


class CacheConfig(BaseModel):
    """Per-namespace cache settings."""
    ttl_seconds: float = Field(default=300.0, gt=0)  # 5 minutes
    max_size: int = Field(default=100, ge=1)
    persistent: bool = True


def _default_namespaces() -> Dict[str, CacheConfig]:
    return {
        "blog": CacheConfig(ttl_seconds=10 * 60, max_size=50),
        "careers": CacheConfig(ttl_seconds=30 * 60, max_size=100),
        "content_metrics": CacheConfig(ttl_seconds=7 * 24 * 60 * 60, max_size=1000),
        # Target pools mutate often: keep ranked results for minutes, not hours
        "matches": CacheConfig(ttl_seconds=5 * 60, max_size=200),
    }


class PersistenceConfig(BaseModel):
    """Durable key-value backend used by persistent namespaces."""
    backend: Literal["memory", "file", "redis"] = "memory"
    directory: str = ".personalization_cache"  # used by the file backend
    redis_url: str = "redis://localhost:6379/0"
    password: Optional[str] = None
    # 0 = write synchronously after each mutation; > 0 = debounce writes
    flush_delay_seconds: float = Field(default=0.0, ge=0)


class CachingConfig(BaseModel):
    default: CacheConfig = Field(default_factory=CacheConfig)
    namespaces: Dict[str, CacheConfig] = Field(default_factory=_default_namespaces)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    cleanup_interval_seconds: float = Field(default=5 * 60, gt=0)


class ScoringConfig(BaseModel):
    """
    Weight sets for every scorer.

    Each set is validated on construction (weights sum to 1.0), so a bad
    config.yaml fails at load time.
    """
    trending: ScoringCriteria = Field(default_factory=ScoringCriteria)
    job_weights: JobMatchWeights = Field(default_factory=JobMatchWeights)
    recommendation_weights: RecommendationWeights = Field(default_factory=RecommendationWeights)
    default_limit: int = Field(default=10, ge=1)


class QuietHoursConfig(BaseModel):
    enabled: bool = False
    start: str = "22:00"  # HH:MM
    end: str = "08:00"    # HH:MM


class NotificationScheduleConfig(BaseModel):
    """Default delivery schedule used by next_eligible_time()."""
    frequency: Literal["immediate", "daily", "weekly", "monthly"] = "immediate"
    send_hour: int = Field(default=9, ge=0, le=23)
    batch_window_minutes: Optional[int] = None
    quiet_hours: QuietHoursConfig = Field(default_factory=QuietHoursConfig)


class WebConfig(BaseModel):
    """Web server configuration."""
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)


class AppConfig(BaseModel):
    caching: CachingConfig = Field(default_factory=CachingConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    notifications: NotificationScheduleConfig = Field(default_factory=NotificationScheduleConfig)
    web: WebConfig = Field(default_factory=WebConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    data = {}
    if not os.path.exists(config_path):
        # Fall back to the config.yaml shipped at the repository root
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info("No config.yaml found, using built-in defaults")

    persistence = data.setdefault("caching", {}).setdefault("persistence", {})

    # Allow env var override for the persistence backend
    env_backend = os.environ.get("PERSONALIZATION_CACHE_BACKEND")
    if env_backend:
        persistence["backend"] = env_backend

    env_cache_dir = os.environ.get("PERSONALIZATION_CACHE_DIR")
    if env_cache_dir:
        persistence["directory"] = env_cache_dir

    env_redis_url = os.environ.get("PERSONALIZATION_REDIS_URL")
    if env_redis_url:
        persistence["redis_url"] = env_redis_url

    return AppConfig(**data)
