import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from personalization.cache.backends import KeyValueBackend, build_backend
from personalization.cache.models import CacheStats, MISS
from personalization.cache.registry import CacheRegistry
from personalization.config_loader import AppConfig
from personalization.exceptions import SubjectNotFoundError
from personalization.matcher.service import MatchingService
from personalization.metrics.aggregator import MetricsAggregator
from personalization.metrics.insights import ContentInsights, TrendAnalyzer
from personalization.metrics.ledger import InMemoryLedger, InteractionLedger
from personalization.metrics.models import ContentMetrics, InteractionType
from personalization.metrics.quality import PerformanceSource
from personalization.models import (
    CandidateProfile,
    JobPosting,
    SessionContext,
    Target,
    ViewerProfile,
)
from personalization.scorer.gaps import CareerPath, SkillGapAnalysis, career_path, skill_gap_analysis
from personalization.scorer.job_scorer import score_job_match
from personalization.scorer.models import Match

logger = logging.getLogger(__name__)

METRICS_NAMESPACE = "content_metrics"
MATCHES_NAMESPACE = "matches"


class ProfileRepository(ABC):
    """Read-only source of subject snapshots."""

    @abstractmethod
    def get_candidate(self, candidate_id: str) -> Optional[CandidateProfile]:
        pass

    @abstractmethod
    def get_viewer(self, viewer_id: str) -> Optional[ViewerProfile]:
        pass


class InMemoryProfileRepository(ProfileRepository):

    def __init__(
        self,
        candidates: Optional[Sequence[CandidateProfile]] = None,
        viewers: Optional[Sequence[ViewerProfile]] = None
    ):
        self._candidates: Dict[str, CandidateProfile] = {c.id: c for c in candidates or []}
        self._viewers: Dict[str, ViewerProfile] = {v.id: v for v in viewers or []}
        self._lock = threading.Lock()

    def get_candidate(self, candidate_id: str) -> Optional[CandidateProfile]:
        with self._lock:
            return self._candidates.get(candidate_id)

    def get_viewer(self, viewer_id: str) -> Optional[ViewerProfile]:
        with self._lock:
            return self._viewers.get(viewer_id)

    def add_candidate(self, candidate: CandidateProfile) -> None:
        with self._lock:
            self._candidates[candidate.id] = candidate

    def add_viewer(self, viewer: ViewerProfile) -> None:
        with self._lock:
            self._viewers[viewer.id] = viewer


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Callers hold one AppContext per process and go through its methods;
    nothing in the engine keeps module-level state. ``close()`` stops
    background cleanup and flushes every cache namespace.
    """
    config: AppConfig
    registry: CacheRegistry
    profiles: ProfileRepository
    aggregator: MetricsAggregator
    analyzer: TrendAnalyzer
    matching: MatchingService
    clock: Callable[[], float] = field(default=time.time)

    @classmethod
    def build(
        cls,
        config: Optional[AppConfig] = None,
        profile_repository: Optional[ProfileRepository] = None,
        backend: Optional[KeyValueBackend] = None,
        performance_source: Optional[PerformanceSource] = None,
        ledger: Optional[InteractionLedger] = None,
        clock: Callable[[], float] = time.time
    ) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration (defaults when None)
            profile_repository: Subject lookup; empty in-memory repository when None
            backend: Persistence backend; built from config.caching.persistence when None
            performance_source: Page performance samples for trending scores
            ledger: Interaction ledger; in-memory when None
            clock: Epoch-seconds clock shared by caches and analyzers

        Returns:
            Fully wired AppContext instance
        """
        config = config or AppConfig()
        caching = config.caching
        if backend is None:
            backend = build_backend(caching.persistence)

        registry = CacheRegistry(
            namespaces=caching.namespaces,
            default=caching.default,
            backend=backend,
            clock=clock,
            flush_delay_seconds=caching.persistence.flush_delay_seconds,
        )
        # Persisted namespaces load eagerly so janitors cover them
        for namespace in caching.namespaces:
            registry.store(namespace)

        aggregator = MetricsAggregator(registry.store(METRICS_NAMESPACE), ledger or InMemoryLedger())
        analyzer = TrendAnalyzer(aggregator, performance_source, config.scoring.trending)
        matching = MatchingService(
            registry.store(MATCHES_NAMESPACE),
            job_weights=config.scoring.job_weights,
            recommendation_weights=config.scoring.recommendation_weights,
        )

        logger.info(
            f"Personalization engine ready: {len(caching.namespaces)} cache namespaces, "
            f"persistence={caching.persistence.backend}"
        )
        return cls(
            config=config,
            registry=registry,
            profiles=profile_repository or InMemoryProfileRepository(),
            aggregator=aggregator,
            analyzer=analyzer,
            matching=matching,
            clock=clock,
        )

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.clock(), tz=timezone.utc)

    # Cache

    def cache_get(self, namespace: str, key: str) -> Any:
        """Cached value, or MISS when absent or expired."""
        return self.registry.cache_get(namespace, key, MISS)

    def cache_set(self, namespace: str, key: str, value: Any) -> None:
        self.registry.cache_set(namespace, key, value)

    def get_stats(self, namespace: str) -> CacheStats:
        return self.registry.get_stats(namespace)

    # Ranking

    def _candidate(self, candidate_id: str) -> CandidateProfile:
        candidate = self.profiles.get_candidate(candidate_id)
        if candidate is None:
            raise SubjectNotFoundError(candidate_id, kind="candidate")
        return candidate

    def _viewer(self, viewer_id: str) -> ViewerProfile:
        viewer = self.profiles.get_viewer(viewer_id)
        if viewer is None:
            raise SubjectNotFoundError(viewer_id, kind="viewer")
        return viewer

    def rank_jobs(
        self,
        candidate_id: str,
        pool: Sequence[JobPosting],
        limit: Optional[int] = None
    ) -> List[Match]:
        limit = self.config.scoring.default_limit if limit is None else limit
        return self.matching.rank_jobs(self._candidate(candidate_id), pool, limit)

    def rank_content(
        self,
        subject_id: str,
        pool: Sequence[Target],
        limit: Optional[int] = None,
        context: Optional[SessionContext] = None
    ) -> List[Match]:
        limit = self.config.scoring.default_limit if limit is None else limit
        context = context or SessionContext.at(self.now())
        return self.matching.rank_content(self._viewer(subject_id), pool, limit, context)

    def skill_gaps(self, candidate_id: str, job: JobPosting) -> SkillGapAnalysis:
        match = score_job_match(self._candidate(candidate_id), job, self.config.scoring.job_weights)
        return skill_gap_analysis(match)

    def career_path(self, candidate_id: str) -> CareerPath:
        return career_path(self._candidate(candidate_id))

    # Metrics

    def record_interaction(
        self,
        item_id: str,
        type: InteractionType,
        value: float = 1.0,
        timestamp: Optional[datetime] = None
    ) -> ContentMetrics:
        return self.aggregator.record(item_id, type, value, timestamp or self.now())

    def content_insights(
        self,
        items: Sequence[Target],
        baselines: Optional[Dict[str, ContentMetrics]] = None
    ) -> ContentInsights:
        return self.analyzer.generate_insights(items, self.now(), baselines)

    def content_recommendations(self, item: Target) -> List[str]:
        return self.analyzer.performance_recommendations(item)

    # Lifecycle

    def start_background_cleanup(self) -> None:
        self.registry.start_janitors(self.config.caching.cleanup_interval_seconds)

    def close(self) -> None:
        self.registry.close()

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
