#!/usr/bin/env python3
"""
Matching Service - Ranks a pool of targets for one subject.

Ranking:
1. Score every target with the kind's scorer
2. Stable sort by overall score (desc), ties broken by target recency
   (newest first, undated targets last)
3. Truncate to ``limit``

Results are cached in the ``matches`` namespace under
    "{kind}:{subject_id}:{hash(target ids)}:{weights version}:{limit}"
so an identical request inside the TTL window performs no scoring at all.
Content rankings also fold the session context into the key.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from personalization.cache.models import MISS
from personalization.cache.store import CacheStore
from personalization.models import (
    CandidateProfile,
    SessionContext,
    Target,
    ViewerProfile,
    target_created_at,
)
from personalization.scorer.content_scorer import score_content
from personalization.scorer.criteria import (
    DEFAULT_JOB_MATCH_WEIGHTS,
    DEFAULT_RECOMMENDATION_WEIGHTS,
    JobMatchWeights,
    RecommendationWeights,
    WeightSet,
)
from personalization.scorer.job_scorer import score_job_match
from personalization.scorer.models import Match
from personalization.utils import Fingerprinter

logger = logging.getLogger(__name__)

Scorer = Callable[[Any, Target], Match]


def _rank_key(match: Match, created: Optional[datetime]):
    if created is None:
        return (-match.overall_score, 1, 0.0)
    return (-match.overall_score, 0, -created.timestamp())


def context_fingerprint(context: SessionContext) -> str:
    return Fingerprinter.of_mapping({
        "time_of_day": context.time_of_day,
        "device": context.device,
        "current_item": context.current_item.id if context.current_item else None,
    })


class MatchingService:
    """Scores, orders and caches ranked matches."""

    def __init__(
        self,
        store: CacheStore,
        job_weights: JobMatchWeights = DEFAULT_JOB_MATCH_WEIGHTS,
        recommendation_weights: RecommendationWeights = DEFAULT_RECOMMENDATION_WEIGHTS
    ):
        self.store = store
        self.job_weights = job_weights
        self.recommendation_weights = recommendation_weights
        self._scoring_calls = 0
        self._counter_lock = threading.Lock()

    @property
    def scoring_calls(self) -> int:
        """Number of individual target scorings performed so far."""
        with self._counter_lock:
            return self._scoring_calls

    @staticmethod
    def cache_key(
        kind: str,
        subject_id: str,
        targets: Sequence[Target],
        weights: WeightSet,
        limit: int,
        variant: Optional[str] = None
    ) -> str:
        key = f"{kind}:{subject_id}:{Fingerprinter.of_ids(t.id for t in targets)}:{weights.version()}:{limit}"
        if variant:
            key = f"{key}:{variant}"
        return key

    def rank(
        self,
        subject: Any,
        targets: Sequence[Target],
        limit: int,
        scorer: Scorer,
        weights: WeightSet,
        kind: str,
        variant: Optional[str] = None
    ) -> List[Match]:
        if limit <= 0:
            return []

        key = self.cache_key(kind, subject.id, targets, weights, limit, variant)
        cached = self.store.get(key)
        if cached is not MISS:
            logger.debug(f"Ranking cache hit for {kind} subject {subject.id}")
            return [Match.from_dict(m) for m in cached]

        scored = []
        for target in targets:
            scored.append((scorer(subject, target), target_created_at(target)))
        with self._counter_lock:
            self._scoring_calls += len(scored)

        scored.sort(key=lambda pair: _rank_key(pair[0], pair[1]))
        ranked = [match for match, _ in scored[:limit]]

        self.store.set(key, [m.to_dict() for m in ranked])
        top = ranked[0].overall_score if ranked else 0.0
        logger.info(
            f"Ranked {len(targets)} {kind} targets for {subject.id}, "
            f"kept {len(ranked)} (top score {top:.3f})"
        )
        return ranked

    def rank_jobs(
        self,
        candidate: CandidateProfile,
        jobs: Sequence[Target],
        limit: int
    ) -> List[Match]:
        weights = self.job_weights
        return self.rank(
            candidate,
            jobs,
            limit,
            scorer=lambda subject, job: score_job_match(subject, job, weights),
            weights=weights,
            kind="job",
        )

    def rank_content(
        self,
        viewer: ViewerProfile,
        items: Sequence[Target],
        limit: int,
        context: Optional[SessionContext] = None
    ) -> List[Match]:
        context = context or SessionContext()
        weights = self.recommendation_weights
        current_id = context.current_item.id if context.current_item else None
        pool = [item for item in items if item.id != current_id]
        return self.rank(
            viewer,
            pool,
            limit,
            scorer=lambda subject, item: score_content(subject, item, context, weights),
            weights=weights,
            kind="content",
            variant=context_fingerprint(context),
        )
