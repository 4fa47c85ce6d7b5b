#!/usr/bin/env python3
"""
Ranking endpoints - ranked job matches and content recommendations.
"""

from fastapi import APIRouter, Depends

from personalization.app_context import AppContext
from ..dependencies import get_context
from ..models.requests import ContentRankRequest, JobRankRequest
from ..models.responses import RankResponse

router = APIRouter(prefix="/api/rank", tags=["ranking"])


@router.post("/jobs", response_model=RankResponse)
def rank_jobs(request: JobRankRequest, context: AppContext = Depends(get_context)):
    """
    Rank the pool of job postings for a candidate.

    Identical requests within the matches TTL are served from cache.
    Unknown candidates are a 404.
    """
    pool = [job.to_domain() for job in request.pool]
    matches = context.rank_jobs(request.candidate_id, pool, request.limit)
    return RankResponse(
        success=True,
        count=len(matches),
        matches=[m.to_dict() for m in matches],
    )


@router.post("/content", response_model=RankResponse)
def rank_content(request: ContentRankRequest, context: AppContext = Depends(get_context)):
    """
    Recommend articles and job postings to a site viewer.

    The item named by ``context.current_item_id`` is used for similarity and
    left out of the results.
    """
    pool = request.pool()
    matches = context.rank_content(
        request.subject_id,
        pool,
        request.limit,
        request.session_context(pool),
    )
    return RankResponse(
        success=True,
        count=len(matches),
        matches=[m.to_dict() for m in matches],
    )
