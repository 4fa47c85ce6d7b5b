#!/usr/bin/env python3
"""
Content Scorer - Viewer-to-content recommendation score.

Four dimensions, combined with RecommendationWeights:
- content_similarity: closeness to the item the viewer is currently on
- behavioral: the viewer's own history with the item
- context: time of day and device fit
- preference: stated interests, reading time, job preferences

Each dimension is capped at 1.0. Scoring is deterministic: the same viewer,
item and context always produce the same Match.
"""

from typing import List, Optional

from personalization.models import (
    ContentItem,
    JobPosting,
    ReadingTime,
    SessionContext,
    Target,
    ViewerProfile,
)
from personalization.scorer.criteria import DEFAULT_RECOMMENDATION_WEIGHTS, RecommendationWeights
from personalization.scorer.job_scorer import confidence_for, weighted_overall
from personalization.scorer.models import DimensionScore, Match, fit_level
from personalization.utils import clamp01, normalize_token, safe_ratio

# Reason thresholds per dimension
SIMILARITY_REASON = 0.2
BEHAVIOR_REASON = 0.1
CONTEXT_REASON = 0.05
PREFERENCE_REASON = 0.1

FALLBACK_REASON = "Featured content"


def _overlap(a: List[str], b: List[str]) -> float:
    """Shared entries over the longer list."""
    a_norm = {normalize_token(x) for x in a}
    b_norm = {normalize_token(x) for x in b}
    return safe_ratio(len(a_norm & b_norm), max(len(a_norm), len(b_norm)))


def content_similarity(item: Target, current: Optional[Target]) -> DimensionScore:
    if current is None:
        return DimensionScore(score=0.0, detail={"current_item": None})

    score = 0.0
    if normalize_token(item.category) and normalize_token(item.category) == normalize_token(current.category):
        score += 0.3
    if isinstance(item, JobPosting) and isinstance(current, JobPosting):
        if item.level and item.level == current.level:
            score += 0.2
    score += _overlap(item.tags, current.tags) * 0.2

    return DimensionScore(score=clamp01(score), detail={"current_item": current.id})


def behavioral_score(item: Target, viewer: ViewerProfile) -> DimensionScore:
    behavior = viewer.behavior
    score = 0.0

    if item.id in behavior.viewed_items:
        score += 0.1
    if item.id in behavior.favorite_items:
        score += 0.4

    time_spent = behavior.time_spent_ms.get(item.id, 0)
    if time_spent > 120000:
        score += 0.2
    elif time_spent > 60000:
        score += 0.1

    interactions = behavior.interactions.get(item.id, 0)
    score += min(interactions * 0.05, 0.15)

    return DimensionScore(
        score=clamp01(score),
        detail={"time_spent_ms": time_spent, "interactions": interactions},
    )


def context_score(item: Target, context: SessionContext) -> DimensionScore:
    score = 0.0
    if isinstance(item, ContentItem):
        minutes = item.reading_minutes
        if context.time_of_day == "morning" and minutes <= 3:
            score += 0.1
        if context.time_of_day == "afternoon" and minutes <= 7:
            score += 0.1
        if context.time_of_day == "evening" and minutes >= 5:
            score += 0.1
        if context.device == "mobile" and minutes <= 5:
            score += 0.05
    elif isinstance(item, JobPosting):
        if context.time_of_day == "evening" and item.remote:
            score += 0.1
        if context.device == "mobile" and "lima" in normalize_token(item.location):
            score += 0.05

    return DimensionScore(
        score=clamp01(score),
        detail={"time_of_day": context.time_of_day, "device": context.device},
    )


def _reading_time_fits(preference: Optional[ReadingTime], minutes: float) -> bool:
    if preference == ReadingTime.SHORT:
        return minutes <= 3
    if preference == ReadingTime.MEDIUM:
        return 3 <= minutes <= 7
    if preference == ReadingTime.LONG:
        return minutes > 7
    return False


def preference_score(item: Target, viewer: ViewerProfile) -> DimensionScore:
    score = 0.0
    matched: List[str] = []

    if isinstance(item, ContentItem):
        interests = [normalize_token(i) for i in viewer.interests if normalize_token(i)]
        tags = [normalize_token(t) for t in item.tags]
        category = normalize_token(item.category)
        matched = [
            interest for interest in interests
            if any(interest in tag for tag in tags) or interest in category
        ]
        score += safe_ratio(len(matched), len(interests)) * 0.3
        if _reading_time_fits(viewer.reading_time, item.reading_minutes):
            score += 0.2
    elif isinstance(item, JobPosting):
        if item.level and item.level in viewer.experience_levels:
            score += 0.3
            matched.append("level")
        if viewer.location and normalize_token(viewer.location) in normalize_token(item.location):
            score += 0.2
            matched.append("location")
        if viewer.job_type is not None and viewer.job_type == item.job_type:
            score += 0.2
            matched.append("job type")
        department = normalize_token(item.department)
        if any(normalize_token(ind) and normalize_token(ind) in department for ind in viewer.industries):
            score += 0.2
            matched.append("industry")

    return DimensionScore(score=clamp01(score), detail={"matched": matched})


def viewer_completeness(viewer: ViewerProfile) -> float:
    filled = [
        bool(viewer.interests),
        viewer.reading_time is not None,
        bool(viewer.location),
        bool(viewer.industries),
        bool(viewer.experience_levels),
        bool(viewer.behavior.viewed_items),
    ]
    return sum(filled) / len(filled)


def content_reasons(item: Target, breakdown: dict) -> List[str]:
    reasons = []
    if breakdown["content_similarity"].score > SIMILARITY_REASON:
        reasons.append("Similar position" if isinstance(item, JobPosting) else "Related content")
    if breakdown["behavioral"].score > BEHAVIOR_REASON:
        reasons.append("Based on your history")
    if breakdown["context"].score > CONTEXT_REASON:
        reasons.append("Recommended for right now")
    if breakdown["preference"].score > PREFERENCE_REASON:
        reasons.append("Matches your interests")
    return reasons or [FALLBACK_REASON]


def score_content(
    viewer: ViewerProfile,
    item: Target,
    context: Optional[SessionContext] = None,
    weights: RecommendationWeights = DEFAULT_RECOMMENDATION_WEIGHTS
) -> Match:
    context = context or SessionContext()
    breakdown = {
        "content_similarity": content_similarity(item, context.current_item),
        "behavioral": behavioral_score(item, viewer),
        "context": context_score(item, context),
        "preference": preference_score(item, viewer),
    }

    overall = weighted_overall(breakdown, weights.weights())
    return Match(
        subject_id=viewer.id,
        target_id=item.id,
        overall_score=overall,
        breakdown=breakdown,
        recommendations=content_reasons(item, breakdown),
        confidence=confidence_for(viewer_completeness(viewer), overall),
        fit_level=fit_level(overall),
        kind="content",
    )
