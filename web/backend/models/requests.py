#!/usr/bin/env python3
"""
Request models for API endpoints.

Each model converts into the engine's snapshot dataclasses via
``to_domain()``; validation (enums, bounds) happens here at the edge.
"""

from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from personalization.metrics.models import InteractionType
from personalization.models import ContentItem, JobPosting, JobType, SalaryRange, SessionContext


class SalaryRangeIn(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)
    currency: str = "PEN"

    def to_domain(self) -> SalaryRange:
        return SalaryRange(min=self.min, max=self.max, currency=self.currency)


class JobPostingIn(BaseModel):
    """Job posting in a ranking pool."""
    id: str
    title: str
    department: str = ""
    requirements: List[str] = Field(default_factory=list)
    experience: Union[float, str, None] = None
    location: str = ""
    remote: bool = False
    job_type: Optional[JobType] = JobType.FULL_TIME
    salary_range: Optional[SalaryRangeIn] = None
    level: Optional[str] = None
    description: str = ""
    benefits: List[str] = Field(default_factory=list)
    education: Optional[str] = None
    industries: List[str] = Field(default_factory=list)
    language: Optional[str] = "spanish"
    posted_at: Optional[datetime] = None

    def to_domain(self) -> JobPosting:
        data = self.model_dump(exclude={"salary_range"})
        return JobPosting(
            salary_range=self.salary_range.to_domain() if self.salary_range else None,
            **data
        )


class ContentItemIn(BaseModel):
    """Article or other editorial item in a ranking pool."""
    id: str
    title: str
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    content: str = ""
    reading_time_minutes: Optional[float] = Field(None, ge=0)
    featured_image: Optional[str] = None
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    def to_domain(self) -> ContentItem:
        return ContentItem(**self.model_dump())


class JobRankRequest(BaseModel):
    """Rank a pool of job postings for a candidate."""
    candidate_id: str
    pool: List[JobPostingIn] = Field(default_factory=list)
    limit: Optional[int] = Field(None, ge=0, le=500, description="Defaults to scoring.default_limit")


class SessionContextIn(BaseModel):
    time_of_day: Literal["morning", "afternoon", "evening", "night"] = "morning"
    device: Literal["mobile", "tablet", "desktop"] = "desktop"
    current_item_id: Optional[str] = Field(None, description="Id of an item in the pool the viewer is on")


class ContentRankRequest(BaseModel):
    """Rank articles and/or job postings for a site viewer."""
    subject_id: str
    items: List[ContentItemIn] = Field(default_factory=list)
    jobs: List[JobPostingIn] = Field(default_factory=list)
    limit: Optional[int] = Field(None, ge=0, le=500)
    context: Optional[SessionContextIn] = None

    def pool(self) -> list:
        return [i.to_domain() for i in self.items] + [j.to_domain() for j in self.jobs]

    def session_context(self, pool: list) -> Optional[SessionContext]:
        if self.context is None:
            return None
        current = next((t for t in pool if t.id == self.context.current_item_id), None)
        return SessionContext(
            time_of_day=self.context.time_of_day,
            device=self.context.device,
            current_item=current,
        )


class CacheValueUpdate(BaseModel):
    """Value to store under a cache key."""
    value: Any


class InteractionRequest(BaseModel):
    """One interaction event for the metrics aggregator."""
    item_id: str = Field(min_length=1)
    type: InteractionType
    value: float = Field(default=1.0, description="Count, or milliseconds for 'engage'")
    timestamp: Optional[datetime] = None
