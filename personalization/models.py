#!/usr/bin/env python3
"""
Profile and Target Models - Read-only snapshots consumed by the scorers.

Subjects (who we rank for):
- CandidateProfile: job-seeker matched against job postings
- ViewerProfile: site visitor receiving content recommendations

Targets (what we rank):
- JobPosting
- ContentItem (blog articles and other editorial content)

These are snapshots handed in by the external profile/content repositories;
the engine never mutates them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set, Union

from personalization.utils import ensure_utc


class EducationLevel(str, Enum):
    TECHNICAL = "technical"
    BACHELORS = "bachelors"
    MASTERS = "masters"
    DOCTORATE = "doctorate"
    OTHER = "other"


class LanguageLevel(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    NATIVE = "native"


class WorkPreference(str, Enum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class ReadingTime(str, Enum):
    SHORT = "short"    # <= 3 minutes
    MEDIUM = "medium"  # 3-7 minutes
    LONG = "long"      # > 7 minutes


@dataclass(frozen=True)
class SalaryRange:
    """Inclusive numeric range; swapped bounds are normalized."""
    min: float
    max: float
    currency: str = "PEN"

    def __post_init__(self) -> None:
        if self.max < self.min:
            low, high = self.max, self.min
            object.__setattr__(self, "min", low)
            object.__setattr__(self, "max", high)

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def overlaps(self, other: "SalaryRange") -> bool:
        return self.min <= other.max and self.max >= other.min

    def gap_to(self, other: "SalaryRange") -> float:
        """Distance between two non-overlapping ranges (0 when they overlap)."""
        if self.overlaps(other):
            return 0.0
        if self.min > other.max:
            return self.min - other.max
        return other.min - self.max


@dataclass(frozen=True)
class Language:
    language: str
    level: LanguageLevel = LanguageLevel.BASIC


@dataclass
class CandidateProfile:
    """Job-seeker snapshot. Empty/None fields lower profile completeness."""
    id: str
    skills: List[str] = field(default_factory=list)
    experience_years: Optional[float] = None
    location: Optional[str] = None
    preferred_salary: Optional[SalaryRange] = None
    work_preferences: Set[WorkPreference] = field(default_factory=set)
    education_level: Optional[EducationLevel] = None
    education_field: Optional[str] = None
    certifications: List[str] = field(default_factory=list)
    languages: List[Language] = field(default_factory=list)
    career_goals: List[str] = field(default_factory=list)
    industries: List[str] = field(default_factory=list)
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class JobPosting:
    """Job posting as published on the careers pages."""
    id: str
    title: str
    department: str = ""
    requirements: List[str] = field(default_factory=list)
    # Free text ("3+ years") or a number of years
    experience: Union[str, float, None] = None
    location: str = ""
    remote: bool = False
    job_type: Optional[JobType] = JobType.FULL_TIME
    salary_range: Optional[SalaryRange] = None
    level: Optional[str] = None
    description: str = ""
    benefits: List[str] = field(default_factory=list)
    education: Optional[str] = None
    industries: List[str] = field(default_factory=list)
    language: Optional[str] = "spanish"
    posted_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.posted_at = ensure_utc(self.posted_at)

    @property
    def created_at(self) -> Optional[datetime]:
        return self.posted_at

    @property
    def category(self) -> str:
        return self.department

    @property
    def tags(self) -> List[str]:
        return self.requirements


@dataclass
class ContentItem:
    """Editorial content item (blog article, case study, news)."""
    id: str
    title: str
    category: str = ""
    tags: List[str] = field(default_factory=list)
    content: str = ""
    reading_time_minutes: Optional[float] = None
    featured_image: Optional[str] = None
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.created_at = ensure_utc(self.created_at)
        self.published_at = ensure_utc(self.published_at)

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    @property
    def reading_minutes(self) -> float:
        """Explicit reading time, else estimated at 200 words per minute."""
        if self.reading_time_minutes is not None:
            return float(self.reading_time_minutes)
        return self.word_count / 200.0


Target = Union[JobPosting, ContentItem]


def target_created_at(target: Target) -> Optional[datetime]:
    """Creation time of a target, falling back to publish time."""
    created = getattr(target, "created_at", None)
    if created is None:
        created = getattr(target, "published_at", None)
    return ensure_utc(created)


@dataclass
class ViewerBehavior:
    """Viewer's on-site history, keyed by target id."""
    viewed_items: List[str] = field(default_factory=list)
    favorite_items: List[str] = field(default_factory=list)
    search_history: List[str] = field(default_factory=list)
    time_spent_ms: Dict[str, float] = field(default_factory=dict)
    interactions: Dict[str, int] = field(default_factory=dict)


@dataclass
class ViewerProfile:
    """Site visitor receiving content recommendations."""
    id: str
    interests: List[str] = field(default_factory=list)
    experience_levels: List[str] = field(default_factory=list)
    location: Optional[str] = None
    industries: List[str] = field(default_factory=list)
    reading_time: Optional[ReadingTime] = None
    job_type: Optional[JobType] = None
    behavior: ViewerBehavior = field(default_factory=ViewerBehavior)


def time_of_day_for(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    if hour < 21:
        return "evening"
    return "night"


@dataclass
class SessionContext:
    """Request-time context for content recommendation."""
    time_of_day: str = "morning"  # morning | afternoon | evening | night
    device: str = "desktop"       # mobile | tablet | desktop
    current_item: Optional[Target] = None

    @classmethod
    def at(cls, moment: datetime, device: str = "desktop",
           current_item: Optional[Target] = None) -> "SessionContext":
        return cls(
            time_of_day=time_of_day_for(moment.hour),
            device=device,
            current_item=current_item,
        )
