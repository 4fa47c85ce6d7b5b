"""
Test factories - realistic subjects, targets and a controllable clock.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from personalization.models import (
    CandidateProfile,
    ContentItem,
    EducationLevel,
    JobPosting,
    JobType,
    Language,
    LanguageLevel,
    ReadingTime,
    SalaryRange,
    ViewerBehavior,
    ViewerProfile,
    WorkPreference,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: float = NOW.timestamp()):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_candidate(candidate_id: str = "cand_1", **overrides) -> CandidateProfile:
    data = dict(
        id=candidate_id,
        skills=["BIM", "AutoCAD", "Revit"],
        experience_years=5,
        location="Lima",
        preferred_salary=SalaryRange(5000, 8000),
        work_preferences={WorkPreference.FULL_TIME, WorkPreference.ONSITE},
        education_level=EducationLevel.BACHELORS,
        education_field="Civil Engineering",
        certifications=["PMP"],
        languages=[Language("Spanish", LanguageLevel.NATIVE), Language("English", LanguageLevel.ADVANCED)],
        career_goals=["construction management"],
        industries=["Construction"],
        name="Ana Quispe",
        email="ana@example.com",
    )
    data.update(overrides)
    return CandidateProfile(**data)


def make_empty_candidate(candidate_id: str = "cand_empty") -> CandidateProfile:
    return CandidateProfile(id=candidate_id)


def make_job(job_id: str = "job_1", posted_days_ago: Optional[float] = 2, **overrides) -> JobPosting:
    data = dict(
        id=job_id,
        title="Site Engineer",
        department="Construction",
        requirements=["BIM", "AutoCAD"],
        experience="3+ years",
        location="Lima",
        remote=False,
        job_type=JobType.FULL_TIME,
        salary_range=SalaryRange(6000, 9000),
        level="mid",
        description="Supervise structural works on commercial projects. " * 6,
        benefits=["Health insurance"],
        education="Bachelor's degree in Civil Engineering",
        industries=["construction"],
        language="spanish",
        posted_at=NOW - timedelta(days=posted_days_ago) if posted_days_ago is not None else None,
    )
    data.update(overrides)
    return JobPosting(**data)


def make_article(item_id: str = "post_1", created_days_ago: Optional[float] = 1, **overrides) -> ContentItem:
    data = dict(
        id=item_id,
        title="BIM adoption in Peruvian construction",
        category="technology",
        tags=["bim", "construction", "innovation"],
        content="word " * 1000,
        reading_time_minutes=5,
        featured_image="/images/bim.jpg",
        created_at=NOW - timedelta(days=created_days_ago) if created_days_ago is not None else None,
    )
    data.update(overrides)
    return ContentItem(**data)


def make_viewer(viewer_id: str = "viewer_1", **overrides) -> ViewerProfile:
    data = dict(
        id=viewer_id,
        interests=["bim", "sustainability"],
        experience_levels=["mid", "senior"],
        location="Lima",
        industries=["construction"],
        reading_time=ReadingTime.MEDIUM,
        job_type=JobType.FULL_TIME,
        behavior=ViewerBehavior(),
    )
    data.update(overrides)
    return ViewerProfile(**data)
