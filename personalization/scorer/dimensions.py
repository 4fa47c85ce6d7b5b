#!/usr/bin/env python3
"""
Job Match Dimensions - One scoring function per candidate/job dimension.

Every function returns a DimensionScore in [0, 1]. A missing candidate or job
field scores 0.0 for that dimension instead of failing the whole match.
"""

import re
from typing import Dict, Iterable, List, Optional, Set, Union

from personalization.models import (
    CandidateProfile,
    EducationLevel,
    JobPosting,
    JobType,
    Language,
    LanguageLevel,
    SalaryRange,
    WorkPreference,
)
from personalization.scorer.models import DimensionScore
from personalization.utils import clamp01, normalize_token

# Road distances (km) between the cities we hire in
CITY_DISTANCES_KM: Dict[str, Dict[str, float]] = {
    "lima": {"callao": 15, "arequipa": 1000, "cusco": 1150, "trujillo": 560},
    "arequipa": {"lima": 1000, "cusco": 320, "tacna": 250},
    "cusco": {"lima": 1150, "arequipa": 320},
    "trujillo": {"lima": 560, "chiclayo": 200},
}
DEFAULT_DISTANCE_KM = 1000.0
DISTANCE_SCALE_KM = 1000.0

EDUCATION_TIERS: Dict[EducationLevel, int] = {
    EducationLevel.TECHNICAL: 1,
    EducationLevel.BACHELORS: 2,
    EducationLevel.MASTERS: 3,
    EducationLevel.DOCTORATE: 4,
    EducationLevel.OTHER: 2,
}

CORE_INDUSTRIES = ["construction", "architecture", "engineering", "real estate"]
WORKING_LANGUAGE_LEVELS = {LanguageLevel.INTERMEDIATE, LanguageLevel.ADVANCED, LanguageLevel.NATIVE}

_YEARS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")


def parse_required_years(experience: Union[str, float, int, None]) -> Optional[float]:
    """'3+ years' -> 3.0, 5 -> 5.0, text without a number -> None."""
    if experience is None:
        return None
    if isinstance(experience, (int, float)):
        return float(experience)
    match = _YEARS_PATTERN.search(str(experience))
    return float(match.group(1)) if match else None


def skill_match(required: Iterable[str], skills: Iterable[str]) -> DimensionScore:
    """
    Fraction of requirements covered by the candidate's skills.

    Matching is case-insensitive; a requirement is covered when a skill equals
    it, contains it, or is contained in it ("autocad" covers "autocad 2d").
    """
    required_norm = [normalize_token(r) for r in required if normalize_token(r)]
    skills_norm = [normalize_token(s) for s in skills if normalize_token(s)]

    matches: List[str] = []
    gaps: List[str] = []
    for requirement in required_norm:
        covered = any(s in requirement or requirement in s for s in skills_norm)
        (matches if covered else gaps).append(requirement)

    score = len(matches) / len(required_norm) if required_norm else 0.0
    return DimensionScore(score=clamp01(score), detail={"matches": matches, "gaps": gaps})


def experience_match(
    candidate_years: Optional[float],
    required: Union[str, float, int, None]
) -> DimensionScore:
    required_years = parse_required_years(required)
    detail = {"required": required, "candidate": candidate_years}

    if required_years is None or required_years <= 0:
        return DimensionScore(score=1.0, detail=detail)
    if candidate_years is None or candidate_years <= 0:
        return DimensionScore(score=0.0, detail=detail)

    if candidate_years >= required_years:
        # Significantly overqualified
        score = 0.8 if candidate_years > required_years * 2 else 1.0
    else:
        score = candidate_years / required_years
    return DimensionScore(score=clamp01(score), detail=detail)


def city_distance(a: str, b: str) -> float:
    a, b = normalize_token(a), normalize_token(b)
    distance = CITY_DISTANCES_KM.get(a, {}).get(b)
    if distance is None:
        distance = CITY_DISTANCES_KM.get(b, {}).get(a)
    return DEFAULT_DISTANCE_KM if distance is None else float(distance)


def location_match(
    job_location: Optional[str],
    candidate_location: Optional[str],
    remote: bool = False
) -> DimensionScore:
    if remote:
        return DimensionScore(score=1.0, detail={"matches": True, "remote": True})
    if not normalize_token(job_location) or not normalize_token(candidate_location):
        return DimensionScore(score=0.0, detail={"matches": False})
    if normalize_token(job_location) == normalize_token(candidate_location):
        return DimensionScore(score=1.0, detail={"matches": True, "distance": 0.0})

    distance = city_distance(job_location, candidate_location)
    score = clamp01(1 - distance / DISTANCE_SCALE_KM)
    return DimensionScore(score=score, detail={"matches": score > 0.5, "distance": distance})


def range_match(
    job_range: Optional[SalaryRange],
    candidate_range: Optional[SalaryRange]
) -> DimensionScore:
    """1.0 on overlap, else decays with the gap relative to the job midpoint."""
    if job_range is None or candidate_range is None:
        return DimensionScore(score=0.0, detail={"in_range": False})

    if job_range.overlaps(candidate_range):
        score = 1.0
    elif job_range.midpoint <= 0:
        score = 0.0
    else:
        score = 1 - job_range.gap_to(candidate_range) / job_range.midpoint

    return DimensionScore(
        score=clamp01(score),
        detail={
            "in_range": job_range.overlaps(candidate_range),
            "difference": abs(job_range.midpoint - candidate_range.midpoint),
        },
    )


_JOB_TYPE_PREFERENCE = {
    JobType.FULL_TIME: WorkPreference.FULL_TIME,
    JobType.PART_TIME: WorkPreference.PART_TIME,
    JobType.CONTRACT: WorkPreference.CONTRACT,
}


def work_style_match(
    job_type: Optional[JobType],
    remote: bool,
    preferences: Set[WorkPreference]
) -> DimensionScore:
    score = 0.0
    matched: List[str] = []

    wanted = _JOB_TYPE_PREFERENCE.get(job_type) if job_type is not None else None
    if wanted is not None and wanted in preferences:
        score += 0.4
        matched.append(wanted.value)

    if remote and WorkPreference.REMOTE in preferences:
        score += 0.3
        matched.append("remote work")
    elif not remote and WorkPreference.ONSITE in preferences:
        score += 0.3
        matched.append("on-site work")
    elif WorkPreference.HYBRID in preferences:
        score += 0.2
        matched.append("flexible work")

    return DimensionScore(score=clamp01(score), detail={"preferences": matched})


def required_education_level(requirement_text: str) -> EducationLevel:
    """Tier named in the requirement text; technical beats phd, phd beats master, default bachelors."""
    text = normalize_token(requirement_text)
    level = EducationLevel.BACHELORS
    if "master" in text:
        level = EducationLevel.MASTERS
    if "phd" in text or "doctorate" in text:
        level = EducationLevel.DOCTORATE
    if "technical" in text or "diploma" in text:
        level = EducationLevel.TECHNICAL
    return level


def education_match(
    candidate_level: Optional[EducationLevel],
    requirements: Iterable[str]
) -> DimensionScore:
    required_level = required_education_level(", ".join(requirements))
    if candidate_level is None:
        return DimensionScore(
            score=0.0, detail={"meets": False, "level": None, "required": required_level.value}
        )

    candidate_tier = EDUCATION_TIERS.get(EducationLevel(candidate_level), 2)
    required_tier = EDUCATION_TIERS[required_level]
    meets = candidate_tier >= required_tier

    if meets:
        score = 0.9 if candidate_tier > required_tier + 1 else 1.0
    else:
        score = candidate_tier / required_tier

    return DimensionScore(
        score=clamp01(score),
        detail={
            "meets": meets,
            "level": EducationLevel(candidate_level).value,
            "required": required_level.value,
        },
    )


def _speaks(languages: List[Language], language: str) -> bool:
    target = normalize_token(language)
    return any(
        target in normalize_token(lang.language) and LanguageLevel(lang.level) in WORKING_LANGUAGE_LEVELS
        for lang in languages
    )


def culture_match(job: JobPosting, candidate: CandidateProfile) -> DimensionScore:
    score = 0.0
    factors: List[str] = []

    job_industries = [normalize_token(i) for i in job.industries] or CORE_INDUSTRIES
    if any(
        job_industry in normalize_token(industry)
        for industry in candidate.industries
        for job_industry in job_industries
    ):
        score += 0.3
        factors.append("Industry experience")

    department = normalize_token(job.department)
    title = normalize_token(job.title)
    goals = [normalize_token(g) for g in candidate.career_goals if normalize_token(g)]
    if any(
        any(industry in goal for industry in job_industries)
        or (department and goal in department)
        or goal in title
        for goal in goals
    ):
        score += 0.3
        factors.append("Career goals alignment")

    if job.language and _speaks(candidate.languages, job.language):
        score += 0.2
        factors.append("Language proficiency")

    if candidate.certifications:
        score += 0.2
        factors.append("Professional certifications")

    return DimensionScore(score=clamp01(score), detail={"factors": factors})
