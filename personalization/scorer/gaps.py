"""
Skill gap analysis and career path suggestions for candidates.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from personalization.models import CandidateProfile
from personalization.scorer.models import Match
from personalization.utils import normalize_token

SKILL_CATEGORIES: Dict[str, List[str]] = {
    "technical": ["AutoCAD", "BIM", "Revit", "Civil 3D", "Project Management", "Cost Estimation"],
    "soft": ["Leadership", "Communication", "Problem Solving", "Team Management", "Negotiation"],
    "industry": ["Construction", "Architecture", "Engineering", "Real Estate", "Infrastructure"],
    "certifications": ["PMP", "LEED AP", "P.Eng", "Architect License", "Safety Certification"],
}

IMPORTANCE_BY_CATEGORY = {
    "certifications": "high",
    "technical": "high",
    "industry": "medium",
}

LEARNING_TIME = {"high": "3-6 months", "medium": "2-4 months", "low": "1-3 months"}


def skill_category(skill: str) -> str:
    """Category of a skill name, 'other' when it is not in SKILL_CATEGORIES."""
    needle = normalize_token(skill)
    for category, names in SKILL_CATEGORIES.items():
        for name in names:
            known = normalize_token(name)
            if known in needle or needle in known:
                return category
    return "other"


@dataclass
class MissingSkill:
    skill: str
    importance: str
    learning_path: List[str]
    estimated_time: str


@dataclass
class DevelopmentStep:
    skill: str
    action: str
    timeline: str
    resources: List[str]


@dataclass
class SkillGapAnalysis:
    candidate_id: str
    job_id: str
    missing_skills: List[MissingSkill] = field(default_factory=list)
    strength_areas: List[str] = field(default_factory=list)
    development_plan: List[DevelopmentStep] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def skill_gap_analysis(match: Match) -> SkillGapAnalysis:
    """Turn a job match's skill gaps into a learning plan."""
    skills = match.breakdown.get("skills")
    gaps = list(skills.detail.get("gaps") or []) if skills else []
    strengths = list(skills.detail.get("matches") or []) if skills else []

    missing = []
    plan = []
    for skill in gaps:
        importance = IMPORTANCE_BY_CATEGORY.get(skill_category(skill), "low")
        missing.append(MissingSkill(
            skill=skill,
            importance=importance,
            learning_path=[f"{skill} course", "Hands-on project practice", "Certification"],
            estimated_time=LEARNING_TIME[importance],
        ))
        plan.append(DevelopmentStep(
            skill=skill,
            action=f"Complete training in {skill}",
            timeline="3 months" if importance == "high" else "1-2 months",
            resources=["Online courses", "Workshops", "Mentoring"],
        ))

    # High importance first, keeping gap order within a tier
    rank = {"high": 0, "medium": 1, "low": 2}
    missing.sort(key=lambda m: rank[m.importance])

    return SkillGapAnalysis(
        candidate_id=match.subject_id,
        job_id=match.target_id,
        missing_skills=missing,
        strength_areas=strengths,
        development_plan=plan,
    )


@dataclass
class NextRole:
    title: str
    timeframe: str
    required_skills: List[str]
    salary_min: float
    salary_max: float
    probability: float


@dataclass
class LongTermGoal:
    role: str
    timeframe: str
    path_steps: List[str]


@dataclass
class CareerPath:
    current_role: str
    next_roles: List[NextRole] = field(default_factory=list)
    long_term_goals: List[LongTermGoal] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_JUNIOR_ROLES = [
    NextRole("Mid-Level Engineer", "2-3 years", ["Project Management", "Advanced Technical Skills"], 4000, 6000, 0.8),
    NextRole("Specialist", "3-4 years", ["Specialization", "Leadership"], 5000, 7500, 0.6),
]
_MID_ROLES = [
    NextRole("Senior Engineer", "1-2 years", ["Team Leadership", "Strategic Thinking"], 6000, 9000, 0.7),
    NextRole("Project Manager", "2-3 years", ["PMP Certification", "Budget Management"], 7000, 12000, 0.6),
]
_SENIOR_ROLES = [
    NextRole("Principal Engineer", "1-2 years", ["Technical Excellence", "Mentoring"], 10000, 15000, 0.5),
    NextRole("Director", "2-4 years", ["Executive Leadership", "Business Strategy"], 15000, 25000, 0.3),
]
_LONG_TERM_GOALS = [
    LongTermGoal("Technical Director", "5-8 years", ["Senior Engineer", "Principal Engineer", "Technical Director"]),
    LongTermGoal("Project Director", "6-10 years", ["Project Manager", "Senior PM", "Project Director"]),
]


def career_path(candidate: CandidateProfile) -> CareerPath:
    """Next roles by experience band: under 3 years, under 8, then senior."""
    years = candidate.experience_years or 0
    if years < 3:
        current, roles = "Junior Professional", _JUNIOR_ROLES
    elif years < 8:
        current, roles = "Mid-Level Professional", _MID_ROLES
    else:
        current, roles = "Senior Professional", _SENIOR_ROLES

    return CareerPath(
        current_role=current,
        next_roles=[NextRole(**asdict(r)) for r in roles],
        long_term_goals=[LongTermGoal(**asdict(g)) for g in _LONG_TERM_GOALS],
    )
