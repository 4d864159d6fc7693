"""ORM models. Importing this package registers every table on ``Base.metadata``."""

from database.models.talent import (
    Talent,
    Skill,
    SkillCategory,
    TalentSkill,
    TalentLanguage,
    WEEKDAYS,
    categorize_skill,
)
from database.models.teams import Team, TeamMember, TeamRole
from database.models.jobs import (
    JobPosting,
    PositionType,
    CompensationType,
    job_posting_skills,
)
from database.models.applications import (
    Application,
    ApplicationStatus,
    Match,
    MatchStatus,
)
from database.models.options import PredefinedOption

__all__ = [
    "Talent",
    "Skill",
    "SkillCategory",
    "TalentSkill",
    "TalentLanguage",
    "WEEKDAYS",
    "categorize_skill",
    "Team",
    "TeamMember",
    "TeamRole",
    "JobPosting",
    "PositionType",
    "CompensationType",
    "job_posting_skills",
    "Application",
    "ApplicationStatus",
    "Match",
    "MatchStatus",
    "PredefinedOption",
]
