from typing import Any

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Boolean,
    ForeignKey,
    DateTime,
    Float,
    Text,
    JSON,
    Enum as SQLEnum,
    Index,
    UniqueConstraint,
)
from database.engine import Base, BigIntId, utcnow
from datetime import datetime
from enum import Enum as PyEnum


# ==================== Constants ===================== #
WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

BOH_SKILLS: frozenset[str] = frozenset(
    {
        "Knife skills",
        "Sauté",
        "Grill",
        "Garde manger",
        "Sushi/sashimi",
        "Wok",
        "Pasta",
        "BBQ",
        "Baking",
        "Pizza",
        "Prep",
        "Wood fire",
        "Recipe following",
        "Recipe writing",
    }
)

FOH_SKILLS: frozenset[str] = frozenset(
    {
        "Wine knowledge",
        "Cocktail knowledge",
        "Beer knowledge",
        "Food knowledge",
        "Coffee skills",
        "Can carry up to 4 plates",
        "POS Toast",
        "Square",
        "TouchBistro",
        "Clover",
        "Dinerware",
        "Revel",
    }
)


# ==================== Enums ===================== #
class SkillCategory(str, PyEnum):
    """
    Kitchen (back of house), dining room (front of house) or general skills.
    """

    BOH = "BOH"
    FOH = "FOH"
    GENERAL = "General"


def categorize_skill(name: str) -> SkillCategory:
    """Pick the category for a skill that does not exist yet."""
    if name in BOH_SKILLS:
        return SkillCategory.BOH
    if name in FOH_SKILLS:
        return SkillCategory.FOH
    return SkillCategory.GENERAL


def empty_availability() -> dict[str, list[str]]:
    return {day: [] for day in WEEKDAYS}


class Talent(Base):
    """
    Worker profile, keyed by the identity provider's token identifier.
    """

    __tablename__: str = "talent"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    token_identifier: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )

    # Contact
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    profile_picture_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Eligibility
    last_four_ssn: Mapped[str] = mapped_column(String(4), nullable=False)
    legally_work_in_us: Mapped[bool] = mapped_column(Boolean, nullable=False)
    in_hospitality_industry: Mapped[bool] = mapped_column(Boolean, nullable=False)
    over_21: Mapped[bool] = mapped_column(Boolean, nullable=False)

    # Location and preferences
    living_area: Mapped[str] = mapped_column(String(100), nullable=False)
    interested_working_area: Mapped[str] = mapped_column(String(100), nullable=False)
    commute_methods: Mapped[list[str]] = mapped_column(JSON, default=list)
    service_style_preferences: Mapped[list[str]] = mapped_column(JSON, default=list)
    position_preferences: Mapped[list[str]] = mapped_column(JSON, default=list)
    experience_level: Mapped[str] = mapped_column(String(50), nullable=False)
    availability: Mapped[dict[str, list[str]]] = mapped_column(
        JSON, default=empty_availability
    )

    # Last job
    last_job_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_job_position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_job_duration: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_job_leave_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_job_contactable: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    # Compensation and start
    desired_hourly_wage: Mapped[float | None] = mapped_column(Float, nullable=True)
    desired_yearly_salary: Mapped[float | None] = mapped_column(Float, nullable=True)
    start_date_preference: Mapped[str] = mapped_column(String(100), nullable=False)

    profile_complete: Mapped[bool] = mapped_column(Boolean, default=False)
    # Weak reference, cleared by the team and membership services
    current_team_id: Mapped[int | None] = mapped_column(
        BigIntId, nullable=True, index=True
    )
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("idx_talent_working_area", "interested_working_area"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Skill(Base):
    """
    Skill tag shared by talent profiles and job postings.
    """

    __tablename__: str = "skills"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    category: Mapped[SkillCategory] = mapped_column(
        SQLEnum(SkillCategory, native_enum=False, length=50),
        nullable=False,
        default=SkillCategory.GENERAL,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "category": self.category.value}


class TalentSkill(Base):
    """Link between a talent and one of their skills."""

    __tablename__: str = "talent_skills"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    talent_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("talent.id", ondelete="CASCADE"), nullable=False
    )
    skill_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint("talent_id", "skill_id", name="uq_talent_skill"),
        Index("idx_talent_skills_skill", "skill_id"),
    )


class TalentLanguage(Base):
    """Language spoken by a talent."""

    __tablename__: str = "talent_languages"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    talent_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("talent.id", ondelete="CASCADE"), nullable=False
    )
    language: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint("talent_id", "language", name="uq_talent_language"),
    )
