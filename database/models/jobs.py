from typing import Any

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Column,
    String,
    Boolean,
    ForeignKey,
    DateTime,
    Float,
    Text,
    JSON,
    Table,
    Enum as SQLEnum,
    Index,
)
from database.engine import Base, BigIntId, utcnow
from database.models.talent import Skill, empty_availability
from datetime import datetime
from enum import Enum as PyEnum


# ==================== Enums ===================== #
class PositionType(str, PyEnum):
    """Back of house (kitchen) or front of house (dining room)."""

    BOH = "BOH"
    FOH = "FOH"


class CompensationType(str, PyEnum):
    """How a posting pays."""

    HOURLY = "hourly"
    SALARY = "salary"


job_posting_skills = Table(
    "job_posting_skills",
    Base.metadata,
    Column(
        "job_posting_id",
        BigIntId,
        ForeignKey("job_postings.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "skill_id",
        BigIntId,
        ForeignKey("skills.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class JobPosting(Base):
    """
    Job opening published by a team.

    Postings are soft-deactivated through ``is_active``; rows are only
    removed together with their team.
    """

    __tablename__: str = "job_postings"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    team_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    service_style: Mapped[str] = mapped_column(String(100), nullable=False)
    position_type: Mapped[PositionType] = mapped_column(
        SQLEnum(PositionType, native_enum=False, length=50), nullable=False
    )
    specific_position: Mapped[str] = mapped_column(String(100), nullable=False)
    experience_required: Mapped[str] = mapped_column(String(50), nullable=False)
    shifts: Mapped[dict[str, list[str]]] = mapped_column(JSON, default=empty_availability)
    compensation_type: Mapped[CompensationType] = mapped_column(
        SQLEnum(CompensationType, native_enum=False, length=50), nullable=False
    )
    compensation_min: Mapped[float] = mapped_column(Float, nullable=False)
    compensation_max: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_date: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    required_skills: Mapped[list["Skill"]] = relationship(
        "Skill", secondary=job_posting_skills
    )

    __table_args__ = (
        Index("idx_job_postings_team_active", "team_id", "is_active"),
        Index("idx_job_postings_position", "position_type", "specific_position"),
    )

    @property
    def compensation_range(self) -> dict[str, float]:
        return {"min": self.compensation_min, "max": self.compensation_max}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the scalar columns. Relationships are left to callers."""
        return {
            "id": self.id,
            "team_id": self.team_id,
            "title": self.title,
            "description": self.description,
            "service_style": self.service_style,
            "position_type": self.position_type.value,
            "specific_position": self.specific_position,
            "experience_required": self.experience_required,
            "shifts": self.shifts,
            "compensation_type": self.compensation_type.value,
            "compensation_range": self.compensation_range,
            "is_active": self.is_active,
            "start_date": self.start_date,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
