from typing import Any

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    ForeignKey,
    DateTime,
    Float,
    Text,
    Enum as SQLEnum,
    Index,
    UniqueConstraint,
)
from database.engine import Base, BigIntId, utcnow
from database.models.jobs import CompensationType
from datetime import datetime
from enum import Enum as PyEnum


# ==================== Enums ===================== #
class ApplicationStatus(str, PyEnum):
    """
    Application lifecycle. Only ``pending`` can move; the rest are terminal.
    """

    PENDING = "pending"
    MATCHED = "matched"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class MatchStatus(str, PyEnum):
    """Employment record lifecycle."""

    ACTIVE = "active"
    COMPLETED = "completed"
    TERMINATED = "terminated"


class Application(Base):
    """
    A talent's application to a job posting.

    At most one application exists per (talent, posting); a withdrawn or
    rejected application still blocks a new one.
    """

    __tablename__: str = "applications"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    talent_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("talent.id", ondelete="CASCADE"), nullable=False
    )
    job_posting_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("job_postings.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[ApplicationStatus] = mapped_column(
        SQLEnum(ApplicationStatus, native_enum=False, length=50),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint(
            "talent_id", "job_posting_id", name="uq_application_talent_posting"
        ),
        Index("idx_applications_posting_status", "job_posting_id", "status"),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "talent_id": self.talent_id,
            "job_posting_id": self.job_posting_id,
            "status": self.status.value,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Match(Base):
    """
    Employment record created when an application is matched.
    """

    __tablename__: str = "matches"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    application_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    talent_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("talent.id", ondelete="CASCADE"), nullable=False
    )
    team_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    job_posting_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("job_postings.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[str] = mapped_column(String(100), nullable=False)
    compensation_type: Mapped[CompensationType] = mapped_column(
        SQLEnum(CompensationType, native_enum=False, length=50), nullable=False
    )
    compensation_amount: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[MatchStatus] = mapped_column(
        SQLEnum(MatchStatus, native_enum=False, length=50),
        nullable=False,
        default=MatchStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("idx_matches_talent_team_status", "talent_id", "team_id", "status"),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "application_id": self.application_id,
            "talent_id": self.talent_id,
            "team_id": self.team_id,
            "job_posting_id": self.job_posting_id,
            "start_date": self.start_date,
            "position": self.position,
            "compensation_type": self.compensation_type.value,
            "compensation_amount": self.compensation_amount,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
