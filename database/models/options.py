"""Predefined option model backing the choice fields of the forms."""

from typing import Any

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, Integer, DateTime, Index, UniqueConstraint
from database.engine import Base, BigIntId, utcnow
from datetime import datetime


class PredefinedOption(Base):
    """
    Configurable taxonomy value (service style, position, shift, area...).
    """

    __tablename__: str = "predefined_options"
    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, nullable=False, autoincrement=True
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint("category", "value", name="uq_option_category_value"),
        Index("idx_options_category_active", "category", "is_active"),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "value": self.value,
            "display_name": self.display_name,
            "is_active": self.is_active,
            "order": self.order,
        }
