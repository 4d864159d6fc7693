"""Application and match API schemas."""

from typing import Literal, Optional
from pydantic import BaseModel, Field

# Statuses a team may set on an application; withdrawal goes through its own endpoint
TeamDecisionLiteral = Literal["pending", "matched", "rejected"]
MatchStatusLiteral = Literal["active", "completed", "terminated"]


class ApplyRequest(BaseModel):
    """Schema for applying to a job posting."""

    job_posting_id: int = Field(..., ge=1)
    notes: Optional[str] = Field(None, max_length=2000)


class ApplicationStatusUpdate(BaseModel):
    """Team decision on an application."""

    status: TeamDecisionLiteral
    notes: Optional[str] = Field(None, max_length=2000)


class MatchStatusUpdate(BaseModel):
    """Status change on a match, by the talent or the team."""

    status: MatchStatusLiteral
