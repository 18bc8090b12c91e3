"""Application rows and their lifecycle status."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from internmatch.snapshots.models import ApplicationMatchSnapshot
from internmatch.utils import ensure_utc


class ApplicationStatus(str, Enum):
    """Review status of an application. Changing it never touches the snapshot."""

    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ApplicationRecord(BaseModel):
    """A student's application to one internship, with its frozen match snapshot."""

    id: str = Field(..., description="Application id")
    student_id: str = Field(..., description="Applicant id")
    internship_id: str = Field(..., description="Internship id")
    status: ApplicationStatus = Field(default=ApplicationStatus.SUBMITTED)
    created_at: datetime = Field(..., description="When the application was submitted (UTC)")
    snapshot: ApplicationMatchSnapshot

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @property
    def match_score(self) -> float:
        return self.snapshot.score
