"""Application-time match snapshot."""

from datetime import datetime
from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field, field_validator

from internmatch.utils import ensure_utc


class ApplicationMatchSnapshot(BaseModel):
    """Score frozen onto an application when it is submitted.

    A snapshot is never recomputed in place: changing the scoring model
    only affects snapshots built afterwards, under a new matching_version.
    """

    student_id: str = Field(..., description="Applicant id")
    internship_id: str = Field(..., description="Internship applied to")
    score: float = Field(..., ge=0, description="Points out of the model's max score (3 dp)")
    normalized_score: float = Field(..., ge=0, le=1, description="score / max_score (3 dp)")
    reasons: Tuple[str, ...] = Field(default_factory=tuple, description="Reason texts, strongest first")
    gaps: Tuple[str, ...] = Field(default_factory=tuple, description="Gap texts, heaviest first")
    matching_version: str = Field(..., description="Scoring model version used")
    computed_at: datetime = Field(..., description="When the snapshot was computed (UTC)")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "student_id": "stu-finance-01",
                "internship_id": "int-pe-summer",
                "score": 72.5,
                "normalized_score": 0.725,
                "reasons": ["Required skills: Excel, Financial Modeling (+20.0)"],
                "gaps": ["Missing recommended coursework: Accounting"],
                "matching_version": "2.0.0",
                "computed_at": "2026-03-01T09:30:00Z",
            }
        },
    }

    @field_validator("computed_at")
    @classmethod
    def normalize_computed_at(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    def to_columns(self) -> Dict[str, Any]:
        """Column values as stored on the application row."""
        return {
            "match_score": self.score,
            "match_normalized_score": self.normalized_score,
            "match_reasons": list(self.reasons),
            "match_gaps": list(self.gaps),
            "matching_version": self.matching_version,
        }
