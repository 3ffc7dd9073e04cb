"""
Filing Models.

Stored refund returns and the read-only status snapshot the explanation
stream consumes.
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class FilingStatus(str, Enum):
    """Processing stages of a refund filing."""

    FILED = "FILED"
    ACCEPTED = "ACCEPTED"
    APPROVED = "APPROVED"
    SENT = "SENT"
    REVIEW = "REVIEW"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class FilingStatusSnapshot:
    """
    Point-in-time read of a filing's status.

    Built once per request and never mutated afterwards.
    """

    status: FilingStatus
    confidence: float
    estimated_date: Optional[date] = None
    history_length: int = 0


class RefundHistory(BaseModel):
    """Single status transition of a return."""

    stage: FilingStatus
    timestamp: datetime


class RefundReturn(BaseModel):
    """Refund return as stored in the `returns` collection."""

    return_id: str
    filing_id: str = ""
    status: FilingStatus
    eta_date: Optional[datetime] = None
    confidence: float = Field(ge=0.0, le=1.0)
    history: list[RefundHistory] = Field(default_factory=list)
    snap_context: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("created", "created_at"),
    )

    @field_validator("eta_date", "created_at", mode="before")
    @classmethod
    def empty_date_is_none(cls, v: Any) -> Any:
        # Pocketbase returns "" for unset date fields
        if v == "":
            return None
        return v

    @field_validator("history", mode="before")
    @classmethod
    def null_history_is_empty(cls, v: Any) -> Any:
        return v or []

    @field_validator("snap_context", mode="before")
    @classmethod
    def null_context_is_empty(cls, v: Any) -> Any:
        return v or {}

    def to_snapshot(self) -> FilingStatusSnapshot:
        """Reduce the stored row to what an explanation needs."""
        return FilingStatusSnapshot(
            status=self.status,
            confidence=self.confidence,
            estimated_date=self.eta_date.date() if self.eta_date else None,
            history_length=len(self.history),
        )
