"""Correction data models"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from enum import Enum
from typing import Optional


class CorrectionStatus(str, Enum):
    """Moderation status of a crowd-sourced correction"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CorrectionSummary(BaseModel):
    """Correction fields embedded in a post"""
    id: str
    status: CorrectionStatus
    is_selected: bool = False
    tokens_awarded: int = 0
    created_at: Optional[datetime] = None


class Correction(CorrectionSummary):
    """Complete correction record"""
    post_id: str
    post_title: Optional[str] = None
    user_id: Optional[str] = None
    content: str
    moderator_id: Optional[str] = None
    moderator_note: Optional[str] = None
    updated_at: Optional[datetime] = None


class CorrectionCreate(BaseModel):
    """Body for submitting a correction"""
    content: str = Field(..., min_length=1, max_length=10000)


class CorrectionStatusUpdate(BaseModel):
    """Moderator decision on a pending correction"""
    status: CorrectionStatus
    moderator_note: Optional[str] = None
    tokens_awarded: int = Field(0, ge=0)
    is_selected: bool = False

    @field_validator("status")
    @classmethod
    def decision_only(cls, v: CorrectionStatus) -> CorrectionStatus:
        if v == CorrectionStatus.PENDING:
            raise ValueError("status must be approved or rejected")
        return v

