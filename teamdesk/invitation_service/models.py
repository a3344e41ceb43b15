"""
Invitation Service Models

An invitation moves exactly once from pending to accepted or declined;
resolved invitations are immutable.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class InvitationStatus(str, Enum):
    """Invitation status"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Invitation(BaseModel):
    """Invitation entity model"""
    invitation_id: str = ""
    email: str = Field(..., description="Recipient email, normalized")
    organization_id: str
    # Snapshot taken at invite time for display
    organization_name: str = ""
    invited_by: str
    invited_by_email: Optional[str] = None
    access_key: Optional[str] = None
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime
    accepted_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None

    @field_validator('email')
    def normalize_email(cls, v):
        return v.strip().lower()

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"invitation_id"})

    @classmethod
    def from_document(cls, invitation_id: str, data: Dict[str, Any]) -> "Invitation":
        return cls(invitation_id=invitation_id, **data)
