"""
Organization Service Models

Organization documents embed their member list and the set of pending
invitation emails.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.validation import emails_match


class MemberRole(str, Enum):
    """Organization member role"""
    ADMIN = "admin"
    MEMBER = "member"


class OrganizationMember(BaseModel):
    """Member record embedded in an organization"""
    uid: str = Field(..., description="Principal ID")
    email: str
    role: MemberRole = MemberRole.MEMBER
    # Client clock, serialized as an ISO string inside the member array
    joined_at: datetime


class Organization(BaseModel):
    """Organization entity model"""
    organization_id: str = ""
    name: str = Field(..., min_length=1)
    created_by: str
    members: List[OrganizationMember] = Field(default_factory=list)
    pending_invites: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @field_validator('pending_invites')
    def normalize_pending_invites(cls, v):
        normalized = []
        for email in v:
            email = email.strip().lower()
            if email not in normalized:
                normalized.append(email)
        return normalized

    def find_member(self, uid: str) -> Optional[OrganizationMember]:
        for member in self.members:
            if member.uid == uid:
                return member
        return None

    def find_member_by_email(self, email: str) -> Optional[OrganizationMember]:
        for member in self.members:
            if emails_match(member.email, email):
                return member
        return None

    def admins(self) -> List[OrganizationMember]:
        return [m for m in self.members if m.role == MemberRole.ADMIN]

    def has_pending_invite(self, email: str) -> bool:
        return any(emails_match(pending, email) for pending in self.pending_invites)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"organization_id"})

    @classmethod
    def from_document(cls, organization_id: str, data: Dict[str, Any]) -> "Organization":
        return cls(organization_id=organization_id, **data)


class ActivityEntry(BaseModel):
    """Entry in an organization's activity log"""
    activity_id: Optional[str] = None
    user_id: Optional[str] = None
    user_email: str
    action: str
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
