"""
Membership Event Models

Payloads carried by membership domain events.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class OrganizationCreatedEvent(BaseModel):
    """Organization created"""

    organization_id: str = Field(..., description="Organization ID")
    organization_name: str
    created_by: str = Field(..., description="Founding admin user ID")
    timestamp: str
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)


class InvitationSentEvent(BaseModel):
    """Invitation created"""

    invitation_id: str
    organization_id: str
    email: str = Field(..., description="Invitee email")
    invited_by: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)


class InvitationAcceptedEvent(BaseModel):
    """Invitation accepted"""

    invitation_id: str
    organization_id: str
    user_id: str = Field(..., description="User who accepted")
    email: str
    role: str
    accepted_at: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)


class InvitationDeclinedEvent(BaseModel):
    """Invitation declined"""

    invitation_id: str
    organization_id: str
    email: str
    declined_at: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)


class MemberRoleChangedEvent(BaseModel):
    """Member role changed"""

    organization_id: str
    user_id: str
    old_role: str
    new_role: str
    changed_by: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)


class MemberRemovedEvent(BaseModel):
    """Member removed"""

    organization_id: str
    user_id: str
    removed_by: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)
