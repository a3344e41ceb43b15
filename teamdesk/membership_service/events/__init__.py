"""
Membership Events Package

Event payload models and publish functions.
"""

from .models import (
    InvitationAcceptedEvent,
    InvitationDeclinedEvent,
    InvitationSentEvent,
    MemberRemovedEvent,
    MemberRoleChangedEvent,
    OrganizationCreatedEvent,
)
from .publishers import (
    publish_invitation_accepted,
    publish_invitation_declined,
    publish_invitation_sent,
    publish_member_removed,
    publish_member_role_changed,
    publish_organization_created,
)

__all__ = [
    # Event Models
    "OrganizationCreatedEvent",
    "InvitationSentEvent",
    "InvitationAcceptedEvent",
    "InvitationDeclinedEvent",
    "MemberRoleChangedEvent",
    "MemberRemovedEvent",
    # Publishers
    "publish_organization_created",
    "publish_invitation_sent",
    "publish_invitation_accepted",
    "publish_invitation_declined",
    "publish_member_role_changed",
    "publish_member_removed",
]
