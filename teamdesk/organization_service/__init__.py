"""
Organization Service

Organization documents: members, pending invites and the activity log.
"""

from .models import ActivityEntry, MemberRole, Organization, OrganizationMember
from .organization_repository import OrganizationRepository

__all__ = [
    "ActivityEntry",
    "MemberRole",
    "Organization",
    "OrganizationMember",
    "OrganizationRepository",
]
