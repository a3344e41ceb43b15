"""
Membership Service

Organization membership and invitation workflow.
"""

from .membership_service import MembershipService
from .protocols import (
    AlreadyMemberError,
    DuplicateInviteError,
    InvitationNotPendingError,
    LastAdminError,
    MembershipServiceError,
    PermissionDeniedError,
)

__all__ = [
    "MembershipService",
    "MembershipServiceError",
    "AlreadyMemberError",
    "DuplicateInviteError",
    "InvitationNotPendingError",
    "LastAdminError",
    "PermissionDeniedError",
]
