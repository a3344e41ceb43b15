"""
Membership Service Protocols

Defines interfaces for dependency injection and testing, plus the
business-rule exceptions raised by MembershipService.
"""

from typing import Optional, Protocol, runtime_checkable

from ..core.errors import TeamdeskError
from ..core.events import EventBusProtocol
from ..invitation_service.protocols import InvitationRepositoryProtocol
from ..organization_service.protocols import OrganizationRepositoryProtocol
from ..session_service.models import Principal
from ..session_service.protocols import PrincipalRepositoryProtocol


# ====================
# Session Protocol
# ====================


@runtime_checkable
class SessionProtocol(Protocol):
    """Session state the service keeps in sync after mutations"""

    @property
    def principal(self) -> Optional[Principal]:
        ...

    async def refresh(self) -> Optional[Principal]:
        """Reload principal and organization from the repositories"""
        ...


# ====================
# Custom Exceptions
# ====================


class MembershipServiceError(TeamdeskError):
    """Base exception for membership business-rule rejections"""
    pass


class AlreadyMemberError(MembershipServiceError):
    """Raised when the invitee or principal already belongs to an organization"""
    pass


class DuplicateInviteError(MembershipServiceError):
    """Raised when the email already has a pending invite"""
    pass


class LastAdminError(MembershipServiceError):
    """Raised when an operation would leave an organization without an admin"""
    pass


class PermissionDeniedError(MembershipServiceError):
    """Raised when the acting principal may not perform the operation"""
    pass


class InvitationNotPendingError(MembershipServiceError):
    """Raised when accepting or declining an already resolved invitation"""

    def __init__(self, message: str, status: str = ""):
        super().__init__(message)
        self.status = status


__all__ = [
    "EventBusProtocol",
    "InvitationRepositoryProtocol",
    "OrganizationRepositoryProtocol",
    "PrincipalRepositoryProtocol",
    "SessionProtocol",
    "MembershipServiceError",
    "AlreadyMemberError",
    "DuplicateInviteError",
    "LastAdminError",
    "PermissionDeniedError",
    "InvitationNotPendingError",
]
