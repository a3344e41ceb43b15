"""
Invitation Service Protocols - DI Interfaces
"""
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from .models import Invitation


@runtime_checkable
class InvitationRepositoryProtocol(Protocol):
    """Repository interface for invitation data access"""

    async def create_invitation(self, invitation: Invitation) -> Invitation:
        """Persist a new pending invitation under a generated id"""
        ...

    async def get_invitation(self, invitation_id: str) -> Optional[Invitation]:
        """Get invitation by ID"""
        ...

    async def find_pending_by_email(self, email: str) -> List[Invitation]:
        """Pending invitations for an email, oldest first"""
        ...

    async def find_pending_by_access_key(
        self, email: str, access_key: str
    ) -> Optional[Invitation]:
        """Pending invitation matching email and access key"""
        ...

    async def get_organization_invitations(
        self, organization_id: str, pending_only: bool = False
    ) -> List[Invitation]:
        """Invitations issued by an organization"""
        ...

    async def mark_accepted(self, invitation_id: str, accepted_at: datetime) -> None:
        """Resolve invitation as accepted"""
        ...

    async def mark_declined(self, invitation_id: str, declined_at: datetime) -> None:
        """Resolve invitation as declined"""
        ...


__all__ = ["InvitationRepositoryProtocol"]
