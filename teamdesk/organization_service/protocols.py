"""
Organization Service Protocols - DI Interfaces
"""
from typing import List, Optional, Protocol, runtime_checkable

from .models import ActivityEntry, Organization, OrganizationMember


@runtime_checkable
class OrganizationRepositoryProtocol(Protocol):
    """Repository interface for organization documents"""

    async def create_organization(
        self, organization: Organization
    ) -> Organization:
        """Persist a new organization under a generated id"""
        ...

    async def get_organization(
        self, organization_id: str
    ) -> Optional[Organization]:
        """Get organization by ID"""
        ...

    async def update_roster(
        self,
        organization_id: str,
        members: Optional[List[OrganizationMember]] = None,
        pending_invites: Optional[List[str]] = None,
    ) -> None:
        """Overwrite the member list and/or pending invite set"""
        ...

    async def find_organizations_with_pending_invite(
        self, email: str
    ) -> List[Organization]:
        """Organizations whose pending invites contain the email"""
        ...

    async def add_activity(
        self, organization_id: str, entry: ActivityEntry
    ) -> str:
        """Append to the organization's activity log"""
        ...

    async def list_activities(
        self, organization_id: str
    ) -> List[ActivityEntry]:
        """Read the organization's activity log"""
        ...


__all__ = ["OrganizationRepositoryProtocol"]
