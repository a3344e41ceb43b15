"""
Invitation Repository

Invitation data access layer over the document store.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..core.document_store import EQUALS, DocumentStoreProtocol, Predicate
from ..core.errors import PersistenceError
from .models import Invitation, InvitationStatus

logger = logging.getLogger(__name__)


class InvitationRepository:
    """Invitation data repository"""

    collection = "invitations"

    def __init__(self, store: DocumentStoreProtocol):
        self.store = store

    # ============ Invitation CRUD Operations ============

    async def create_invitation(self, invitation: Invitation) -> Invitation:
        """Create invitation"""
        try:
            invitation_id = await self.store.create_with_generated_id(
                self.collection, invitation.to_document()
            )
            return invitation.model_copy(update={"invitation_id": invitation_id})
        except Exception as e:
            logger.error(f"Error creating invitation for {invitation.email}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create invitation: {e}") from e

    async def get_invitation(self, invitation_id: str) -> Optional[Invitation]:
        """Get invitation by ID"""
        try:
            data = await self.store.get(self.collection, invitation_id)
            if data is None:
                return None
            return Invitation.from_document(invitation_id, data)
        except Exception as e:
            logger.error(f"Error getting invitation {invitation_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to load invitation: {e}") from e

    async def find_pending_by_email(self, email: str) -> List[Invitation]:
        """Pending invitations for an email, oldest first"""
        return await self._query([
            Predicate("email", EQUALS, email.strip().lower()),
            Predicate("status", EQUALS, InvitationStatus.PENDING.value),
        ])

    async def find_pending_by_access_key(
        self, email: str, access_key: str
    ) -> Optional[Invitation]:
        """Pending invitation for an email carrying the given access key"""
        invitations = await self._query([
            Predicate("email", EQUALS, email.strip().lower()),
            Predicate("access_key", EQUALS, access_key),
            Predicate("status", EQUALS, InvitationStatus.PENDING.value),
        ])
        return invitations[0] if invitations else None

    async def get_organization_invitations(
        self, organization_id: str, pending_only: bool = False
    ) -> List[Invitation]:
        """Invitations issued by an organization, oldest first"""
        predicates = [Predicate("organization_id", EQUALS, organization_id)]
        if pending_only:
            predicates.append(Predicate("status", EQUALS, InvitationStatus.PENDING.value))
        return await self._query(predicates)

    # ============ Status Transitions ============

    async def mark_accepted(self, invitation_id: str, accepted_at: datetime) -> None:
        await self._update(invitation_id, {
            "status": InvitationStatus.ACCEPTED.value,
            "accepted_at": accepted_at.isoformat(),
        })

    async def mark_declined(self, invitation_id: str, declined_at: datetime) -> None:
        await self._update(invitation_id, {
            "status": InvitationStatus.DECLINED.value,
            "declined_at": declined_at.isoformat(),
        })

    # ============ Helpers ============

    async def _query(self, predicates: List[Predicate]) -> List[Invitation]:
        try:
            documents = await self.store.query(self.collection, predicates)
            invitations = [Invitation.from_document(doc.doc_id, doc.data) for doc in documents]
            return sorted(invitations, key=lambda invitation: invitation.created_at)
        except Exception as e:
            logger.error(f"Error querying invitations: {e}", exc_info=True)
            raise PersistenceError(f"Failed to query invitations: {e}") from e

    async def _update(self, invitation_id: str, update: dict) -> None:
        try:
            await self.store.put(self.collection, invitation_id, update, merge=True)
        except Exception as e:
            logger.error(f"Error updating invitation {invitation_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update invitation: {e}") from e
