"""
Organization Repository

Organization data access layer over the document store.
"""

import logging
from typing import List, Optional

from ..core.document_store import ARRAY_CONTAINS, DocumentStoreProtocol, Predicate
from ..core.errors import PersistenceError
from .models import ActivityEntry, Organization, OrganizationMember

logger = logging.getLogger(__name__)


class OrganizationRepository:
    """Organization data repository"""

    collection = "organizations"

    def __init__(self, store: DocumentStoreProtocol):
        self.store = store

    def _activities_collection(self, organization_id: str) -> str:
        return f"{self.collection}/{organization_id}/activities"

    # ============ Organization CRUD Operations ============

    async def create_organization(self, organization: Organization) -> Organization:
        """Persist a new organization; the store assigns the id"""
        try:
            organization_id = await self.store.create_with_generated_id(
                self.collection, organization.to_document()
            )
            return organization.model_copy(update={"organization_id": organization_id})
        except Exception as e:
            logger.error(f"Error creating organization {organization.name!r}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create organization: {e}") from e

    async def get_organization(self, organization_id: str) -> Optional[Organization]:
        """Get organization by ID"""
        try:
            data = await self.store.get(self.collection, organization_id)
            if data is None:
                return None
            return Organization.from_document(organization_id, data)
        except Exception as e:
            logger.error(f"Error getting organization {organization_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to load organization: {e}") from e

    async def update_roster(
        self,
        organization_id: str,
        members: Optional[List[OrganizationMember]] = None,
        pending_invites: Optional[List[str]] = None,
    ) -> None:
        """Overwrite the member list and/or pending invites with a merge write"""
        update = {}
        if members is not None:
            update["members"] = [m.model_dump(mode="json") for m in members]
        if pending_invites is not None:
            update["pending_invites"] = list(pending_invites)
        if not update:
            return

        try:
            await self.store.put(self.collection, organization_id, update, merge=True)
        except Exception as e:
            logger.error(f"Error updating roster of organization {organization_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update organization: {e}") from e

    async def find_organizations_with_pending_invite(self, email: str) -> List[Organization]:
        """Organizations listing the (normalized) email among pending invites"""
        try:
            documents = await self.store.query(
                self.collection,
                [Predicate("pending_invites", ARRAY_CONTAINS, email.strip().lower())],
            )
            return [Organization.from_document(doc.doc_id, doc.data) for doc in documents]
        except Exception as e:
            logger.error(f"Error querying organizations by pending invite: {e}", exc_info=True)
            raise PersistenceError(f"Failed to query organizations: {e}") from e

    # ============ Activity Log ============

    async def add_activity(self, organization_id: str, entry: ActivityEntry) -> str:
        """Append an activity entry and return its id"""
        try:
            return await self.store.create_with_generated_id(
                self._activities_collection(organization_id),
                entry.model_dump(mode="json", exclude={"activity_id"}),
            )
        except Exception as e:
            logger.error(f"Error logging activity for organization {organization_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to log activity: {e}") from e

    async def list_activities(self, organization_id: str) -> List[ActivityEntry]:
        """Activity log of an organization, oldest first"""
        try:
            documents = await self.store.query(self._activities_collection(organization_id), [])
            entries = [ActivityEntry(activity_id=doc.doc_id, **doc.data) for doc in documents]
            return sorted(entries, key=lambda entry: entry.timestamp)
        except Exception as e:
            logger.error(f"Error listing activities for organization {organization_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list activities: {e}") from e
