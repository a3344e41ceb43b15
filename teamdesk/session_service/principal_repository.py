"""
Principal Repository

User profile documents, keyed by the auth provider's user id.
"""

import logging
from datetime import datetime
from typing import Optional

from ..core.document_store import DocumentStoreProtocol
from ..core.errors import PersistenceError, ValidationError
from ..organization_service.models import MemberRole
from .models import Principal

logger = logging.getLogger(__name__)


class PrincipalRepository:
    """Principal profile repository"""

    collection = "users"

    def __init__(self, store: DocumentStoreProtocol):
        self.store = store

    async def get_principal(self, user_id: str) -> Optional[Principal]:
        """Get principal by ID"""
        try:
            data = await self.store.get(self.collection, user_id)
            if data is None:
                return None
            return Principal.from_document(user_id, data)
        except Exception as e:
            logger.error(f"Error getting principal {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to load user profile: {e}") from e

    async def create_principal(self, principal: Principal) -> Principal:
        """Create profile document"""
        try:
            await self.store.put(self.collection, principal.user_id, principal.to_document())
            return principal
        except Exception as e:
            logger.error(f"Error creating principal {principal.user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create user profile: {e}") from e

    async def set_affiliation(
        self,
        user_id: str,
        organization_id: Optional[str],
        role: Optional[MemberRole],
        updated_at: datetime,
    ) -> None:
        """Point the principal at an organization, or clear both fields"""
        if (organization_id is None) != (role is None):
            raise ValidationError("organization_id and role must be set or cleared together")

        try:
            await self.store.put(self.collection, user_id, {
                "organization_id": organization_id,
                "role": role.value if role is not None else None,
                "updated_at": updated_at.isoformat(),
            }, merge=True)
        except Exception as e:
            logger.error(f"Error updating affiliation of principal {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update user profile: {e}") from e
