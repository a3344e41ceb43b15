"""
Invitation Service

Invitation records keyed by id, queryable by email and status.
"""

from .invitation_repository import InvitationRepository
from .models import Invitation, InvitationStatus

__all__ = ["Invitation", "InvitationRepository", "InvitationStatus"]
