"""
Membership Service Business Logic

Organization creation, invitations, role changes and member removal.

The backing store offers no multi-document transactions, so every operation
is an ordered sequence of independent writes. Organization documents are
written before principal profiles: an organization member entry without a
matching principal pointer can be detected and re-driven, the reverse
cannot. All role checks live here, read from the organization's member list
rather than from the caller-supplied principal.
"""

import logging
import secrets
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from ..core.clock import ClockProtocol, SystemClock
from ..core.config import MembershipConfig
from ..core.errors import NotFoundError, TeamdeskError, ValidationError
from ..core.validation import emails_match, normalize_email
from ..invitation_service.models import Invitation
from ..organization_service.models import (
    ActivityEntry,
    MemberRole,
    Organization,
    OrganizationMember,
)
from ..session_service.models import Principal
from .events import (
    publish_invitation_accepted,
    publish_invitation_declined,
    publish_invitation_sent,
    publish_member_removed,
    publish_member_role_changed,
    publish_organization_created,
)
from .protocols import (
    AlreadyMemberError,
    DuplicateInviteError,
    EventBusProtocol,
    InvitationNotPendingError,
    InvitationRepositoryProtocol,
    LastAdminError,
    OrganizationRepositoryProtocol,
    PermissionDeniedError,
    PrincipalRepositoryProtocol,
    SessionProtocol,
)

logger = logging.getLogger(__name__)


class MembershipService:
    """Organization membership and invitation state machine"""

    def __init__(
        self,
        organization_repository: OrganizationRepositoryProtocol,
        invitation_repository: InvitationRepositoryProtocol,
        principal_repository: PrincipalRepositoryProtocol,
        clock: Optional[ClockProtocol] = None,
        event_bus: Optional[EventBusProtocol] = None,
        session: Optional[SessionProtocol] = None,
        config: Optional[MembershipConfig] = None,
    ):
        """
        Initialize membership service with injected dependencies

        Args:
            organization_repository: Organization documents
            invitation_repository: Invitation records
            principal_repository: Principal profiles
            clock: Timestamp source (default: system UTC clock)
            event_bus: Optional event bus for publishing events
            session: Optional session kept in sync after mutations
            config: Membership switches
        """
        self.organization_repository = organization_repository
        self.invitation_repository = invitation_repository
        self.principal_repository = principal_repository
        self.clock = clock or SystemClock()
        self.event_bus = event_bus
        self.session = session
        self.config = config or MembershipConfig()

    # ====================
    # Organizations
    # ====================

    async def create_organization(self, name: str, principal: Principal) -> str:
        """Create an organization with the principal as its sole admin"""
        self._require_principal(principal)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Organization name is required")

        stored = await self.principal_repository.get_principal(principal.user_id)
        if stored is not None and stored.is_affiliated:
            raise AlreadyMemberError(
                f"User {principal.user_id} already belongs to organization {stored.organization_id}"
            )

        now = self.clock.now()
        founder = OrganizationMember(
            uid=principal.user_id,
            email=principal.email.strip().lower(),
            role=MemberRole.ADMIN,
            joined_at=now,
        )
        organization = await self.organization_repository.create_organization(Organization(
            name=name,
            created_by=principal.user_id,
            members=[founder],
            pending_invites=[],
            created_at=now,
        ))

        # Principal is only pointed at the organization once it exists
        await self.principal_repository.set_affiliation(
            principal.user_id, organization.organization_id, MemberRole.ADMIN, now
        )
        logger.info(f"Organization created: {organization.organization_id} by user {principal.user_id}")

        await self._log_activity(organization.organization_id, principal, "create_organization", {
            "organization_id": organization.organization_id,
            "organization_name": name,
        })
        await publish_organization_created(
            self.event_bus, organization.organization_id, name, principal.user_id
        )
        await self._sync_session(organization.organization_id, principal.user_id)
        return organization.organization_id

    # ====================
    # Invitations
    # ====================

    async def invite_member(
        self,
        email: str,
        organization_id: str,
        acting_principal: Principal,
    ) -> Invitation:
        """Invite an email address to join the organization"""
        self._require_principal(acting_principal)
        normalized = normalize_email(email)

        organization = await self._load_organization(organization_id)
        inviter = self._require_admin(organization, acting_principal)

        if organization.find_member_by_email(normalized):
            raise AlreadyMemberError(f"{normalized} is already a member of this organization")
        if organization.has_pending_invite(normalized):
            raise DuplicateInviteError(f"{normalized} already has a pending invitation")

        # An email may be pending in at most one organization
        elsewhere = await self.organization_repository.find_organizations_with_pending_invite(normalized)
        pending = await self.invitation_repository.find_pending_by_email(normalized)
        if elsewhere or pending:
            raise DuplicateInviteError(f"{normalized} already has a pending invitation")

        now = self.clock.now()
        invitation = await self.invitation_repository.create_invitation(Invitation(
            email=normalized,
            organization_id=organization_id,
            organization_name=organization.name,
            invited_by=acting_principal.user_id,
            invited_by_email=inviter.email,
            access_key=self._generate_access_key(organization_id, now),
            created_at=now,
        ))
        await self.organization_repository.update_roster(
            organization_id,
            pending_invites=organization.pending_invites + [normalized],
        )
        logger.info(f"Invitation created: {invitation.invitation_id} for {normalized} to {organization_id}")

        await self._log_activity(organization_id, acting_principal, "invite_member", {
            "email": normalized,
            "invitation_id": invitation.invitation_id,
        })
        await publish_invitation_sent(
            self.event_bus, invitation.invitation_id, organization_id, normalized, acting_principal.user_id
        )
        await self._sync_session(organization_id)
        return invitation

    async def resolve_pending_invitations_for_email(self, email: str) -> List[Invitation]:
        """Pending invitations addressed to the email, oldest first"""
        return await self.invitation_repository.find_pending_by_email(normalize_email(email))

    async def accept_invitation(self, invitation_id: str, principal: Principal) -> Organization:
        """Join the inviting organization as a member"""
        self._require_principal(principal)
        invitation = await self._load_invitation(invitation_id)
        if not invitation.is_pending:
            raise InvitationNotPendingError(
                f"Invitation {invitation_id} is {invitation.status.value}", status=invitation.status.value
            )
        if not emails_match(principal.email, invitation.email):
            raise PermissionDeniedError("This invitation was sent to a different email address")

        return await self._accept(invitation, principal)

    async def accept_invitation_with_access_key(
        self, access_key: str, principal: Principal
    ) -> Organization:
        """Accept the pending invitation carrying the access key handed out at invite time"""
        self._require_principal(principal)
        access_key = (access_key or "").strip()
        if not access_key:
            raise ValidationError("Access key is required")

        invitation = await self.invitation_repository.find_pending_by_access_key(
            principal.email.strip().lower(), access_key
        )
        if invitation is None:
            raise NotFoundError("Invalid access key or invitation not found")

        return await self._accept(invitation, principal)

    async def decline_invitation(self, invitation_id: str, email: str) -> None:
        """Decline an invitation and drop the email from every pending list"""
        normalized = normalize_email(email)
        invitation = await self._load_invitation(invitation_id)
        if not emails_match(invitation.email, normalized):
            raise PermissionDeniedError("This invitation was sent to a different email address")
        if not invitation.is_pending:
            raise InvitationNotPendingError(
                f"Invitation {invitation_id} is {invitation.status.value}", status=invitation.status.value
            )

        # Organizations first: a failure here leaves the invitation pending and retryable
        swept = await self._remove_pending_invite(invitation.organization_id, normalized)
        for organization in await self.organization_repository.find_organizations_with_pending_invite(normalized):
            if organization.organization_id in swept:
                continue
            logger.warning(
                f"Email {normalized} also pending in organization {organization.organization_id}, removing"
            )
            await self.organization_repository.update_roster(
                organization.organization_id,
                pending_invites=self._without_email(organization.pending_invites, normalized),
            )
            swept.add(organization.organization_id)

        now = self.clock.now()
        await self.invitation_repository.mark_declined(invitation_id, now)
        logger.info(f"Invitation declined: {invitation_id} by {normalized}")

        await self._log_activity(invitation.organization_id, None, "decline_invitation", {
            "email": normalized,
            "invitation_id": invitation_id,
        }, user_email=normalized)
        await publish_invitation_declined(
            self.event_bus, invitation_id, invitation.organization_id, normalized, now.isoformat()
        )
        await self._sync_session(*swept)

    async def list_pending_invitations(self, organization_id: str) -> List[Invitation]:
        return await self.invitation_repository.get_organization_invitations(
            organization_id, pending_only=True
        )

    # ====================
    # Members
    # ====================

    async def list_members(self, organization_id: str) -> List[OrganizationMember]:
        organization = await self._load_organization(organization_id)
        return list(organization.members)

    async def list_activities(self, organization_id: str) -> List[ActivityEntry]:
        return await self.organization_repository.list_activities(organization_id)

    async def change_role(
        self,
        target_uid: str,
        new_role: Union[MemberRole, str],
        organization_id: str,
        acting_principal: Principal,
    ) -> None:
        """Change another member's role (admin only)"""
        self._require_principal(acting_principal)
        role = self._parse_role(new_role)
        if acting_principal.user_id == target_uid:
            raise PermissionDeniedError("Admins cannot change their own role")

        organization = await self._load_organization(organization_id)
        self._require_admin(organization, acting_principal)
        target = organization.find_member(target_uid)
        if target is None:
            raise NotFoundError(f"Member {target_uid} not found in organization {organization_id}")
        if target.role == role:
            return

        if target.role == MemberRole.ADMIN and len(organization.admins()) <= 1:
            raise LastAdminError("Cannot demote the last admin. Promote another member to admin first.")

        members = [
            m.model_copy(update={"role": role}) if m.uid == target_uid else m
            for m in organization.members
        ]
        now = self.clock.now()
        await self.organization_repository.update_roster(organization_id, members=members)
        await self.principal_repository.set_affiliation(target_uid, organization_id, role, now)
        logger.info(f"Member {target_uid} in {organization_id} changed from {target.role.value} to {role.value}")

        await self._log_activity(organization_id, acting_principal, "change_role", {
            "target_user": target_uid,
            "old_role": target.role.value,
            "new_role": role.value,
        })
        await publish_member_role_changed(
            self.event_bus, organization_id, target_uid, target.role.value, role.value, acting_principal.user_id
        )
        await self._sync_session(organization_id, target_uid)

    async def remove_member(
        self,
        target_uid: str,
        organization_id: str,
        acting_principal: Principal,
    ) -> None:
        """Remove a member from the organization (admin only)"""
        self._require_principal(acting_principal)
        organization = await self._load_organization(organization_id)
        self._require_admin(organization, acting_principal)

        target = organization.find_member(target_uid)
        if target is None:
            raise NotFoundError(f"Member {target_uid} not found in organization {organization_id}")
        if target.role == MemberRole.ADMIN and len(organization.admins()) <= 1:
            raise LastAdminError("Cannot remove the last admin. Promote another member to admin first.")

        members = [m for m in organization.members if m.uid != target_uid]
        now = self.clock.now()
        await self.organization_repository.update_roster(organization_id, members=members)
        await self.principal_repository.set_affiliation(target_uid, None, None, now)
        logger.info(f"Member {target_uid} removed from organization {organization_id}")

        await self._log_activity(organization_id, acting_principal, "remove_member", {
            "target_user": target_uid,
            "email": target.email,
        })
        await publish_member_removed(self.event_bus, organization_id, target_uid, acting_principal.user_id)
        await self._sync_session(organization_id, target_uid)

    # ====================
    # Helpers
    # ====================

    async def _accept(self, invitation: Invitation, principal: Principal) -> Organization:
        organization = await self._load_organization(invitation.organization_id)
        organization_id = organization.organization_id

        stored = await self.principal_repository.get_principal(principal.user_id)
        if stored is not None and stored.is_affiliated and stored.organization_id != organization_id:
            raise AlreadyMemberError(
                f"User {principal.user_id} already belongs to organization {stored.organization_id}"
            )

        now = self.clock.now()
        members = list(organization.members)
        member = organization.find_member(principal.user_id)
        if member is None:
            member = OrganizationMember(
                uid=principal.user_id,
                email=principal.email.strip().lower(),
                role=MemberRole.MEMBER,
                joined_at=now,
            )
            members.append(member)
        else:
            # Earlier attempt already added the member; finish the remaining writes
            logger.warning(f"Re-driving acceptance of {invitation.invitation_id} for existing member {principal.user_id}")
        pending_invites = self._without_email(organization.pending_invites, invitation.email)

        await self.organization_repository.update_roster(
            organization_id, members=members, pending_invites=pending_invites
        )
        await self.principal_repository.set_affiliation(principal.user_id, organization_id, member.role, now)
        await self.invitation_repository.mark_accepted(invitation.invitation_id, now)
        logger.info(f"Invitation accepted: user_id={principal.user_id}, org_id={organization_id}")

        await self._log_activity(organization_id, principal, "accept_invitation", {
            "invitation_id": invitation.invitation_id,
        })
        await publish_invitation_accepted(
            self.event_bus,
            invitation.invitation_id,
            organization_id,
            principal.user_id,
            invitation.email,
            member.role.value,
            now.isoformat(),
        )
        await self._sync_session(organization_id, principal.user_id)
        return organization.model_copy(update={"members": members, "pending_invites": pending_invites})

    async def _remove_pending_invite(self, organization_id: str, email: str) -> set:
        organization = await self.organization_repository.get_organization(organization_id)
        if organization is None:
            logger.warning(f"Organization {organization_id} referenced by invitation no longer exists")
            return set()
        if organization.has_pending_invite(email):
            await self.organization_repository.update_roster(
                organization_id,
                pending_invites=self._without_email(organization.pending_invites, email),
            )
        return {organization_id}

    async def _load_organization(self, organization_id: str) -> Organization:
        if not organization_id:
            raise ValidationError("Organization ID is required")
        organization = await self.organization_repository.get_organization(organization_id)
        if organization is None:
            raise NotFoundError(f"Organization {organization_id} not found")
        return organization

    async def _load_invitation(self, invitation_id: str) -> Invitation:
        if not invitation_id:
            raise ValidationError("Invitation ID is required")
        invitation = await self.invitation_repository.get_invitation(invitation_id)
        if invitation is None:
            raise NotFoundError(f"Invitation {invitation_id} not found")
        return invitation

    @staticmethod
    def _require_principal(principal: Optional[Principal]) -> None:
        if principal is None:
            raise PermissionDeniedError("Sign in required")

    @staticmethod
    def _require_admin(organization: Organization, principal: Principal) -> OrganizationMember:
        member = organization.find_member(principal.user_id)
        if member is None or member.role != MemberRole.ADMIN:
            raise PermissionDeniedError(
                f"User {principal.user_id} does not have admin access to organization {organization.organization_id}"
            )
        return member

    @staticmethod
    def _parse_role(role: Union[MemberRole, str]) -> MemberRole:
        try:
            return MemberRole(role)
        except ValueError:
            raise ValidationError(f"Unknown role: {role!r}") from None

    @staticmethod
    def _without_email(emails: List[str], email: str) -> List[str]:
        return [e for e in emails if not emails_match(e, email)]

    @staticmethod
    def _generate_access_key(organization_id: str, now: datetime) -> str:
        millis = int(now.timestamp() * 1000)
        return f"{organization_id[:4]}-{millis:x}-{secrets.token_hex(3)}"

    async def _log_activity(
        self,
        organization_id: str,
        actor: Optional[Principal],
        action: str,
        details: Dict[str, Any],
        user_email: Optional[str] = None,
    ) -> None:
        if not self.config.activity_log_enabled:
            return
        entry = ActivityEntry(
            user_id=actor.user_id if actor else None,
            user_email=actor.email if actor else (user_email or ""),
            action=action,
            details=details,
            timestamp=self.clock.now(),
        )
        try:
            await self.organization_repository.add_activity(organization_id, entry)
        except TeamdeskError as e:
            logger.error(f"Error logging activity {action} for organization {organization_id}: {e}")

    async def _sync_session(self, *affected: str) -> None:
        if self.session is None or self.session.principal is None:
            return
        current = self.session.principal
        if current.user_id not in affected and current.organization_id not in affected:
            return
        try:
            await self.session.refresh()
        except TeamdeskError as e:
            logger.error(f"Error refreshing session after membership change: {e}")


__all__ = ["MembershipService"]
