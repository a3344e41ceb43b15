"""
Invitation Prompt

Offers pending invitations to a principal right after sign-in or sign-up and
relays the choice to MembershipService. The prompt never writes to a
repository itself.
"""

import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from ..core.config import MembershipConfig
from ..core.errors import NotFoundError, ValidationError
from ..invitation_service.models import Invitation
from ..membership_service.membership_service import MembershipService
from ..session_service.models import Principal, SignInContext
from .protocols import AlertChannelProtocol

logger = logging.getLogger(__name__)

INVITATION_TITLE = "Team Invitation"
ACCESS_KEY_REJECTED = "Invalid access key or invitation not found"


class InvitationChoice(str, Enum):
    ACCEPTED = "accepted"
    DECLINED = "declined"


class InvitationDecision(BaseModel):
    """Outcome of one offered invitation"""
    invitation_id: Optional[str] = None
    organization_id: str
    organization_name: str
    choice: InvitationChoice


class InvitationPrompt:
    """Sign-in listener that surfaces pending invitations"""

    def __init__(
        self,
        membership_service: MembershipService,
        alert_channel: AlertChannelProtocol,
        config: Optional[MembershipConfig] = None,
    ):
        self.membership_service = membership_service
        self.alert_channel = alert_channel
        self.config = config or MembershipConfig()

    async def handle_sign_in(
        self, principal: Principal, context: SignInContext
    ) -> List[InvitationDecision]:
        """Resolve invitations for a freshly authenticated principal"""
        if principal.is_affiliated:
            return []

        if context.access_key:
            try:
                organization = await self.membership_service.accept_invitation_with_access_key(
                    context.access_key, principal
                )
            except (NotFoundError, ValidationError) as e:
                logger.warning(f"Access key rejected for {principal.user_id}: {e}")
                await self.alert_channel.notify("Error", ACCESS_KEY_REJECTED)
            else:
                await self.alert_channel.notify(
                    "Welcome", f"You've been added to \"{organization.name}\"."
                )
                return [InvitationDecision(
                    organization_id=organization.organization_id,
                    organization_name=organization.name,
                    choice=InvitationChoice.ACCEPTED,
                )]

        invitations = await self.membership_service.resolve_pending_invitations_for_email(principal.email)
        if not invitations:
            return []
        if not self.config.offer_all_pending_invitations:
            invitations = invitations[:1]

        decisions = []
        for invitation in invitations:
            decision = await self.offer(invitation, principal)
            decisions.append(decision)
            if decision.choice == InvitationChoice.ACCEPTED:
                break
        return decisions

    async def offer(self, invitation: Invitation, principal: Principal) -> InvitationDecision:
        """Ask the user about one invitation and forward the answer"""
        organization_name = invitation.organization_name or "an organization"
        accepted = await self.alert_channel.confirm(
            INVITATION_TITLE,
            f"You've been invited to join \"{organization_name}\" as a team member. "
            f"Would you like to accept?",
            accept_label="Accept",
            decline_label="Decline",
        )

        if accepted:
            await self.membership_service.accept_invitation(invitation.invitation_id, principal)
            await self.alert_channel.notify(
                "Success", f"You've successfully joined \"{organization_name}\" as a team member."
            )
            choice = InvitationChoice.ACCEPTED
        else:
            await self.membership_service.decline_invitation(invitation.invitation_id, principal.email)
            choice = InvitationChoice.DECLINED

        logger.info(f"Invitation {invitation.invitation_id} {choice.value} by {principal.user_id}")
        return InvitationDecision(
            invitation_id=invitation.invitation_id,
            organization_id=invitation.organization_id,
            organization_name=organization_name,
            choice=choice,
        )
