"""
Membership Service Factory

Wires the document store, repositories, auth provider, session store,
membership service and invitation prompt together. This is the only module
that imports concrete implementations.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.clock import ClockProtocol, SystemClock
from ..core.config import MembershipConfig, TeamdeskConfig, get_settings
from ..core.document_store import DocumentStoreProtocol, create_document_store
from ..core.events import EventBusProtocol
from ..invitation_service.invitation_repository import InvitationRepository
from ..notification_service.invitation_prompt import InvitationPrompt
from ..notification_service.protocols import AlertChannelProtocol
from ..organization_service.organization_repository import OrganizationRepository
from ..session_service.local_auth_provider import LocalAuthProvider
from ..session_service.principal_repository import PrincipalRepository
from ..session_service.protocols import AuthProviderProtocol
from ..session_service.session_store import SessionStore
from .membership_service import MembershipService
from .protocols import SessionProtocol

logger = logging.getLogger(__name__)


@dataclass
class MembershipStack:
    """Everything a UI layer needs, fully wired"""
    store: DocumentStoreProtocol
    auth_provider: AuthProviderProtocol
    session: SessionStore
    membership_service: MembershipService
    invitation_prompt: InvitationPrompt

    async def initialize(self) -> None:
        """Prepare the backing store; call once before the first sign-in"""
        initialize = getattr(self.store, "initialize", None)
        if initialize is not None:
            await initialize()
        logger.info("Membership stack initialized")

    async def close(self) -> None:
        self.session.close()
        close = getattr(self.store, "close", None)
        if close is not None:
            await close()


def create_membership_service(
    store: DocumentStoreProtocol,
    clock: Optional[ClockProtocol] = None,
    event_bus: Optional[EventBusProtocol] = None,
    session: Optional[SessionProtocol] = None,
    config: Optional[MembershipConfig] = None,
) -> MembershipService:
    """
    Create MembershipService over a document store

    Args:
        store: Backing document store
        clock: Timestamp source (default: system clock)
        event_bus: Optional event bus for event publishing
        session: Optional session refreshed after mutations
        config: Membership switches

    Returns:
        MembershipService instance
    """
    return MembershipService(
        organization_repository=OrganizationRepository(store),
        invitation_repository=InvitationRepository(store),
        principal_repository=PrincipalRepository(store),
        clock=clock,
        event_bus=event_bus,
        session=session,
        config=config,
    )


def create_membership_stack(
    alert_channel: AlertChannelProtocol,
    config: Optional[TeamdeskConfig] = None,
    store: Optional[DocumentStoreProtocol] = None,
    auth_provider: Optional[AuthProviderProtocol] = None,
    clock: Optional[ClockProtocol] = None,
    event_bus: Optional[EventBusProtocol] = None,
) -> MembershipStack:
    """
    Create the session store, membership service and invitation prompt

    The prompt is registered as a sign-in listener so pending invitations are
    offered right after sign-in and sign-up.
    """
    config = config or get_settings()
    clock = clock or SystemClock()
    store = store or create_document_store(config.store)
    auth_provider = auth_provider or LocalAuthProvider(store, config.auth)

    session = SessionStore(
        auth_provider=auth_provider,
        principal_repository=PrincipalRepository(store),
        organization_repository=OrganizationRepository(store),
        clock=clock,
    )
    membership_service = create_membership_service(
        store,
        clock=clock,
        event_bus=event_bus,
        session=session,
        config=config.membership,
    )
    invitation_prompt = InvitationPrompt(
        membership_service, alert_channel, config=config.membership
    )
    session.add_sign_in_listener(invitation_prompt.handle_sign_in)

    logger.info("Membership stack created")
    return MembershipStack(
        store=store,
        auth_provider=auth_provider,
        session=session,
        membership_service=membership_service,
        invitation_prompt=invitation_prompt,
    )


__all__ = ["MembershipStack", "create_membership_service", "create_membership_stack"]
