"""
Unit Test Fixtures for Membership Service

Real repositories over an in-memory document store, a ticking clock and a
recording event bus.
"""

import pytest
import pytest_asyncio

from teamdesk.core.config import MembershipConfig
from teamdesk.invitation_service.invitation_repository import InvitationRepository
from teamdesk.membership_service.membership_service import MembershipService
from teamdesk.organization_service.organization_repository import OrganizationRepository
from teamdesk.session_service.principal_repository import PrincipalRepository
from tests.fixtures import (
    FlakyDocumentStore,
    RecordingEventBus,
    TickingClock,
    register_principal,
)


@pytest.fixture
def store():
    return FlakyDocumentStore()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def event_bus():
    return RecordingEventBus()


@pytest.fixture
def organization_repository(store):
    return OrganizationRepository(store)


@pytest.fixture
def invitation_repository(store):
    return InvitationRepository(store)


@pytest.fixture
def principal_repository(store):
    return PrincipalRepository(store)


@pytest.fixture
def membership_config():
    return MembershipConfig()


@pytest.fixture
def membership_service(
    organization_repository, invitation_repository, principal_repository,
    clock, event_bus, membership_config,
):
    """Create MembershipService over the in-memory store"""
    return MembershipService(
        organization_repository=organization_repository,
        invitation_repository=invitation_repository,
        principal_repository=principal_repository,
        clock=clock,
        event_bus=event_bus,
        config=membership_config,
    )


# ====================
# Seeded principals and organizations
# ====================


@pytest_asyncio.fixture
async def admin(principal_repository):
    """Founder of the seeded organization"""
    return await register_principal(principal_repository, "admin@acme.test")


@pytest_asyncio.fixture
async def outsider(principal_repository):
    """Unaffiliated principal with no invitations"""
    return await register_principal(principal_repository, "outsider@example.com")


@pytest_asyncio.fixture
async def organization_id(membership_service, admin):
    return await membership_service.create_organization("Acme", admin)


@pytest_asyncio.fixture
async def invitee(principal_repository):
    """Registered principal that gets invited to the seeded organization"""
    return await register_principal(principal_repository, "bob@example.com")


@pytest_asyncio.fixture
async def invitation(membership_service, organization_id, admin, invitee):
    return await membership_service.invite_member(invitee.email, organization_id, admin)


@pytest_asyncio.fixture
async def member(membership_service, invitation, invitee, principal_repository):
    """Invitee after accepting, as stored"""
    await membership_service.accept_invitation(invitation.invitation_id, invitee)
    return await principal_repository.get_principal(invitee.user_id)
