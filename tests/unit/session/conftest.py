"""
Unit Test Fixtures for Session Service
"""

import pytest

from teamdesk.core.config import AuthConfig
from teamdesk.core.document_store import InMemoryDocumentStore
from teamdesk.organization_service.organization_repository import OrganizationRepository
from teamdesk.session_service.local_auth_provider import LocalAuthProvider
from teamdesk.session_service.principal_repository import PrincipalRepository
from teamdesk.session_service.session_store import SessionStore
from tests.fixtures import TickingClock


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def auth_config():
    # Minimum bcrypt work factor keeps hashing fast
    return AuthConfig(bcrypt_rounds=4, min_password_length=6)


@pytest.fixture
def auth_provider(store, auth_config):
    return LocalAuthProvider(store, auth_config)


@pytest.fixture
def principal_repository(store):
    return PrincipalRepository(store)


@pytest.fixture
def organization_repository(store):
    return OrganizationRepository(store)


@pytest.fixture
def session(auth_provider, principal_repository, organization_repository):
    session = SessionStore(
        auth_provider=auth_provider,
        principal_repository=principal_repository,
        organization_repository=organization_repository,
        clock=TickingClock(),
    )
    yield session
    session.close()
