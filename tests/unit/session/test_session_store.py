"""
Unit Tests for the Session Store

Tests for sign-in/sign-up resolution, teardown and profile self-healing.
"""

from datetime import datetime, timezone

import pytest

from teamdesk.core.errors import AuthError, TeamdeskError, ValidationError
from teamdesk.organization_service.models import MemberRole, Organization, OrganizationMember
from teamdesk.session_service.protocols import (
    EMAIL_ALREADY_IN_USE,
    INVALID_CREDENTIAL,
    TOO_MANY_REQUESTS,
    WEAK_PASSWORD,
    AuthProviderError,
)
from teamdesk.session_service.session_store import DEFAULT_AUTH_ERROR_MESSAGE, map_auth_error

pytestmark = [pytest.mark.unit]

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


async def seed_organization(organization_repository, principal_repository, principal, role=MemberRole.ADMIN):
    organization = await organization_repository.create_organization(Organization(
        name="Acme",
        created_by=principal.user_id,
        members=[OrganizationMember(uid=principal.user_id, email=principal.email, role=role, joined_at=NOW)],
        created_at=NOW,
    ))
    await principal_repository.set_affiliation(principal.user_id, organization.organization_id, role, NOW)
    return organization


class TestSignUp:
    """Tests for SessionStore.sign_up"""

    @pytest.mark.asyncio
    async def test_sign_up_creates_profile(self, session, principal_repository):
        principal = await session.sign_up("Bob@Example.com", "secret123")

        assert session.is_authenticated
        assert principal.email == "bob@example.com"
        assert principal.display_name == "bob"
        assert principal.organization_id is None
        assert principal.role is None
        assert session.organization is None
        assert await principal_repository.get_principal(principal.user_id) == principal

    @pytest.mark.asyncio
    async def test_sign_up_with_display_name(self, session):
        principal = await session.sign_up("bob@example.com", "secret123", display_name="Bob B.")

        assert principal.display_name == "Bob B."

    @pytest.mark.asyncio
    async def test_sign_in_listener_receives_context(self, session):
        seen = []

        async def listener(principal, context):
            seen.append((principal.email, context.is_new_account, context.access_key))

        session.add_sign_in_listener(listener)

        await session.sign_up("bob@example.com", "secret123", access_key="acme-1-abc")
        await session.sign_out()
        await session.sign_in("bob@example.com", "secret123")

        assert seen == [
            ("bob@example.com", True, "acme-1-abc"),
            ("bob@example.com", False, None),
        ]

    @pytest.mark.asyncio
    async def test_blank_access_key_ignored(self, session):
        seen = []

        async def listener(principal, context):
            seen.append(context.access_key)

        session.add_sign_in_listener(listener)

        await session.sign_up("bob@example.com", "secret123", access_key="")

        assert seen == [None]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, session):
        await session.sign_up("bob@example.com", "secret123")
        await session.sign_out()

        with pytest.raises(AuthError) as exc_info:
            await session.sign_up("bob@example.com", "secret123")

        assert exc_info.value.code == EMAIL_ALREADY_IN_USE
        assert str(exc_info.value) == "This email address is already registered"
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_weak_password(self, session):
        with pytest.raises(AuthError) as exc_info:
            await session.sign_up("bob@example.com", "123")

        assert exc_info.value.code == WEAK_PASSWORD


class TestSignIn:
    """Tests for SessionStore.sign_in"""

    @pytest.mark.asyncio
    async def test_sign_in_resolves_organization(
        self, session, organization_repository, principal_repository
    ):
        principal = await session.sign_up("bob@example.com", "secret123")
        organization = await seed_organization(organization_repository, principal_repository, principal)
        await session.sign_out()

        signed_in = await session.sign_in("bob@example.com", "secret123")

        assert signed_in.organization_id == organization.organization_id
        assert signed_in.role == MemberRole.ADMIN
        assert session.organization.name == "Acme"

    @pytest.mark.asyncio
    async def test_wrong_password(self, session):
        await session.sign_up("bob@example.com", "secret123")
        await session.sign_out()

        with pytest.raises(AuthError) as exc_info:
            await session.sign_in("bob@example.com", "nope-nope")

        assert exc_info.value.code == INVALID_CREDENTIAL
        assert str(exc_info.value) == "Invalid email or password"
        assert session.principal is None

    @pytest.mark.asyncio
    async def test_missing_profile_created_lazily(self, session, auth_provider, principal_repository, store):
        """Sign-in for an account without a profile document creates one"""
        user = await auth_provider.sign_up("bob@example.com", "secret123")
        await auth_provider.sign_out()
        store._collections.get("users", {}).pop(user.uid, None)

        principal = await session.sign_in("bob@example.com", "secret123")

        assert principal.user_id == user.uid
        assert principal.organization_id is None
        assert await principal_repository.get_principal(user.uid) is not None

    @pytest.mark.asyncio
    async def test_dangling_organization_cleared(
        self, session, organization_repository, principal_repository, store
    ):
        """A profile pointing at a deleted organization is repaired on sign-in"""
        principal = await session.sign_up("bob@example.com", "secret123")
        organization = await seed_organization(organization_repository, principal_repository, principal)
        await session.sign_out()
        store._collections["organizations"].pop(organization.organization_id)

        signed_in = await session.sign_in("bob@example.com", "secret123")

        assert signed_in.organization_id is None
        assert signed_in.role is None
        assert session.organization is None
        stored = await principal_repository.get_principal(principal.user_id)
        assert stored.organization_id is None
        assert stored.role is None


class TestSessionLifecycle:
    """Tests for sign-out, refresh and provider-driven changes"""

    @pytest.mark.asyncio
    async def test_sign_out_clears_state(self, session, auth_provider):
        await session.sign_up("bob@example.com", "secret123")

        await session.sign_out()

        assert session.principal is None
        assert session.organization is None
        assert not session.is_authenticated
        assert auth_provider.current_user is None

    @pytest.mark.asyncio
    async def test_refresh_picks_up_affiliation(
        self, session, organization_repository, principal_repository
    ):
        principal = await session.sign_up("bob@example.com", "secret123")
        organization = await seed_organization(
            organization_repository, principal_repository, principal, role=MemberRole.MEMBER
        )

        refreshed = await session.refresh()

        assert refreshed.organization_id == organization.organization_id
        assert session.principal.role == MemberRole.MEMBER
        assert session.organization.organization_id == organization.organization_id

    @pytest.mark.asyncio
    async def test_refresh_when_signed_out(self, session):
        assert await session.refresh() is None

    @pytest.mark.asyncio
    async def test_provider_sign_out_tears_down(self, session, auth_provider):
        await session.sign_up("bob@example.com", "secret123")

        await auth_provider.sign_out()

        assert session.principal is None

    @pytest.mark.asyncio
    async def test_provider_sign_in_resolves(self, session, auth_provider):
        """Session changes originating in the provider are picked up"""
        user = await auth_provider.sign_up("bob@example.com", "secret123")

        assert session.principal is not None
        assert session.principal.user_id == user.uid

    @pytest.mark.asyncio
    async def test_close_detaches_from_provider(self, session, auth_provider):
        session.close()

        await auth_provider.sign_up("bob@example.com", "secret123")

        assert session.principal is None


class TestPrincipalAffiliation:
    """Tests for PrincipalRepository.set_affiliation"""

    @pytest.mark.asyncio
    async def test_half_affiliation_rejected(self, principal_repository, store):
        with pytest.raises(ValidationError):
            await principal_repository.set_affiliation("usr_bob", "org_1", None, NOW)

        with pytest.raises(TeamdeskError):
            await principal_repository.set_affiliation("usr_bob", None, MemberRole.MEMBER, NOW)

        assert await store.get("users", "usr_bob") is None


class TestMapAuthError:
    """Tests for map_auth_error"""

    def test_known_code(self):
        error = map_auth_error(AuthProviderError(TOO_MANY_REQUESTS))

        assert error.code == TOO_MANY_REQUESTS
        assert str(error) == "Too many attempts, please try again later"

    def test_unknown_code(self):
        error = map_auth_error(AuthProviderError("auth/quota-exceeded"))

        assert error.code == "auth/quota-exceeded"
        assert str(error) == DEFAULT_AUTH_ERROR_MESSAGE
