"""
Session Store

Holds the authenticated principal and its organization for the lifetime of
an auth session. State is resolved on sign-in/sign-up and torn down on
sign-out; the store is passed by reference to the services that need it.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from ..core.clock import ClockProtocol, SystemClock
from ..core.errors import AuthError
from ..organization_service.models import Organization
from ..organization_service.protocols import OrganizationRepositoryProtocol
from .models import AuthUser, Principal, SignInContext
from .protocols import (
    EMAIL_ALREADY_IN_USE,
    INVALID_CREDENTIAL,
    INVALID_EMAIL,
    NETWORK_REQUEST_FAILED,
    TOO_MANY_REQUESTS,
    USER_NOT_FOUND,
    WEAK_PASSWORD,
    WRONG_PASSWORD,
    AuthProviderError,
    AuthProviderProtocol,
    PrincipalRepositoryProtocol,
)

logger = logging.getLogger(__name__)

SignInListener = Callable[[Principal, SignInContext], Awaitable[object]]

AUTH_ERROR_MESSAGES = {
    EMAIL_ALREADY_IN_USE: "This email address is already registered",
    INVALID_EMAIL: "Invalid email address",
    WEAK_PASSWORD: "Password is too weak",
    INVALID_CREDENTIAL: "Invalid email or password",
    USER_NOT_FOUND: "Invalid email or password",
    WRONG_PASSWORD: "Invalid email or password",
    TOO_MANY_REQUESTS: "Too many attempts, please try again later",
    NETWORK_REQUEST_FAILED: "Network error, please check your connection",
}
DEFAULT_AUTH_ERROR_MESSAGE = "Authentication failed"


def map_auth_error(error: AuthProviderError) -> AuthError:
    """Translate a provider error code into an AuthError"""
    message = AUTH_ERROR_MESSAGES.get(error.code, DEFAULT_AUTH_ERROR_MESSAGE)
    return AuthError(message, code=error.code)


class SessionStore:
    """Current principal and organization"""

    def __init__(
        self,
        auth_provider: AuthProviderProtocol,
        principal_repository: PrincipalRepositoryProtocol,
        organization_repository: OrganizationRepositoryProtocol,
        clock: Optional[ClockProtocol] = None,
    ):
        self.auth_provider = auth_provider
        self.principal_repository = principal_repository
        self.organization_repository = organization_repository
        self.clock = clock or SystemClock()

        self._principal: Optional[Principal] = None
        self._organization: Optional[Organization] = None
        self._sign_in_listeners: List[SignInListener] = []
        self._authenticating = False
        self._unsubscribe = auth_provider.on_session_change(self._handle_session_change)

    @property
    def principal(self) -> Optional[Principal]:
        return self._principal

    @property
    def organization(self) -> Optional[Organization]:
        return self._organization

    @property
    def is_authenticated(self) -> bool:
        return self._principal is not None

    def add_sign_in_listener(self, listener: SignInListener) -> None:
        self._sign_in_listeners.append(listener)

    # ============ Authentication ============

    async def sign_in(self, email: str, password: str) -> Principal:
        """Authenticate and resolve the session"""
        self._authenticating = True
        try:
            user = await self.auth_provider.sign_in(email, password)
        except AuthProviderError as e:
            logger.warning(f"Sign-in rejected: {e.code}")
            raise map_auth_error(e) from e
        finally:
            self._authenticating = False

        principal = await self._resolve(user)
        logger.info(f"Signed in: {principal.user_id}")
        await self._notify_sign_in(principal, SignInContext(is_new_account=False))
        return self._principal

    async def sign_up(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
        access_key: Optional[str] = None,
    ) -> Principal:
        """Register, create the profile and resolve the session"""
        self._authenticating = True
        try:
            user = await self.auth_provider.sign_up(email, password)
        except AuthProviderError as e:
            logger.warning(f"Sign-up rejected: {e.code}")
            raise map_auth_error(e) from e
        finally:
            self._authenticating = False

        await self.principal_repository.create_principal(
            self._new_principal(user, display_name)
        )
        principal = await self._resolve(user)
        logger.info(f"Signed up: {principal.user_id}")

        context = SignInContext(is_new_account=True, access_key=access_key or None)
        await self._notify_sign_in(principal, context)
        return self._principal

    async def sign_out(self) -> None:
        """End the session and clear all state"""
        self._teardown()
        await self.auth_provider.sign_out()

    async def refresh(self) -> Optional[Principal]:
        """Reload the current principal and organization from the repositories"""
        if self._principal is None:
            return None
        user = AuthUser(
            uid=self._principal.user_id,
            email=self._principal.email,
            display_name=self._principal.display_name,
        )
        return await self._resolve(user)

    def close(self) -> None:
        """Detach from the auth provider"""
        self._unsubscribe()

    # ============ Helpers ============

    async def _handle_session_change(self, user: Optional[AuthUser]) -> None:
        # Explicit sign_in/sign_up calls resolve the session themselves
        if self._authenticating:
            return
        if user is None:
            self._teardown()
        elif self._principal is None or self._principal.user_id != user.uid:
            await self._resolve(user)

    async def _resolve(self, user: AuthUser) -> Principal:
        principal = await self.principal_repository.get_principal(user.uid)
        if principal is None:
            logger.info(f"No profile for {user.uid}, creating one")
            principal = await self.principal_repository.create_principal(
                self._new_principal(user, user.display_name)
            )

        organization = None
        if principal.organization_id:
            organization = await self.organization_repository.get_organization(
                principal.organization_id
            )
            if organization is None:
                logger.warning(
                    f"Organization {principal.organization_id} not found for principal "
                    f"{principal.user_id}, clearing reference"
                )
                await self.principal_repository.set_affiliation(
                    principal.user_id, None, None, self.clock.now()
                )
                principal = principal.model_copy(update={"organization_id": None, "role": None})

        self._principal = principal
        self._organization = organization
        return principal

    def _new_principal(self, user: AuthUser, display_name: Optional[str]) -> Principal:
        now = self.clock.now()
        return Principal(
            user_id=user.uid,
            email=user.email,
            display_name=display_name or user.email.split("@")[0],
            created_at=now,
            updated_at=now,
        )

    async def _notify_sign_in(self, principal: Principal, context: SignInContext) -> None:
        for listener in list(self._sign_in_listeners):
            await listener(principal, context)

    def _teardown(self) -> None:
        self._principal = None
        self._organization = None


__all__ = ["SessionStore", "SignInListener", "map_auth_error", "AUTH_ERROR_MESSAGES"]
