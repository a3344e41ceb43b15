"""
Session Service Protocols - DI Interfaces

All dependencies defined as Protocol classes for testability.
"""
from datetime import datetime
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from ..organization_service.models import MemberRole
from .models import AuthUser, Principal

SessionChangeCallback = Callable[[Optional[AuthUser]], Awaitable[None]]


@runtime_checkable
class AuthProviderProtocol(Protocol):
    """Authentication provider interface"""

    async def sign_in(self, email: str, password: str) -> AuthUser:
        """Authenticate an existing user"""
        ...

    async def sign_up(self, email: str, password: str) -> AuthUser:
        """Register a new user and sign them in"""
        ...

    async def sign_out(self) -> None:
        """End the current session"""
        ...

    def on_session_change(self, callback: SessionChangeCallback) -> Callable[[], None]:
        """Register a session listener, returns an unsubscribe function"""
        ...


@runtime_checkable
class PrincipalRepositoryProtocol(Protocol):
    """Repository interface for principal profiles"""

    async def get_principal(self, user_id: str) -> Optional[Principal]:
        """Get principal by ID"""
        ...

    async def create_principal(self, principal: Principal) -> Principal:
        """Create the profile document for a new principal"""
        ...

    async def set_affiliation(
        self,
        user_id: str,
        organization_id: Optional[str],
        role: Optional[MemberRole],
        updated_at: datetime,
    ) -> None:
        """Set (or clear, with None/None) the principal's organization and role"""
        ...


# ====================
# Auth provider error codes
# ====================

EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
INVALID_EMAIL = "auth/invalid-email"
WEAK_PASSWORD = "auth/weak-password"
INVALID_CREDENTIAL = "auth/invalid-credential"
USER_NOT_FOUND = "auth/user-not-found"
WRONG_PASSWORD = "auth/wrong-password"
TOO_MANY_REQUESTS = "auth/too-many-requests"
NETWORK_REQUEST_FAILED = "auth/network-request-failed"


class AuthProviderError(Exception):
    """Raised by auth providers with a provider-defined error code"""

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


__all__ = [
    "SessionChangeCallback",
    "AuthProviderProtocol",
    "PrincipalRepositoryProtocol",
    "AuthProviderError",
    "EMAIL_ALREADY_IN_USE",
    "INVALID_EMAIL",
    "WEAK_PASSWORD",
    "INVALID_CREDENTIAL",
    "USER_NOT_FOUND",
    "WRONG_PASSWORD",
    "TOO_MANY_REQUESTS",
    "NETWORK_REQUEST_FAILED",
]
