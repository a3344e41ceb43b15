"""
Session Service

Authentication, principal profiles and the process-wide session state.
"""

from .local_auth_provider import LocalAuthProvider
from .models import AuthUser, Principal, SignInContext
from .principal_repository import PrincipalRepository
from .protocols import AuthProviderError
from .session_store import SessionStore

__all__ = [
    "AuthProviderError",
    "AuthUser",
    "LocalAuthProvider",
    "Principal",
    "PrincipalRepository",
    "SessionStore",
    "SignInContext",
]
