"""
Local Auth Provider

Email/password authentication over the document store. Credentials live in
the ``credentials`` collection keyed by normalized email; passwords are
stored as bcrypt hashes.
"""

import asyncio
import logging
import uuid
from typing import Callable, List, Optional

from ..core.config import AuthConfig
from ..core.document_store import DocumentStoreProtocol
from ..core.errors import ValidationError
from ..core.validation import normalize_email
from .models import AuthUser
from .password_utils import hash_password, verify_password
from .protocols import (
    EMAIL_ALREADY_IN_USE,
    INVALID_CREDENTIAL,
    INVALID_EMAIL,
    NETWORK_REQUEST_FAILED,
    WEAK_PASSWORD,
    AuthProviderError,
    SessionChangeCallback,
)

logger = logging.getLogger(__name__)


class LocalAuthProvider:
    """Auth provider backed by the document store"""

    collection = "credentials"

    def __init__(self, store: DocumentStoreProtocol, config: Optional[AuthConfig] = None):
        self.store = store
        self.config = config or AuthConfig()
        self._current_user: Optional[AuthUser] = None
        self._listeners: List[SessionChangeCallback] = []

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._current_user

    async def sign_up(self, email: str, password: str) -> AuthUser:
        normalized = self._normalize(email)
        if len(password or "") < self.config.min_password_length:
            raise AuthProviderError(
                WEAK_PASSWORD,
                f"Password must be at least {self.config.min_password_length} characters",
            )

        existing = await self._load_credentials(normalized)
        if existing is not None:
            raise AuthProviderError(EMAIL_ALREADY_IN_USE)

        # bcrypt is CPU bound
        password_hash = await asyncio.to_thread(
            hash_password, password, self.config.bcrypt_rounds
        )
        user = AuthUser(uid=uuid.uuid4().hex, email=normalized)
        try:
            await self.store.put(self.collection, normalized, {
                "uid": user.uid,
                "email": normalized,
                "password_hash": password_hash,
            })
        except Exception as e:
            logger.error(f"Error storing credentials for {normalized}: {e}", exc_info=True)
            raise AuthProviderError(NETWORK_REQUEST_FAILED, str(e)) from e

        logger.info(f"User registered: {user.uid}")
        await self._set_current_user(user)
        return user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        normalized = self._normalize(email)
        credentials = await self._load_credentials(normalized)
        if credentials is None:
            raise AuthProviderError(INVALID_CREDENTIAL)

        matches = await asyncio.to_thread(
            verify_password, password or "", credentials["password_hash"]
        )
        if not matches:
            raise AuthProviderError(INVALID_CREDENTIAL)

        user = AuthUser(uid=credentials["uid"], email=credentials["email"])
        await self._set_current_user(user)
        return user

    async def sign_out(self) -> None:
        await self._set_current_user(None)

    def on_session_change(self, callback: SessionChangeCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # ============ Helpers ============

    def _normalize(self, email: str) -> str:
        try:
            return normalize_email(email)
        except ValidationError as e:
            raise AuthProviderError(INVALID_EMAIL, str(e)) from e

    async def _load_credentials(self, email: str) -> Optional[dict]:
        try:
            return await self.store.get(self.collection, email)
        except Exception as e:
            logger.error(f"Error loading credentials for {email}: {e}", exc_info=True)
            raise AuthProviderError(NETWORK_REQUEST_FAILED, str(e)) from e

    async def _set_current_user(self, user: Optional[AuthUser]) -> None:
        self._current_user = user
        for listener in list(self._listeners):
            await listener(user)
