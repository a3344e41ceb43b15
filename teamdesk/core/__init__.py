"""
Core Module

Shared infrastructure for the teamdesk services.

COMPONENTS:
    - config/: dataclass configuration loaded from the environment
    - errors.py: shared exception hierarchy
    - document_store.py: document store interface and in-memory backend
    - postgres_document_store.py: asyncpg/JSONB backend
    - events.py: domain event envelope and bus interface
    - clock.py: injectable UTC clock
"""

from .clock import ClockProtocol, SystemClock
from .document_store import (
    DocumentStoreProtocol,
    InMemoryDocumentStore,
    Predicate,
    StoredDocument,
    create_document_store,
)
from .errors import (
    AuthError,
    NotFoundError,
    PersistenceError,
    TeamdeskError,
    ValidationError,
)

__all__ = [
    "ClockProtocol",
    "SystemClock",
    "DocumentStoreProtocol",
    "InMemoryDocumentStore",
    "Predicate",
    "StoredDocument",
    "create_document_store",
    "AuthError",
    "NotFoundError",
    "PersistenceError",
    "TeamdeskError",
    "ValidationError",
]
