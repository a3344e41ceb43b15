"""
Document Store - DI interface and in-memory backend

The membership workflow talks to its backing store only through
DocumentStoreProtocol: per-collection get/put/query plus creation with a
generated id. There is no cross-document transaction primitive; every call
is independent.
"""
import copy
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)

EQUALS = "=="
ARRAY_CONTAINS = "array-contains"
SUPPORTED_OPERATORS = (EQUALS, ARRAY_CONTAINS)


@dataclass(frozen=True)
class Predicate:
    """Single query filter: field <op> value"""
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported query operator: {self.op}")

    def matches(self, data: Dict[str, Any]) -> bool:
        current = data.get(self.field)
        if self.op == EQUALS:
            return current == self.value
        return isinstance(current, list) and self.value in current


@dataclass
class StoredDocument:
    """Query result row"""
    doc_id: str
    data: Dict[str, Any]


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Backing document store interface"""

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document or None"""
        ...

    async def put(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False
    ) -> None:
        """Write a document; merge=True updates only the given top-level fields"""
        ...

    async def query(
        self, collection: str, predicates: Sequence[Predicate]
    ) -> List[StoredDocument]:
        """Return documents matching every predicate"""
        ...

    async def create_with_generated_id(
        self, collection: str, data: Dict[str, Any]
    ) -> str:
        """Insert a new document and return its generated id"""
        ...


class InMemoryDocumentStore:
    """
    Dict-backed document store.

    Reads and writes deep-copy their payloads so callers never hold a
    reference into the store's state.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        document = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def put(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False
    ) -> None:
        documents = self._collections.setdefault(collection, {})
        if merge and doc_id in documents:
            documents[doc_id].update(copy.deepcopy(data))
        else:
            documents[doc_id] = copy.deepcopy(data)

    async def query(
        self, collection: str, predicates: Sequence[Predicate]
    ) -> List[StoredDocument]:
        return [
            StoredDocument(doc_id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collections.get(collection, {}).items()
            if all(predicate.matches(data) for predicate in predicates)
        ]

    async def create_with_generated_id(
        self, collection: str, data: Dict[str, Any]
    ) -> str:
        doc_id = uuid.uuid4().hex
        await self.put(collection, doc_id, data)
        return doc_id

    async def close(self) -> None:
        pass


def create_document_store(config) -> DocumentStoreProtocol:
    """Build the store selected by StoreConfig.backend"""
    backend = (config.backend or "memory").lower()
    if backend == "memory":
        logger.info("Using in-memory document store")
        return InMemoryDocumentStore()
    if backend == "postgres":
        from .postgres_document_store import PostgresDocumentStore
        logger.info(f"Using PostgreSQL document store at {config.postgres_host}:{config.postgres_port}")
        return PostgresDocumentStore(config)
    raise ValueError(f"Unknown document store backend: {config.backend}")


__all__ = [
    "EQUALS",
    "ARRAY_CONTAINS",
    "Predicate",
    "StoredDocument",
    "DocumentStoreProtocol",
    "InMemoryDocumentStore",
    "create_document_store",
]
