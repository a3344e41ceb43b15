"""
PostgreSQL Document Store

DocumentStoreProtocol backed by a single JSONB table through asyncpg.

    CREATE TABLE documents (
        collection TEXT NOT NULL,
        doc_id     TEXT NOT NULL,
        data       JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (collection, doc_id)
    )
"""
import json
import logging
import re
import uuid
from typing import Any, Dict, List, Optional, Sequence

import asyncpg

from .document_store import EQUALS, Predicate, StoredDocument

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _decode(value: Any) -> Dict[str, Any]:
    # asyncpg hands JSONB back as text unless a codec is registered
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return dict(value)


class PostgresDocumentStore:
    """Document store over asyncpg"""

    def __init__(self, config, pool: Optional[asyncpg.Pool] = None):
        if not _IDENTIFIER_RE.match(config.table):
            raise ValueError(f"Invalid document table name: {config.table}")
        self.config = config
        self.table = config.table
        self._pool = pool

    async def initialize(self) -> None:
        """Open the pool and create the documents table if needed"""
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            await conn.execute(f'''
                CREATE TABLE IF NOT EXISTS {self.table} (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data JSONB NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                    PRIMARY KEY (collection, doc_id)
                )
            ''')
        logger.info(f"Document table {self.table} ready")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            self._pool = await asyncpg.create_pool(
                host=self.config.postgres_host,
                port=self.config.postgres_port,
                database=self.config.postgres_db,
                user=self.config.postgres_user,
                password=self.config.postgres_password,
                min_size=self.config.pool_min_size,
                max_size=self.config.pool_max_size,
            )
        return self._pool

    # ============ DocumentStoreProtocol ============

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        pool = await self._get_pool()
        query = f'''
            SELECT data FROM {self.table}
            WHERE collection = $1 AND doc_id = $2
        '''
        async with pool.acquire() as conn:
            row = await conn.fetchrow(query, collection, doc_id)
        return _decode(row["data"]) if row else None

    async def put(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False
    ) -> None:
        pool = await self._get_pool()
        update = f"{self.table}.data || EXCLUDED.data" if merge else "EXCLUDED.data"
        query = f'''
            INSERT INTO {self.table} (collection, doc_id, data)
            VALUES ($1, $2, $3::jsonb)
            ON CONFLICT (collection, doc_id) DO UPDATE SET data = {update}
        '''
        async with pool.acquire() as conn:
            await conn.execute(query, collection, doc_id, json.dumps(data))

    async def query(
        self, collection: str, predicates: Sequence[Predicate]
    ) -> List[StoredDocument]:
        pool = await self._get_pool()
        clauses = ["collection = $1"]
        params: List[Any] = [collection]
        for predicate in predicates:
            params.append(predicate.field)
            field_ref = f"${len(params)}"
            if predicate.op == EQUALS:
                params.append(json.dumps(predicate.value))
                clauses.append(f"data -> {field_ref} = ${len(params)}::jsonb")
            else:
                params.append(json.dumps([predicate.value]))
                clauses.append(f"data -> {field_ref} @> ${len(params)}::jsonb")

        query = f'''
            SELECT doc_id, data FROM {self.table}
            WHERE {" AND ".join(clauses)}
            ORDER BY created_at, doc_id
        '''
        async with pool.acquire() as conn:
            rows = await conn.fetch(query, *params)
        return [StoredDocument(doc_id=row["doc_id"], data=_decode(row["data"])) for row in rows]

    async def create_with_generated_id(
        self, collection: str, data: Dict[str, Any]
    ) -> str:
        doc_id = uuid.uuid4().hex
        await self.put(collection, doc_id, data)
        return doc_id


__all__ = ["PostgresDocumentStore"]
