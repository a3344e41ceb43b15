#!/usr/bin/env python3
"""Document store configuration

Selects the backing store (in-memory or PostgreSQL/JSONB) and its connection
settings.
"""
import os
from dataclasses import dataclass


def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class StoreConfig:
    """Document store backend settings"""

    # memory | postgres
    backend: str = "memory"

    # ===========================================
    # PostgreSQL (native asyncpg - port 5432)
    # ===========================================
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "postgres"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    table: str = "teamdesk_documents"
    pool_min_size: int = 1
    pool_max_size: int = 10

    @classmethod
    def from_env(cls) -> 'StoreConfig':
        """Load store configuration from environment variables"""
        return cls(
            backend=os.getenv("DOCUMENT_STORE_BACKEND", "memory"),
            postgres_host=os.getenv("POSTGRES_HOST", "localhost"),
            postgres_port=_int(os.getenv("POSTGRES_PORT", "5432"), 5432),
            postgres_db=os.getenv("POSTGRES_DB", "postgres"),
            postgres_user=os.getenv("POSTGRES_USER", "postgres"),
            postgres_password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            table=os.getenv("DOCUMENT_STORE_TABLE", "teamdesk_documents"),
            pool_min_size=_int(os.getenv("POSTGRES_POOL_MIN_SIZE", "1"), 1),
            pool_max_size=_int(os.getenv("POSTGRES_POOL_MAX_SIZE", "10"), 10),
        )
