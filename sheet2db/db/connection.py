from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..config.loader import DatabaseConfig

"""Scoped PostgreSQL connection (psycopg2).

The connection is acquired once per CLI run and always closed, including when
the import raises midway. The core issues no BEGIN/COMMIT itself: work done
inside the `with` block is committed on normal exit and rolled back when an
exception escapes.
"""

__all__ = [
    "resolve_dsn",
    "db_connection",
]

logger = logging.getLogger(__name__)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Build the connection string.

    Priority:
        1. DATABASE_URL / PGDSN environment variables (whole DSN)
        2. `dsn` in the config database section
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, falling back to
           the individual config fields
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_connection(db_cfg: DatabaseConfig) -> Iterator[Any]:
    """Yield a psycopg2 cursor; commit on success, rollback on error, always close."""
    conn = psycopg2.connect(resolve_dsn(db_cfg))
    try:
        conn.autocommit = False
        cur = conn.cursor()
        try:
            yield cur
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()
        finally:
            cur.close()
    finally:
        conn.close()
        logger.debug("database connection closed")
