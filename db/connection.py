"""
db/connection.py
----------------
PostgreSQL connection pool shared by every repository.

The pool is a ThreadedConnectionPool: handlers borrow connections on the event
loop thread, and the password-hashing calls that run in worker threads
(asyncio.to_thread) borrow them too.
"""

from typing import Optional

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_POOL_MIN, DB_POOL_MAX
from db.errors import TransientFailure
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None


def init_pool(
    min_conn: int = DB_POOL_MIN,
    max_conn: int = DB_POOL_MAX,
    dsn: Optional[str] = None,
) -> None:
    """
    Open the pool. A second call while it is open does nothing.

    Args:
        min_conn: Connections opened up front.
        max_conn: Upper bound on simultaneously borrowed connections.
        dsn: libpq connection string, ``config.DATABASE_URL`` when omitted.

    Raises:
        psycopg2.OperationalError: The server refused or could not be reached.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.ThreadedConnectionPool(min_conn, max_conn, dsn or DATABASE_URL)
        logger.info(f"Database pool ready ({min_conn}-{max_conn} connections).")
    except psycopg2.OperationalError as e:
        logger.error(f"Could not open database pool: {e}")
        raise


def get_connection():
    """
    Borrow a connection. Pair every call with `release_connection`.

    Raises:
        RuntimeError: `init_pool` was never called.
        TransientFailure: All `max_conn` connections are in use.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    try:
        return _pool.getconn()
    except pool.PoolError as e:
        logger.warning(f"Connection pool exhausted: {e}")
        raise TransientFailure("get connection", "pool") from e


def release_connection(conn) -> None:
    """Hand a borrowed connection back. Uncommitted work is rolled back by the pool."""
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close every pooled connection; `init_pool` may be called again afterwards."""
    global _pool
    if _pool is None:
        return
    _pool.closeall()
    _pool = None
    logger.info("Database pool closed.")
