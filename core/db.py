"""
core/db.py -- Engine construction shared by auth/store.py and ads/store.py.

SQLAlchemy provides a database-agnostic abstraction: swapping SQLite for
PostgreSQL is a DATABASE_URL change, not a rewrite.
"""

from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an engine, applying the SQLite-only connection tweaks.

    check_same_thread=False because FastAPI runs sync handlers in a threadpool,
    so a pooled connection may be used by a thread other than its creator.
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


def now_iso() -> str:
    # Fixed microsecond precision keeps the strings lexically sortable.
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")
