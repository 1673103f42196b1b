"""
SQLAlchemy engine singleton.

PostgreSQL URLs get a connection pool sized for concurrent web requests.
SQLite URLs (local runs and tests) share one connection through StaticPool so
an in-memory database survives across requests.
"""

from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from apartment_api.config import DATABASE_URL


def build_engine(url: str) -> Engine:
    """
    Create an engine with pool settings appropriate for the URL's backend.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Engine: configured engine
    """
    options: dict[str, Any] = {"future": True, "echo": False}

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        options["poolclass"] = StaticPool
    else:
        options.update(
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # detect stale connections
            pool_recycle=3600,
        )

    new_engine = create_engine(url, **options)

    if url.startswith("sqlite"):
        # pysqlite defers BEGIN and so breaks SAVEPOINT; emit BEGIN ourselves
        @event.listens_for(new_engine, "connect")
        def _sqlite_connect(dbapi_connection: Any, connection_record: Any) -> None:
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(new_engine, "begin")
        def _sqlite_begin(conn: Any) -> None:
            conn.exec_driver_sql("BEGIN")

    return new_engine


engine: Engine = build_engine(DATABASE_URL)


def check_engine_health(target: Engine = engine) -> bool:
    """
    Check that the database answers a trivial query.

    Used by the /ready endpoint before the service accepts traffic.

    Returns:
        bool: True if the database is reachable, False otherwise
    """
    try:
        with target.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
