"""
Dialect-aware INSERT ... ON CONFLICT DO NOTHING helper.

Join-table writes and seeding need "insert unless it already exists" on both
PostgreSQL (production) and SQLite (local runs and tests). Both dialects
support ON CONFLICT DO NOTHING through their own insert constructs.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection


def insert_ignore_conflicts(conn: Connection, table: type, rows: list[dict[str, Any]]) -> int:
    """
    Insert rows, silently skipping any that violate a unique constraint.

    Args:
        conn: Active database connection (within transaction)
        table: SQLAlchemy ORM class (e.g., ListingFeature)
        rows: Row dicts to insert

    Returns:
        int: number of rows actually inserted (as reported by the driver)

    Example:
        >>> with engine.begin() as conn:
        ...     insert_ignore_conflicts(
        ...         conn,
        ...         ListingFeature,
        ...         [{"listing_id": 1, "feature_id": 7}],
        ...     )
    """
    if not rows:
        return 0

    if conn.dialect.name == "postgresql":
        stmt = postgresql.insert(table).values(rows).on_conflict_do_nothing()
    elif conn.dialect.name == "sqlite":
        stmt = sqlite.insert(table).values(rows).on_conflict_do_nothing()
    else:
        raise NotImplementedError(f"Unsupported dialect: {conn.dialect.name}")

    result = conn.execute(stmt)
    return max(result.rowcount or 0, 0)
