"""
Find-or-create helpers for the lookup tables.

Names are matched case-insensitively within their scope (neighborhoods within
a borough, features within a feature type). The create step runs inside a
SAVEPOINT: if a concurrent request inserted the same row first, the unique
constraint fires, the savepoint is rolled back and the winner's row is read.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import func, insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql import Select

from apartment_api.models.lookups import Borough, Feature, FeatureType, Neighborhood, SubwayLine

logger = structlog.get_logger(__name__)


def _find_or_create(conn: Connection, table: type, lookup: Select[Any], values: dict[str, Any]) -> int:
    existing = conn.execute(lookup).scalar()
    if existing is not None:
        return int(existing)

    try:
        with conn.begin_nested():
            result = conn.execute(insert(table).values(**values))
            created_id = int(result.inserted_primary_key[0])
    except IntegrityError:
        logger.info("lookup_create_conflict", table=table.__tablename__, values=values)
        winner = conn.execute(lookup).scalar()
        if winner is None:
            raise
        return int(winner)

    logger.info("lookup_created", table=table.__tablename__, id=created_id, values=values)
    return created_id


def resolve_or_create_borough(conn: Connection, name: str) -> int:
    """
    Return the id of the borough called ``name``, creating it if needed.

    Args:
        conn: Active database connection (within transaction)
        name: Borough display name; stored with the casing first seen

    Returns:
        int: borough id
    """
    name = name.strip()
    lookup = select(Borough.id).where(func.lower(Borough.name) == name.lower()).limit(1)
    return _find_or_create(conn, Borough, lookup, {"name": name})


def resolve_or_create_neighborhood(conn: Connection, borough_id: int, name: str) -> int:
    """Return the id of the neighborhood ``name`` inside ``borough_id``, creating it if needed."""
    name = name.strip()
    lookup = (
        select(Neighborhood.id)
        .where(
            Neighborhood.borough_id == borough_id,
            func.lower(Neighborhood.name) == name.lower(),
        )
        .limit(1)
    )
    return _find_or_create(conn, Neighborhood, lookup, {"name": name, "borough_id": borough_id})


def resolve_or_create_feature(conn: Connection, feature_type: FeatureType, name: str) -> int:
    """Return the id of the ``feature_type`` feature called ``name``, creating it if needed."""
    name = name.strip()
    lookup = (
        select(Feature.id)
        .where(
            Feature.feature_type == feature_type,
            func.lower(Feature.name) == name.lower(),
        )
        .limit(1)
    )
    return _find_or_create(conn, Feature, lookup, {"name": name, "feature_type": feature_type})


def resolve_or_create_subway_line(conn: Connection, line_code: str) -> int:
    """Return the id of the subway line ``line_code`` (upper-cased), creating it if needed."""
    line_code = line_code.strip().upper()
    lookup = select(SubwayLine.id).where(SubwayLine.line_code == line_code).limit(1)
    return _find_or_create(conn, SubwayLine, lookup, {"line_code": line_code})
