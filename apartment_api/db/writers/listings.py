from typing import Any

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from apartment_api.models.listings import Listing, ListingFeature, ListingSubwayLine
from apartment_api.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_listing(conn: Connection, values: dict[str, Any]) -> int:
    """
    Insert a listing row.

    Args:
        conn: SQLAlchemy DB connection (within transaction)
        values: Column values; borough_id and neighborhood_id must already be resolved

    Returns:
        int: new listing id
    """
    now = utc_now()
    result = conn.execute(insert(Listing).values(**values, created_at=now, updated_at=now))
    listing_id = int(result.inserted_primary_key[0])
    logger.info("listing_inserted", listing_id=listing_id)
    return listing_id


def update_listing(conn: Connection, listing_id: int, values: dict[str, Any]) -> bool:
    """
    Overwrite the listing's columns with ``values``.

    Returns:
        bool: False if no listing has that id
    """
    stmt = update(Listing).where(Listing.id == listing_id).values(**values, updated_at=utc_now())
    return conn.execute(stmt).rowcount > 0


def set_listing_status(conn: Connection, listing_id: int, is_active: bool) -> bool:
    """
    Activate or deactivate a listing without touching anything else.

    Returns:
        bool: False if no listing has that id
    """
    stmt = (
        update(Listing)
        .where(Listing.id == listing_id)
        .values(is_active=is_active, updated_at=utc_now())
    )
    return conn.execute(stmt).rowcount > 0


def delete_listing(conn: Connection, listing_id: int) -> bool:
    """
    Permanently delete a listing and its feature and subway line links.

    Returns:
        bool: False if no listing has that id
    """
    conn.execute(delete(ListingFeature).where(ListingFeature.listing_id == listing_id))
    conn.execute(delete(ListingSubwayLine).where(ListingSubwayLine.listing_id == listing_id))
    deleted = conn.execute(delete(Listing).where(Listing.id == listing_id)).rowcount > 0
    if deleted:
        logger.info("listing_deleted", listing_id=listing_id)
    return deleted
