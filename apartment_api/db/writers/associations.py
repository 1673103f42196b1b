"""
Feature and subway line synchronization for a single listing.

Every listing write hands over the complete desired sets; the join tables are
then replaced wholesale (delete all, insert desired). Replacing instead of
diffing keeps the operation idempotent, so a retry after a partial failure
converges on the same state.
"""

from __future__ import annotations

from typing import Iterable

import structlog
from sqlalchemy import delete
from sqlalchemy.engine import Connection

from apartment_api.db.writers._insert import insert_ignore_conflicts
from apartment_api.db.writers.lookups import (
    resolve_or_create_feature,
    resolve_or_create_subway_line,
)
from apartment_api.models.listings import ListingFeature, ListingSubwayLine
from apartment_api.models.lookups import FeatureType

logger = structlog.get_logger(__name__)


def normalize_names(values: Iterable[str]) -> list[str]:
    """
    Trim names and drop blanks and case-insensitive duplicates.

    The first spelling seen wins, and input order is kept.

    Example:
        >>> normalize_names([" Gym", "gym", "", "Pool"])
        ['Gym', 'Pool']
    """
    seen: set[str] = set()
    out: list[str] = []
    for raw in values:
        value = raw.strip()
        key = value.lower()
        if not value or key in seen:
            continue
        seen.add(key)
        out.append(value)
    return out


def normalize_line_codes(values: Iterable[str]) -> list[str]:
    """De-duplicate line codes case-insensitively and upper-case them."""
    return [code.upper() for code in normalize_names(values)]


def _unique(ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(ids))


def sync_listing_features(
    conn: Connection,
    listing_id: int,
    unit_features: Iterable[str],
    building_features: Iterable[str],
) -> list[int]:
    """
    Make the listing's features exactly the given unit and building features.

    Args:
        conn: Active database connection (within transaction)
        listing_id: Listing to update
        unit_features: Desired unit feature names
        building_features: Desired building feature names

    Returns:
        list[int]: feature ids now linked to the listing
    """
    feature_ids = [
        resolve_or_create_feature(conn, FeatureType.UNIT, name)
        for name in normalize_names(unit_features)
    ]
    feature_ids += [
        resolve_or_create_feature(conn, FeatureType.BUILDING, name)
        for name in normalize_names(building_features)
    ]
    feature_ids = _unique(feature_ids)

    conn.execute(delete(ListingFeature).where(ListingFeature.listing_id == listing_id))
    insert_ignore_conflicts(
        conn,
        ListingFeature,
        [{"listing_id": listing_id, "feature_id": feature_id} for feature_id in feature_ids],
    )
    return feature_ids


def sync_listing_subway_lines(
    conn: Connection, listing_id: int, line_codes: Iterable[str]
) -> list[int]:
    """
    Make the listing's subway lines exactly ``line_codes`` (upper-cased).

    Returns:
        list[int]: subway line ids now linked to the listing
    """
    line_ids = _unique(
        resolve_or_create_subway_line(conn, code) for code in normalize_line_codes(line_codes)
    )

    conn.execute(delete(ListingSubwayLine).where(ListingSubwayLine.listing_id == listing_id))
    insert_ignore_conflicts(
        conn,
        ListingSubwayLine,
        [{"listing_id": listing_id, "subway_line_id": line_id} for line_id in line_ids],
    )
    return line_ids


def sync_listing_associations(
    conn: Connection,
    listing_id: int,
    unit_features: Iterable[str] = (),
    building_features: Iterable[str] = (),
    subway_lines: Iterable[str] = (),
) -> None:
    """
    Replace all feature and subway line links of a listing with the desired sets.

    Safe to call repeatedly with the same input.
    """
    feature_ids = sync_listing_features(conn, listing_id, unit_features, building_features)
    line_ids = sync_listing_subway_lines(conn, listing_id, subway_lines)
    logger.debug(
        "listing_associations_synced",
        listing_id=listing_id,
        feature_count=len(feature_ids),
        subway_line_count=len(line_ids),
    )
