"""Read queries for listings: public and admin search, detail, filter vocabulary and asset references."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterator, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import ColumnElement

from apartment_api.cloudinary_api.public_id import extract_public_id
from apartment_api.db.readers.listing_filters import (
    compile_admin_search,
    compile_listing_filters,
    page_offset,
    total_pages,
)
from apartment_api.models.listings import (
    IMAGE_SLOTS,
    Listing,
    ListingFeature,
    ListingSubwayLine,
    PetsPolicy,
)
from apartment_api.models.lookups import Borough, Feature, FeatureType, Neighborhood, SubwayLine
from apartment_api.schemas.listings import ListingSearchParams
from apartment_api.utils.subway_lines import (
    BOROUGH_TYPICAL_LINES,
    sort_line_codes,
    typical_lines_for,
)

PUBLIC_COLUMNS = (
    Listing.id,
    Listing.title,
    Listing.address,
    Listing.image_url,
    Listing.floorplan_image_url,
    Listing.map_image_url,
    Listing.price,
    Listing.beds,
    Listing.baths,
    Listing.pets_policy,
    Listing.is_active,
    Listing.created_at,
    Listing.updated_at,
    Borough.name.label("borough"),
    Neighborhood.name.label("neighborhood"),
)


def _with_location(*columns: Any) -> Any:
    return (
        select(*columns)
        .join(Borough, Borough.id == Listing.borough_id)
        .join(Neighborhood, Neighborhood.id == Listing.neighborhood_id)
    )


def _count(conn: Connection, where: ColumnElement[bool]) -> int:
    return int(conn.execute(select(func.count()).select_from(Listing).where(where)).scalar_one())


def load_associations(
    conn: Connection, listing_ids: list[int]
) -> dict[int, dict[str, list[str]]]:
    """
    Fetch feature and subway line names for a batch of listings.

    Returns:
        dict: listing id -> {"unit_features", "building_features", "subway_lines"}
    """
    out: dict[int, dict[str, list[str]]] = {
        listing_id: {"unit_features": [], "building_features": [], "subway_lines": []}
        for listing_id in listing_ids
    }
    if not listing_ids:
        return out

    feature_rows = conn.execute(
        select(ListingFeature.listing_id, Feature.name, Feature.feature_type)
        .join(Feature, Feature.id == ListingFeature.feature_id)
        .where(ListingFeature.listing_id.in_(listing_ids))
        .order_by(Feature.name)
    )
    for listing_id, name, feature_type in feature_rows:
        key = "unit_features" if feature_type == FeatureType.UNIT else "building_features"
        out[listing_id][key].append(name)

    line_rows = conn.execute(
        select(ListingSubwayLine.listing_id, SubwayLine.line_code)
        .join(SubwayLine, SubwayLine.id == ListingSubwayLine.subway_line_id)
        .where(ListingSubwayLine.listing_id.in_(listing_ids))
    )
    for listing_id, line_code in line_rows:
        out[listing_id]["subway_lines"].append(line_code)
    for associations in out.values():
        associations["subway_lines"] = sort_line_codes(associations["subway_lines"])

    return out


def _project(conn: Connection, rows: list[Any]) -> list[dict[str, Any]]:
    listings = [dict(row._mapping) for row in rows]
    associations = load_associations(conn, [listing["id"] for listing in listings])
    for listing in listings:
        listing.update(associations[listing["id"]])
    return listings


def search_public_listings(conn: Connection, params: ListingSearchParams) -> dict[str, Any]:
    """
    Run the public listing search.

    Ordered by price ascending with id descending as a stable tie-break.

    Args:
        conn: SQLAlchemy DB connection
        params: Validated search parameters

    Returns:
        dict: page, limit, total, total_pages and data (projected listings)
    """
    where = compile_listing_filters(params)
    total = _count(conn, where)

    rows = conn.execute(
        _with_location(*PUBLIC_COLUMNS)
        .where(where)
        .order_by(Listing.price.asc(), Listing.id.desc())
        .offset(page_offset(params.page, params.limit))
        .limit(params.limit)
    ).fetchall()

    return {
        "page": params.page,
        "limit": params.limit,
        "total": total,
        "total_pages": total_pages(total, params.limit),
        "data": _project(conn, rows),
    }


def search_admin_listings(
    conn: Connection, query: Optional[str], page: int, limit: int
) -> dict[str, Any]:
    """
    Run the admin free-text search over all listings, active or not.

    Ordered by last modification, newest first, id descending as tie-break.
    """
    where = compile_admin_search(query)
    total = _count(conn, where)

    rows = conn.execute(
        _with_location(
            Listing.id,
            Listing.title,
            Listing.address,
            Listing.price,
            Listing.is_active,
            Listing.updated_at,
            Borough.name.label("borough"),
            Neighborhood.name.label("neighborhood"),
        )
        .where(where)
        .order_by(Listing.updated_at.desc(), Listing.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
    ).fetchall()

    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages(total, limit),
        "data": [dict(row._mapping) for row in rows],
    }


def get_listing_detail(conn: Connection, listing_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch one listing with location names, features and subway lines.

    Returns:
        Optional[dict]: None if the listing does not exist
    """
    row = conn.execute(_with_location(*PUBLIC_COLUMNS).where(Listing.id == listing_id)).fetchone()
    if row is None:
        return None
    return _project(conn, [row])[0]


def get_listing_public_ids(conn: Connection, listing_id: int) -> Optional[set[str]]:
    """
    Public ids of every image the listing references.

    Falls back to deriving the id from the stored URL when the id column is
    empty (rows created before ids were stored).

    Returns:
        Optional[set[str]]: None if the listing does not exist
    """
    row = conn.execute(select(Listing).where(Listing.id == listing_id)).fetchone()
    if row is None:
        return None
    return _row_public_ids(row._mapping)


def _row_public_ids(mapping: Any) -> set[str]:
    public_ids: set[str] = set()
    for url_column, public_id_column in IMAGE_SLOTS.values():
        public_id = mapping[public_id_column] or extract_public_id(mapping[url_column])
        if public_id:
            public_ids.add(public_id)
    return public_ids


def iter_referenced_public_ids(conn: Connection) -> Iterator[str]:
    """
    Yield every image public id referenced by any listing.

    Both the stored id and the id derived from the stored URL are yielded
    for each slot, so a stale id column cannot hide a live asset.
    """
    columns = [getattr(Listing, name) for slot in IMAGE_SLOTS.values() for name in slot]
    for row in conn.execute(select(*columns)):
        mapping = row._mapping
        for url_column, public_id_column in IMAGE_SLOTS.values():
            for candidate in (mapping[public_id_column], extract_public_id(mapping[url_column])):
                if candidate:
                    yield candidate


def get_filter_vocabulary(conn: Connection) -> dict[str, Any]:
    """
    Collect every value the public filters accept.

    Returns:
        dict: boroughs, neighborhoods grouped by borough, unit and building
        features, subway lines, borough -> lines (reference table merged with
        lines seen on active listings) and pets policies
    """
    boroughs = [name for (name,) in conn.execute(select(Borough.name).order_by(Borough.name))]

    neighborhoods_by_borough: dict[str, list[str]] = {name: [] for name in boroughs}
    for borough, neighborhood in conn.execute(
        select(Borough.name, Neighborhood.name)
        .join(Neighborhood, Neighborhood.borough_id == Borough.id)
        .order_by(Borough.name, Neighborhood.name)
    ):
        neighborhoods_by_borough[borough].append(neighborhood)

    features: dict[FeatureType, list[str]] = defaultdict(list)
    for name, feature_type in conn.execute(
        select(Feature.name, Feature.feature_type).order_by(Feature.name)
    ):
        features[feature_type].append(name)

    subway_lines = sort_line_codes(
        code for (code,) in conn.execute(select(SubwayLine.line_code))
    )

    observed: dict[str, set[str]] = defaultdict(set)
    for borough, line_code in conn.execute(
        select(Borough.name, SubwayLine.line_code)
        .select_from(Listing)
        .join(Borough, Borough.id == Listing.borough_id)
        .join(ListingSubwayLine, ListingSubwayLine.listing_id == Listing.id)
        .join(SubwayLine, SubwayLine.id == ListingSubwayLine.subway_line_id)
        .where(Listing.is_active.is_(True))
        .distinct()
    ):
        observed[borough].add(line_code)

    known = {name.lower() for name in boroughs}
    reference_only = [name for name in BOROUGH_TYPICAL_LINES if name.lower() not in known]
    borough_subway_lines = {
        borough: sort_line_codes([*typical_lines_for(borough), *observed.get(borough, set())])
        for borough in [*boroughs, *reference_only]
    }

    return {
        "boroughs": boroughs,
        "neighborhoods_by_borough": neighborhoods_by_borough,
        "unit_features": features[FeatureType.UNIT],
        "building_features": features[FeatureType.BUILDING],
        "subway_lines": subway_lines,
        "borough_subway_lines": borough_subway_lines,
        "pets_policies": list(PetsPolicy),
    }
