"""
Compile listing search requests into SQLAlchemy predicates.

Two audiences share the listing table:

* the public search, which combines structured filters and only ever sees
  active listings, and
* the admin search, a free-text match across title, address and location
  names that sees everything.
"""

from __future__ import annotations

import re
from math import ceil
from typing import Optional

from sqlalchemy import and_, exists, func, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from apartment_api.db.writers.associations import normalize_line_codes, normalize_names
from apartment_api.models.listings import Listing, ListingFeature, ListingSubwayLine
from apartment_api.models.lookups import Borough, Feature, Neighborhood, SubwayLine
from apartment_api.schemas.listings import ListingSearchParams

MAX_SEARCH_TERMS = 6


def csv_to_list(value: Optional[str]) -> list[str]:
    """
    Split a comma-separated query value into trimmed, non-empty parts.

    Example:
        >>> csv_to_list(" Gym, ,Pool ")
        ['Gym', 'Pool']
    """
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def total_pages(total: int, limit: int) -> int:
    """Number of pages for ``total`` rows; an empty result still has one page."""
    return max(1, ceil(total / limit))


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def _lowered(values: list[str]) -> list[str]:
    return [value.lower() for value in normalize_names(values)]


def has_feature(name: str) -> ColumnElement[bool]:
    """EXISTS check for one feature (either type) on the outer listing, ignoring case."""
    return exists().where(
        ListingFeature.listing_id == Listing.id,
        ListingFeature.feature_id == Feature.id,
        func.lower(Feature.name) == name.lower(),
    )


def has_any_subway_line(line_codes: list[str]) -> ColumnElement[bool]:
    """EXISTS check for at least one of ``line_codes`` on the outer listing."""
    return exists().where(
        ListingSubwayLine.listing_id == Listing.id,
        ListingSubwayLine.subway_line_id == SubwayLine.id,
        SubwayLine.line_code.in_(line_codes),
    )


def compile_listing_filters(params: ListingSearchParams) -> ColumnElement[bool]:
    """
    Build the WHERE clause for the public listing search.

    Features are conjunctive (one EXISTS per requested feature, ANDed) while
    subway lines are disjunctive (any requested line matches). Inactive
    listings are always excluded.

    Args:
        params: Validated public query parameters

    Returns:
        ColumnElement[bool]: predicate over the listings table
    """
    conditions: list[ColumnElement[bool]] = [Listing.is_active.is_(True)]

    if params.min_price is not None:
        conditions.append(Listing.price >= params.min_price)
    if params.max_price is not None:
        conditions.append(Listing.price <= params.max_price)
    if params.min_beds is not None:
        conditions.append(Listing.beds >= params.min_beds)
    if params.min_baths is not None:
        conditions.append(Listing.baths >= params.min_baths)

    boroughs = _lowered(params.boroughs)
    if boroughs:
        conditions.append(
            Listing.borough_id.in_(select(Borough.id).where(func.lower(Borough.name).in_(boroughs)))
        )

    neighborhoods = _lowered(params.neighborhoods)
    if neighborhoods:
        conditions.append(
            Listing.neighborhood_id.in_(
                select(Neighborhood.id).where(func.lower(Neighborhood.name).in_(neighborhoods))
            )
        )

    for feature_name in normalize_names(params.features):
        conditions.append(has_feature(feature_name))

    line_codes = normalize_line_codes(params.subway)
    if line_codes:
        conditions.append(has_any_subway_line(line_codes))

    if params.pets_policy is not None:
        conditions.append(Listing.pets_policy == params.pets_policy)

    return and_(*conditions)


def split_search_terms(query: str) -> list[str]:
    """Split on whitespace, keeping at most MAX_SEARCH_TERMS terms."""
    return [term for term in re.split(r"\s+", query.strip()) if term][:MAX_SEARCH_TERMS]


def _text_matches(text: str) -> list[ColumnElement[bool]]:
    return [
        Listing.title.icontains(text, autoescape=True),
        Listing.address.icontains(text, autoescape=True),
        Listing.neighborhood_id.in_(
            select(Neighborhood.id).where(Neighborhood.name.icontains(text, autoescape=True))
        ),
        Listing.borough_id.in_(
            select(Borough.id).where(Borough.name.icontains(text, autoescape=True))
        ),
    ]


def compile_admin_search(query: Optional[str]) -> ColumnElement[bool]:
    """
    Build the WHERE clause for the admin free-text search.

    The whole query and each of its first six terms are matched as
    case-insensitive substrings of title, address, neighborhood name and
    borough name; any single match qualifies. A query that is a positive
    integer also matches the listing with that id.

    Args:
        query: Raw ``q`` parameter (may be empty)

    Returns:
        ColumnElement[bool]: predicate, or TRUE when the query is empty
    """
    search = (query or "").strip()
    if not search:
        return true()

    clauses = _text_matches(search)
    if search.isascii() and search.isdigit() and int(search) > 0:
        clauses.append(Listing.id == int(search))
    for term in split_search_terms(search):
        clauses.extend(_text_matches(term))

    return or_(*clauses)
