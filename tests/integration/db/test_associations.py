"""
Integration tests for feature and subway line synchronization.
"""

from __future__ import annotations

from typing import Callable

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from apartment_api.db.readers.listings import load_associations
from apartment_api.db.writers.associations import sync_listing_associations
from apartment_api.models.listings import ListingFeature, ListingSubwayLine
from apartment_api.models.lookups import Feature


def _associations(engine: Engine, listing_id: int) -> dict[str, list[str]]:
    with engine.connect() as conn:
        return load_associations(conn, [listing_id])[listing_id]


@pytest.mark.integration
def test_sync_links_exactly_the_requested_sets(
    db_engine: Engine, make_listing: Callable[..., int]
) -> None:
    listing_id = make_listing()

    with db_engine.begin() as conn:
        sync_listing_associations(
            conn,
            listing_id,
            unit_features=["Balcony", "balcony", " Dishwasher "],
            building_features=["Gym"],
            subway_lines=["n", "w", "N"],
        )

    assert _associations(db_engine, listing_id) == {
        "unit_features": ["Balcony", "Dishwasher"],
        "building_features": ["Gym"],
        "subway_lines": ["N", "W"],
    }


@pytest.mark.integration
def test_sync_replaces_previous_links(db_engine: Engine, make_listing: Callable[..., int]) -> None:
    """Test that links missing from the new sets are removed and new ones added."""
    listing_id = make_listing(unit_features=["Balcony"], subway_lines=["L", "G"])

    with db_engine.begin() as conn:
        sync_listing_associations(
            conn, listing_id, unit_features=["Terrace"], subway_lines=["G", "M"]
        )

    associations = _associations(db_engine, listing_id)
    assert associations["unit_features"] == ["Terrace"]
    assert associations["subway_lines"] == ["G", "M"]


@pytest.mark.integration
def test_sync_is_idempotent(db_engine: Engine, make_listing: Callable[..., int]) -> None:
    listing_id = make_listing()
    desired = {
        "unit_features": ["Balcony"],
        "building_features": ["Doorman", "Elevator"],
        "subway_lines": ["A", "C"],
    }

    for _ in range(2):
        with db_engine.begin() as conn:
            sync_listing_associations(conn, listing_id, **desired)

    with db_engine.connect() as conn:
        link_count = conn.execute(
            select(func.count()).select_from(ListingFeature).where(
                ListingFeature.listing_id == listing_id
            )
        ).scalar_one()
        line_count = conn.execute(
            select(func.count()).select_from(ListingSubwayLine).where(
                ListingSubwayLine.listing_id == listing_id
            )
        ).scalar_one()
        feature_count = conn.execute(select(func.count()).select_from(Feature)).scalar_one()

    assert link_count == 3
    assert line_count == 2
    assert feature_count == 3


@pytest.mark.integration
def test_sync_with_empty_sets_clears_links(
    db_engine: Engine, make_listing: Callable[..., int]
) -> None:
    listing_id = make_listing(building_features=["Gym"], subway_lines=["7"])

    with db_engine.begin() as conn:
        sync_listing_associations(conn, listing_id)

    assert _associations(db_engine, listing_id) == {
        "unit_features": [],
        "building_features": [],
        "subway_lines": [],
    }
