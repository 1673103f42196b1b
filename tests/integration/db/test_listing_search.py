"""
Integration tests for the public listing search.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from sqlalchemy.engine import Engine

from apartment_api.db.readers.listings import search_public_listings
from apartment_api.schemas.listings import ListingSearchParams


@pytest.fixture
def listings(make_listing: Callable[..., int]) -> dict[str, int]:
    return {
        "astoria": make_listing(
            title="Astoria studio with balcony",
            price=2300,
            beds=0,
            baths=1,
            borough="Queens",
            neighborhood="Astoria",
            pets_policy="CATS_ONLY",
            unit_features=["Balcony", "Dishwasher"],
            building_features=["Elevator"],
            subway_lines=["N", "W"],
        ),
        "williamsburg": make_listing(
            title="Williamsburg 1BR with gym access",
            price=2800,
            beds=1,
            baths=1,
            borough="Brooklyn",
            neighborhood="Williamsburg",
            pets_policy="ALLOWED",
            building_features=["Gym", "Doorman"],
            subway_lines=["L", "G"],
        ),
        "bushwick": make_listing(
            title="Bright 1BR near Jefferson L",
            price=2650,
            beds=1,
            baths=1.5,
            borough="Brooklyn",
            neighborhood="Bushwick",
            unit_features=["Dishwasher"],
            subway_lines=["L", "M"],
        ),
        "inactive": make_listing(
            title="Hidden Astoria deal",
            price=1000,
            beds=3,
            borough="Queens",
            neighborhood="Astoria",
            is_active=False,
            unit_features=["Balcony", "Dishwasher"],
            subway_lines=["N"],
        ),
    }


def _search(engine: Engine, **params: Any) -> dict[str, Any]:
    with engine.connect() as conn:
        return search_public_listings(conn, ListingSearchParams(**params))


def _ids(result: dict[str, Any]) -> list[int]:
    return [listing["id"] for listing in result["data"]]


@pytest.mark.integration
def test_search_returns_active_listings_cheapest_first(
    db_engine: Engine, listings: dict[str, int]
) -> None:
    result = _search(db_engine)

    assert _ids(result) == [listings["astoria"], listings["bushwick"], listings["williamsburg"]]
    assert result["total"] == 3
    assert result["total_pages"] == 1


@pytest.mark.integration
def test_features_are_conjunctive(db_engine: Engine, listings: dict[str, int]) -> None:
    """Test that a listing must carry every requested feature."""
    assert _ids(_search(db_engine, features=["Balcony", "Dishwasher"])) == [listings["astoria"]]
    assert _ids(_search(db_engine, features=["dishwasher"])) == [
        listings["astoria"],
        listings["bushwick"],
    ]
    assert _ids(_search(db_engine, features=["Balcony", "Gym"])) == []


@pytest.mark.integration
def test_subway_lines_are_disjunctive(db_engine: Engine, listings: dict[str, int]) -> None:
    """Test that any one requested line is enough, regardless of case."""
    assert _ids(_search(db_engine, subway=["l", "g"])) == [
        listings["bushwick"],
        listings["williamsburg"],
    ]
    assert _ids(_search(db_engine, subway=["W", "M"])) == [listings["astoria"], listings["bushwick"]]
    assert _ids(_search(db_engine, subway=["Q"])) == []


@pytest.mark.integration
def test_location_filters_ignore_case(db_engine: Engine, listings: dict[str, int]) -> None:
    assert _ids(_search(db_engine, boroughs=["brooklyn"])) == [
        listings["bushwick"],
        listings["williamsburg"],
    ]
    assert _ids(_search(db_engine, boroughs=["Queens", "BROOKLYN"]))[0] == listings["astoria"]
    assert _ids(_search(db_engine, neighborhoods=["bushwick", "Astoria"])) == [
        listings["astoria"],
        listings["bushwick"],
    ]


@pytest.mark.integration
def test_numeric_and_pets_filters(db_engine: Engine, listings: dict[str, int]) -> None:
    assert _ids(_search(db_engine, min_price=2400, max_price=2700)) == [listings["bushwick"]]
    assert _ids(_search(db_engine, min_beds=1, min_baths=1)) == [
        listings["bushwick"],
        listings["williamsburg"],
    ]
    assert _ids(_search(db_engine, min_baths=2)) == []
    assert _ids(_search(db_engine, pets_policy="CATS_ONLY")) == [listings["astoria"]]


@pytest.mark.integration
def test_inactive_listings_never_match(db_engine: Engine, listings: dict[str, int]) -> None:
    result = _search(db_engine, max_price=1500)

    assert result["data"] == []
    assert result["total"] == 0
    assert result["total_pages"] == 1


@pytest.mark.integration
def test_pagination(db_engine: Engine, listings: dict[str, int]) -> None:
    second_page = _search(db_engine, page=2, limit=2)

    assert _ids(second_page) == [listings["williamsburg"]]
    assert second_page["total"] == 3
    assert second_page["total_pages"] == 2

    past_the_end = _search(db_engine, page=5, limit=2)
    assert past_the_end["data"] == []
    assert past_the_end["total"] == 3


@pytest.mark.integration
def test_equal_prices_break_ties_by_newest_id(
    db_engine: Engine, make_listing: Callable[..., int]
) -> None:
    older = make_listing(price=2000)
    newer = make_listing(price=2000)

    assert _ids(_search(db_engine)) == [newer, older]


@pytest.mark.integration
def test_projection_flattens_locations_and_associations(
    db_engine: Engine, listings: dict[str, int]
) -> None:
    listing = _search(db_engine, neighborhoods=["Bushwick"])["data"][0]

    assert listing["borough"] == "Brooklyn"
    assert listing["neighborhood"] == "Bushwick"
    assert listing["baths"] == 1.5
    assert listing["unit_features"] == ["Dishwasher"]
    assert listing["building_features"] == []
    assert listing["subway_lines"] == ["L", "M"]
