"""
Integration tests for the admin free-text listing search.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pytest
from sqlalchemy.engine import Engine

from apartment_api.db.readers.listings import search_admin_listings
from apartment_api.services.listings import change_listing_status


@pytest.fixture
def listings(make_listing: Callable[..., int]) -> dict[str, int]:
    return {
        "astoria": make_listing(
            title="Sunny studio", address="21-10 Ditmars Blvd", neighborhood="Astoria"
        ),
        "bushwick": make_listing(
            title="Loft with roof deck", borough="Brooklyn", neighborhood="Bushwick"
        ),
        "hidden": make_listing(
            title="Quiet studio", borough="Manhattan", neighborhood="Harlem", is_active=False
        ),
    }


def _search(engine: Engine, query: Optional[str], page: int = 1, limit: int = 25) -> dict[str, Any]:
    with engine.connect() as conn:
        return search_admin_listings(conn, query, page, limit)


def _ids(result: dict[str, Any]) -> set[int]:
    return {listing["id"] for listing in result["data"]}


@pytest.mark.integration
def test_empty_query_returns_everything_newest_first(
    db_engine: Engine, listings: dict[str, int]
) -> None:
    """Test that admins see inactive listings and the latest write comes first."""
    result = _search(db_engine, "")

    assert [listing["id"] for listing in result["data"]] == [
        listings["hidden"],
        listings["bushwick"],
        listings["astoria"],
    ]
    assert result["total"] == 3


@pytest.mark.integration
def test_query_matches_title_address_and_location_names(
    db_engine: Engine, listings: dict[str, int]
) -> None:
    assert _ids(_search(db_engine, "STUDIO")) == {listings["astoria"], listings["hidden"]}
    assert _ids(_search(db_engine, "ditmars")) == {listings["astoria"]}
    assert _ids(_search(db_engine, "harlem")) == {listings["hidden"]}
    assert _ids(_search(db_engine, "brooklyn")) == {listings["bushwick"]}


@pytest.mark.integration
def test_any_term_of_a_multi_word_query_matches(
    db_engine: Engine, listings: dict[str, int]
) -> None:
    assert _ids(_search(db_engine, "loft harlem")) == {listings["bushwick"], listings["hidden"]}


@pytest.mark.integration
def test_numeric_query_matches_listing_id(db_engine: Engine, listings: dict[str, int]) -> None:
    result = _search(db_engine, str(listings["bushwick"]))

    assert listings["bushwick"] in _ids(result)


@pytest.mark.integration
def test_wildcards_in_query_are_literal(db_engine: Engine, listings: dict[str, int]) -> None:
    assert _ids(_search(db_engine, "%")) == set()
    assert _ids(_search(db_engine, "_")) == set()


@pytest.mark.integration
def test_status_change_moves_listing_to_the_top(
    db_engine: Engine, listings: dict[str, int]
) -> None:
    change_listing_status(db_engine, listings["astoria"], False)

    result = _search(db_engine, None, limit=1)
    assert result["data"][0]["id"] == listings["astoria"]
    assert result["data"][0]["is_active"] is False
    assert result["total_pages"] == 3


@pytest.mark.integration
@pytest.mark.parametrize("query", ["²", "٣"])
def test_non_ascii_digit_query_is_plain_text(db_engine: Engine, listings: dict[str, int], query: str) -> None:
    """Test that Unicode digits are matched as text and never treated as a listing id."""
    assert _ids(_search(db_engine, query)) == set()
