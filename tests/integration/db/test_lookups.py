"""
Integration tests for the find-or-create lookup helpers.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from apartment_api.db.writers.lookups import (
    _find_or_create,
    resolve_or_create_borough,
    resolve_or_create_feature,
    resolve_or_create_neighborhood,
    resolve_or_create_subway_line,
)
from apartment_api.models.lookups import Borough, Feature, FeatureType, Neighborhood, SubwayLine


class FirstLookupMisses:
    """Connection wrapper whose first lookup reports no row, as if a concurrent insert won."""

    def __init__(self, conn: Any) -> None:
        self.conn = conn
        self.lookups = 0

    def execute(self, stmt: Any) -> Any:
        if self.lookups == 0 and stmt.is_select:
            self.lookups += 1
            return Mock(scalar=Mock(return_value=None))
        return self.conn.execute(stmt)

    def begin_nested(self) -> Any:
        return self.conn.begin_nested()


@pytest.mark.integration
def test_borough_lookup_is_case_insensitive(db_engine: Engine) -> None:
    with db_engine.begin() as conn:
        first = resolve_or_create_borough(conn, "Queens")
        second = resolve_or_create_borough(conn, "  QUEENS ")
        names = conn.execute(select(Borough.name)).scalars().all()

    assert first == second
    assert names == ["Queens"]


@pytest.mark.integration
def test_neighborhoods_are_scoped_to_their_borough(db_engine: Engine) -> None:
    """Test that the same neighborhood name under two boroughs creates two rows."""
    with db_engine.begin() as conn:
        queens = resolve_or_create_borough(conn, "Queens")
        brooklyn = resolve_or_create_borough(conn, "Brooklyn")
        a = resolve_or_create_neighborhood(conn, queens, "Downtown")
        b = resolve_or_create_neighborhood(conn, brooklyn, "Downtown")
        again = resolve_or_create_neighborhood(conn, queens, "downtown")
        count = conn.execute(select(func.count()).select_from(Neighborhood)).scalar_one()

    assert a != b
    assert again == a
    assert count == 2


@pytest.mark.integration
def test_features_are_scoped_to_their_type(db_engine: Engine) -> None:
    with db_engine.begin() as conn:
        unit = resolve_or_create_feature(conn, FeatureType.UNIT, "Storage")
        building = resolve_or_create_feature(conn, FeatureType.BUILDING, "Storage")
        unit_again = resolve_or_create_feature(conn, FeatureType.UNIT, "storage")
        count = conn.execute(select(func.count()).select_from(Feature)).scalar_one()

    assert unit != building
    assert unit_again == unit
    assert count == 2


@pytest.mark.integration
def test_subway_line_codes_are_upper_cased(db_engine: Engine) -> None:
    with db_engine.begin() as conn:
        first = resolve_or_create_subway_line(conn, "n")
        second = resolve_or_create_subway_line(conn, "N")
        codes = conn.execute(select(SubwayLine.line_code)).scalars().all()

    assert first == second
    assert codes == ["N"]


@pytest.mark.integration
def test_concurrent_create_conflict_returns_the_existing_row(db_engine: Engine) -> None:
    """
    Test that a unique-constraint conflict on create falls back to the row
    the other writer inserted, leaving the outer transaction usable.
    """
    with db_engine.begin() as conn:
        winner = resolve_or_create_borough(conn, "Bronx")
        lookup = select(Borough.id).where(Borough.name == "Bronx").limit(1)

        resolved = _find_or_create(FirstLookupMisses(conn), Borough, lookup, {"name": "Bronx"})
        later = resolve_or_create_borough(conn, "Staten Island")
        count = conn.execute(select(func.count()).select_from(Borough)).scalar_one()

    assert resolved == winner
    assert later != winner
    assert count == 2
