import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from apartment_api.db.seed import (
    BOROUGH_NEIGHBORHOODS,
    SAMPLE_LISTINGS,
    SUBWAY_LINES,
    seed_listings,
    seed_lookups,
)
from apartment_api.models.listings import Listing
from apartment_api.models.lookups import Borough, SubwayLine


@pytest.mark.integration
def test_seeding_twice_creates_nothing_new(db_engine: Engine) -> None:
    """Test that the seed can be re-run against an already seeded database."""
    with db_engine.begin() as conn:
        seed_lookups(conn)
        first = seed_listings(conn)
    with db_engine.begin() as conn:
        seed_lookups(conn)
        second = seed_listings(conn)

    with db_engine.connect() as conn:
        boroughs = conn.execute(select(func.count()).select_from(Borough)).scalar_one()
        lines = conn.execute(select(func.count()).select_from(SubwayLine)).scalar_one()
        listings = conn.execute(select(func.count()).select_from(Listing)).scalar_one()

    assert first == len(SAMPLE_LISTINGS)
    assert second == 0
    assert boroughs == len(BOROUGH_NEIGHBORHOODS)
    assert lines == len(SUBWAY_LINES)
    assert listings == len(SAMPLE_LISTINGS)
