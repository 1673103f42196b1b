"""
Reference data and sample listings for a fresh database.

Seeding is idempotent: lookups go through the find-or-create helpers and a
sample listing is skipped when one with the same title already exists in the
same neighborhood.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.engine import Connection

from apartment_api.db.writers.associations import sync_listing_associations
from apartment_api.db.writers.listings import insert_listing
from apartment_api.db.writers.lookups import (
    resolve_or_create_borough,
    resolve_or_create_feature,
    resolve_or_create_neighborhood,
    resolve_or_create_subway_line,
)
from apartment_api.models.listings import Listing, PetsPolicy
from apartment_api.models.lookups import FeatureType

logger = structlog.get_logger(__name__)

BOROUGH_NEIGHBORHOODS: dict[str, list[str]] = {
    "Manhattan": [
        "Chelsea", "East Village", "Financial District", "Harlem", "Hell's Kitchen",
        "Lower East Side", "Murray Hill", "SoHo", "Upper East Side", "Upper West Side",
        "Washington Heights", "West Village",
    ],
    "Brooklyn": [
        "Bedford-Stuyvesant", "Bushwick", "Crown Heights", "DUMBO", "Fort Greene",
        "Greenpoint", "Park Slope", "Prospect Heights", "Sunset Park", "Williamsburg",
    ],
    "Queens": [
        "Astoria", "Flushing", "Forest Hills", "Jackson Heights", "Long Island City",
        "Ridgewood", "Sunnyside", "Woodside",
    ],
    "Bronx": ["Concourse", "Fordham", "Mott Haven", "Pelham Bay", "Riverdale"],
    "Staten Island": ["New Dorp", "St. George", "Stapleton", "Tottenville"],
}

UNIT_FEATURES = [
    "Balcony", "City View", "Private Patio", "Storage", "Terrace", "Dishwasher",
    "Washer/Dryer", "Hardwood Floors", "Central Air", "Stainless Steel Appliances",
    "Microwave", "Renovated Kitchen", "Renovated Bathroom", "High Ceilings",
    "Walk-in Closet", "Home Office Nook",
]

BUILDING_FEATURES = [
    "Doorman", "Elevator", "Gym", "Roof Deck", "Package Room", "Bike Storage",
    "Parking", "Laundry Room", "Concierge", "Resident Lounge", "Pool", "Virtual Doorman",
]

SUBWAY_LINES = [
    "1", "2", "3", "4", "5", "6", "7", "A", "B", "C", "D", "E", "F", "G", "J", "L",
    "M", "N", "Q", "R", "S", "W", "Z", "SIR",
]

SAMPLE_LISTINGS: list[dict[str, Any]] = [
    {
        "title": "Bright 1BR near Jefferson L",
        "address": "148 Bleecker Street",
        "price": 2650, "beds": 1, "baths": 1,
        "borough": "Brooklyn", "neighborhood": "Bushwick",
        "pets_policy": PetsPolicy.ALLOWED,
        "unit_features": ["Dishwasher", "Hardwood Floors"],
        "building_features": ["Roof Deck", "Bike Storage"],
        "subway_lines": ["L", "M"],
    },
    {
        "title": "Williamsburg 1BR with gym access",
        "price": 2800, "beds": 1, "baths": 1,
        "borough": "Brooklyn", "neighborhood": "Williamsburg",
        "pets_policy": PetsPolicy.ALLOWED,
        "unit_features": ["Balcony", "Hardwood Floors"],
        "building_features": ["Gym", "Doorman", "Elevator"],
        "subway_lines": ["L", "G"],
    },
    {
        "title": "Astoria studio with balcony",
        "price": 2300, "beds": 0, "baths": 1,
        "borough": "Queens", "neighborhood": "Astoria",
        "pets_policy": PetsPolicy.CATS_ONLY,
        "unit_features": ["Balcony", "Dishwasher"],
        "building_features": ["Elevator"],
        "subway_lines": ["N", "W"],
    },
    {
        "title": "Chelsea 1BR full-service building",
        "price": 3950, "beds": 1, "baths": 1,
        "borough": "Manhattan", "neighborhood": "Chelsea",
        "pets_policy": PetsPolicy.DOGS_ONLY,
        "unit_features": ["Washer/Dryer", "Central Air"],
        "building_features": ["Doorman", "Gym", "Package Room"],
        "subway_lines": ["A", "C", "E"],
    },
    {
        "title": "Riverdale 2BR with parking",
        "price": 2450, "beds": 2, "baths": 1,
        "borough": "Bronx", "neighborhood": "Riverdale",
        "pets_policy": PetsPolicy.NOT_ALLOWED,
        "unit_features": ["Hardwood Floors", "Walk-in Closet"],
        "building_features": ["Parking", "Elevator"],
        "subway_lines": ["1"],
    },
    {
        "title": "Park Slope 2BR near Prospect Park",
        "address": "512 7th Avenue",
        "price": 3890, "beds": 2, "baths": 2,
        "borough": "Brooklyn", "neighborhood": "Park Slope",
        "pets_policy": PetsPolicy.DOGS_ONLY,
        "unit_features": ["Dishwasher", "Walk-in Closet"],
        "building_features": ["Elevator", "Package Room", "Gym"],
        "subway_lines": ["F", "G", "R"],
    },
]


def seed_lookups(conn: Connection) -> None:
    """Create every reference borough, neighborhood, feature and subway line."""
    for borough, neighborhoods in BOROUGH_NEIGHBORHOODS.items():
        borough_id = resolve_or_create_borough(conn, borough)
        for neighborhood in neighborhoods:
            resolve_or_create_neighborhood(conn, borough_id, neighborhood)

    for name in UNIT_FEATURES:
        resolve_or_create_feature(conn, FeatureType.UNIT, name)
    for name in BUILDING_FEATURES:
        resolve_or_create_feature(conn, FeatureType.BUILDING, name)
    for line_code in SUBWAY_LINES:
        resolve_or_create_subway_line(conn, line_code)


def seed_listings(conn: Connection, listings: list[dict[str, Any]] = SAMPLE_LISTINGS) -> int:
    """
    Insert sample listings that are not present yet.

    Returns:
        int: number of listings inserted
    """
    inserted = 0
    for sample in listings:
        borough_id = resolve_or_create_borough(conn, sample["borough"])
        neighborhood_id = resolve_or_create_neighborhood(conn, borough_id, sample["neighborhood"])

        existing = conn.execute(
            select(Listing.id).where(
                Listing.title == sample["title"],
                Listing.borough_id == borough_id,
                Listing.neighborhood_id == neighborhood_id,
            )
        ).scalar()
        if existing is not None:
            continue

        listing_id = insert_listing(
            conn,
            {
                "title": sample["title"],
                "address": sample.get("address"),
                "price": sample["price"],
                "beds": sample.get("beds"),
                "baths": sample.get("baths"),
                "borough_id": borough_id,
                "neighborhood_id": neighborhood_id,
                "pets_policy": sample["pets_policy"],
                "is_active": True,
            },
        )
        sync_listing_associations(
            conn,
            listing_id,
            unit_features=sample["unit_features"],
            building_features=sample["building_features"],
            subway_lines=sample["subway_lines"],
        )
        inserted += 1

    logger.info("sample_listings_seeded", inserted=inserted)
    return inserted
