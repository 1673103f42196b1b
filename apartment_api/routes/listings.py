"""Public, read-only listing search routes."""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from apartment_api.config import PUBLIC_PAGE_SIZE_DEFAULT, PUBLIC_PAGE_SIZE_MAX
from apartment_api.db.readers.listing_filters import csv_to_list
from apartment_api.db.readers.listings import get_filter_vocabulary, search_public_listings
from apartment_api.dependencies import get_db_engine
from apartment_api.metrics import listing_searches
from apartment_api.models.listings import PetsPolicy
from apartment_api.schemas.listings import FilterVocabulary, ListingPage, ListingSearchParams

logger = structlog.get_logger(__name__)
router = APIRouter()


def get_search_params(
    min_price: Optional[int] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[int] = Query(None, alias="maxPrice", ge=0),
    min_beds: Optional[int] = Query(None, alias="minBeds", ge=0),
    min_baths: Optional[int] = Query(None, alias="minBaths", ge=0),
    borough: Optional[list[str]] = Query(None, description="Borough name, repeatable"),
    boroughs: Optional[str] = Query(None, description="Comma-separated borough names"),
    neighborhoods: Optional[str] = Query(None, description="Comma-separated neighborhood names"),
    features: Optional[str] = Query(None, description="Comma-separated features, all required"),
    subway: Optional[str] = Query(None, description="Comma-separated line codes, any matches"),
    pets_policy: Optional[PetsPolicy] = Query(None, alias="petsPolicy"),
    page: int = Query(1, ge=1),
    limit: int = Query(PUBLIC_PAGE_SIZE_DEFAULT, ge=1, le=PUBLIC_PAGE_SIZE_MAX),
) -> ListingSearchParams:
    """Collect the public search query string into ListingSearchParams."""
    borough_names = [part for value in borough or [] for part in csv_to_list(value)]
    borough_names += csv_to_list(boroughs)

    return ListingSearchParams(
        min_price=min_price,
        max_price=max_price,
        min_beds=min_beds,
        min_baths=min_baths,
        boroughs=borough_names,
        neighborhoods=csv_to_list(neighborhoods),
        features=csv_to_list(features),
        subway=csv_to_list(subway),
        pets_policy=pets_policy,
        page=page,
        limit=limit,
    )


@router.get("/listings", response_model=ListingPage)
def list_listings(
    params: ListingSearchParams = Depends(get_search_params),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Search active listings.

    Returns:
        dict: page, limit, total, totalPages and the matching listings, cheapest first
    """
    try:
        with engine.connect() as conn:
            result = search_public_listings(conn, params)
    except Exception as e:
        logger.exception("listing_search_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch listings")

    listing_searches.labels(audience="public").inc()
    return result


@router.get("/listings/filters", response_model=FilterVocabulary)
def list_filter_options(engine: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    """Return every borough, neighborhood, feature, subway line and pets policy a search can use."""
    try:
        with engine.connect() as conn:
            return get_filter_vocabulary(conn)
    except Exception as e:
        logger.exception("filter_vocabulary_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch listing filters")
