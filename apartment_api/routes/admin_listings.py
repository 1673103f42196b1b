"""Administrative listing routes, guarded by the X-Admin-Key shared secret."""

from typing import Annotated, Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.engine import Engine

from apartment_api.cloudinary_api.client import CloudinaryClient
from apartment_api.config import ADMIN_PAGE_SIZE_DEFAULT, ADMIN_PAGE_SIZE_MAX
from apartment_api.db.readers.listings import get_listing_detail, search_admin_listings
from apartment_api.dependencies import get_db_engine, get_image_host, require_admin
from apartment_api.errors import ImageHostError, ListingNotFoundError
from apartment_api.metrics import listing_searches, listing_writes
from apartment_api.routes._admin_helpers import image_host_400, not_found_404
from apartment_api.schemas.listings import (
    AdminListingPage,
    ListingEnvelope,
    ListingPayload,
    ListingStatusPayload,
)
from apartment_api.services.listings import (
    change_listing_status,
    create_listing,
    remove_listing,
    replace_listing,
)

logger = structlog.get_logger(__name__)
router = APIRouter(dependencies=[Depends(require_admin)])

ListingId = Annotated[int, Path(gt=0, description="Listing id")]


@router.get("", response_model=AdminListingPage)
def search_listings(
    q: Optional[str] = Query(None, description="Free text: title, address, location or id"),
    page: int = Query(1, ge=1),
    limit: int = Query(ADMIN_PAGE_SIZE_DEFAULT, ge=1, le=ADMIN_PAGE_SIZE_MAX),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Search all listings, active or not, most recently modified first.

    Returns:
        dict: page, limit, total, totalPages and listing summaries
    """
    try:
        with engine.connect() as conn:
            result = search_admin_listings(conn, q, page, limit)
    except Exception as e:
        logger.exception("admin_listing_search_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch admin listings")

    listing_searches.labels(audience="admin").inc()
    return result


@router.get("/{listing_id}", response_model=ListingEnvelope)
def get_listing(
    listing_id: ListingId,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Return one listing with everything an edit form needs."""
    try:
        with engine.connect() as conn:
            listing = get_listing_detail(conn, listing_id)
    except Exception as e:
        logger.exception("admin_listing_fetch_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch listing")

    if listing is None:
        raise not_found_404(ListingNotFoundError(listing_id))
    return {"data": listing}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ListingEnvelope)
def create_listing_endpoint(
    payload: ListingPayload,
    engine: Engine = Depends(get_db_engine),
    image_host: Optional[CloudinaryClient] = Depends(get_image_host),
) -> dict[str, Any]:
    """
    Create a listing.

    Inline ``data:`` images are uploaded first; if the database write then
    fails, the uploads are deleted again.
    """
    try:
        listing = create_listing(engine, image_host, payload)
    except ImageHostError as e:
        listing_writes.labels(operation="create", status="failure").inc()
        raise image_host_400(e)
    except Exception as e:
        logger.exception("listing_create_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create listing")

    return {"data": listing}


@router.patch("/{listing_id}", response_model=ListingEnvelope)
def replace_listing_endpoint(
    payload: ListingPayload,
    listing_id: ListingId,
    engine: Engine = Depends(get_db_engine),
    image_host: Optional[CloudinaryClient] = Depends(get_image_host),
) -> dict[str, Any]:
    """
    Replace every field, image and association of a listing.

    Images the listing no longer uses are deleted from the image host after
    the update commits.
    """
    try:
        listing = replace_listing(engine, image_host, listing_id, payload)
    except ListingNotFoundError as e:
        raise not_found_404(e)
    except ImageHostError as e:
        listing_writes.labels(operation="update", status="failure").inc()
        raise image_host_400(e)
    except Exception as e:
        logger.exception("listing_update_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update listing")

    return {"data": listing}


@router.patch("/{listing_id}/status", response_model=ListingEnvelope)
def update_listing_status(
    payload: ListingStatusPayload,
    listing_id: ListingId,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Show or hide a listing in public search."""
    try:
        listing = change_listing_status(engine, listing_id, payload.is_active)
    except ListingNotFoundError as e:
        raise not_found_404(e)
    except Exception as e:
        logger.exception("listing_status_update_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update listing status")

    return {"data": listing}


@router.delete("/{listing_id}")
def delete_listing_endpoint(
    listing_id: ListingId,
    engine: Engine = Depends(get_db_engine),
    image_host: Optional[CloudinaryClient] = Depends(get_image_host),
) -> dict[str, int]:
    """Delete a listing and the images it referenced."""
    try:
        remove_listing(engine, image_host, listing_id)
    except ListingNotFoundError as e:
        raise not_found_404(e)
    except Exception as e:
        logger.exception("listing_delete_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to delete listing")

    logger.info("listing_removed", listing_id=listing_id)
    return {"deleted": 1, "id": listing_id}
