"""
Administrative listing writes.

Each write resolves images first (uploads happen before any row is touched),
then resolves borough and neighborhood, writes the listing row and replaces
its feature and subway line links in one transaction. Image host cleanup
runs afterwards and never fails the request.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Engine

from apartment_api.cloudinary_api.client import CloudinaryClient
from apartment_api.db.readers.listings import get_listing_detail, get_listing_public_ids
from apartment_api.db.writers.associations import sync_listing_associations
from apartment_api.db.writers.listings import (
    delete_listing,
    insert_listing,
    set_listing_status,
    update_listing,
)
from apartment_api.db.writers.lookups import (
    resolve_or_create_borough,
    resolve_or_create_neighborhood,
)
from apartment_api.errors import ListingNotFoundError
from apartment_api.metrics import listing_writes
from apartment_api.schemas.listings import ListingPayload
from apartment_api.services.assets import (
    ResolvedImage,
    delete_assets_best_effort,
    image_columns,
    resolve_listing_images,
    uploaded_public_ids,
)

logger = structlog.get_logger(__name__)


def _listing_values(
    payload: ListingPayload,
    borough_id: int,
    neighborhood_id: int,
    images: dict[str, ResolvedImage],
) -> dict[str, Any]:
    return {
        "title": payload.title,
        "address": payload.address,
        "price": payload.price,
        "beds": payload.beds,
        "baths": payload.baths,
        "borough_id": borough_id,
        "neighborhood_id": neighborhood_id,
        "pets_policy": payload.pets_policy,
        "is_active": payload.is_active,
        **image_columns(images),
    }


def create_listing(
    engine: Engine, image_host: Optional[CloudinaryClient], payload: ListingPayload
) -> dict[str, Any]:
    """
    Create a listing with its images, location and associations.

    If anything fails after images were uploaded, the uploads are deleted.

    Args:
        engine: SQLAlchemy engine
        image_host: Image host client, or None when not configured
        payload: Validated create payload

    Returns:
        dict: the created listing as read back from the database
    """
    images = resolve_listing_images(image_host, payload)

    try:
        with engine.begin() as conn:
            borough_id = resolve_or_create_borough(conn, payload.borough)
            neighborhood_id = resolve_or_create_neighborhood(conn, borough_id, payload.neighborhood)
            listing_id = insert_listing(
                conn, _listing_values(payload, borough_id, neighborhood_id, images)
            )
            sync_listing_associations(
                conn,
                listing_id,
                unit_features=payload.unit_features,
                building_features=payload.building_features,
                subway_lines=payload.subway_lines,
            )
            created = get_listing_detail(conn, listing_id)
            if created is None:
                raise RuntimeError("Listing create readback returned empty result")
    except Exception:
        listing_writes.labels(operation="create", status="failure").inc()
        delete_assets_best_effort(image_host, uploaded_public_ids(images), reason="create_failed")
        raise

    listing_writes.labels(operation="create", status="success").inc()
    logger.info("listing_created", listing_id=listing_id)
    return created


def replace_listing(
    engine: Engine,
    image_host: Optional[CloudinaryClient],
    listing_id: int,
    payload: ListingPayload,
) -> dict[str, Any]:
    """
    Fully replace a listing's fields, images and associations.

    Assets the listing referenced before and no longer references are deleted
    once the update has committed.

    Raises:
        ListingNotFoundError: no listing has that id
    """
    with engine.connect() as conn:
        previous_public_ids = get_listing_public_ids(conn, listing_id)
    if previous_public_ids is None:
        raise ListingNotFoundError(listing_id)

    images = resolve_listing_images(image_host, payload)

    try:
        with engine.begin() as conn:
            borough_id = resolve_or_create_borough(conn, payload.borough)
            neighborhood_id = resolve_or_create_neighborhood(conn, borough_id, payload.neighborhood)
            if not update_listing(
                conn, listing_id, _listing_values(payload, borough_id, neighborhood_id, images)
            ):
                raise ListingNotFoundError(listing_id)
            sync_listing_associations(
                conn,
                listing_id,
                unit_features=payload.unit_features,
                building_features=payload.building_features,
                subway_lines=payload.subway_lines,
            )
            updated = get_listing_detail(conn, listing_id)
            if updated is None:
                raise ListingNotFoundError(listing_id)
    except Exception:
        listing_writes.labels(operation="update", status="failure").inc()
        delete_assets_best_effort(image_host, uploaded_public_ids(images), reason="update_failed")
        raise

    listing_writes.labels(operation="update", status="success").inc()
    logger.info("listing_updated", listing_id=listing_id)

    current_public_ids = {image.public_id for image in images.values() if image.public_id}
    delete_assets_best_effort(
        image_host, previous_public_ids - current_public_ids, reason="replaced"
    )

    return updated


def change_listing_status(engine: Engine, listing_id: int, is_active: bool) -> dict[str, Any]:
    """
    Toggle a listing's visibility in public search.

    Raises:
        ListingNotFoundError: no listing has that id
    """
    with engine.begin() as conn:
        if not set_listing_status(conn, listing_id, is_active):
            raise ListingNotFoundError(listing_id)
        updated = get_listing_detail(conn, listing_id)
        if updated is None:
            raise ListingNotFoundError(listing_id)

    listing_writes.labels(operation="status", status="success").inc()
    logger.info("listing_status_changed", listing_id=listing_id, is_active=is_active)
    return updated


def remove_listing(
    engine: Engine, image_host: Optional[CloudinaryClient], listing_id: int
) -> None:
    """
    Delete a listing, then the image host assets it referenced.

    Raises:
        ListingNotFoundError: no listing has that id
    """
    with engine.begin() as conn:
        public_ids = get_listing_public_ids(conn, listing_id)
        if public_ids is None or not delete_listing(conn, listing_id):
            raise ListingNotFoundError(listing_id)

    listing_writes.labels(operation="delete", status="success").inc()
    delete_assets_best_effort(image_host, public_ids, reason="listing_deleted")
