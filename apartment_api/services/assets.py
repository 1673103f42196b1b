"""
Image asset handling for listing writes.

Turns the image references in an admin payload into stored URLs and public
ids, uploading inline ``data:`` images to the image host, and deletes assets
that a write made unreachable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from apartment_api.cloudinary_api.client import CloudinaryClient
from apartment_api.cloudinary_api.public_id import extract_public_id
from apartment_api.errors import ImageHostError, ImageHostNotConfiguredError
from apartment_api.metrics import asset_cleanup_failures
from apartment_api.models.listings import IMAGE_SLOTS
from apartment_api.schemas.listings import ListingPayload

logger = structlog.get_logger(__name__)

DATA_URI_PREFIX = "data:"


@dataclass(frozen=True)
class ResolvedImage:
    url: Optional[str] = None
    public_id: Optional[str] = None
    uploaded: bool = False


def resolve_image(image_host: Optional[CloudinaryClient], value: Optional[str]) -> ResolvedImage:
    """
    Resolve one user-supplied image reference.

    * empty or missing -> empty result
    * ``data:`` URI -> uploaded to the image host's folder
    * anything else -> kept as a hosted URL, public id derived from it

    Args:
        image_host: Configured client, or None when credentials are missing
        value: Raw payload value

    Returns:
        ResolvedImage: stored URL, public id and whether an upload happened

    Raises:
        ImageHostNotConfiguredError: inline data without an image host
        ImageHostError: the upload failed
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return ResolvedImage()

    if trimmed.startswith(DATA_URI_PREFIX):
        if image_host is None:
            raise ImageHostNotConfiguredError()
        result = image_host.upload(trimmed)
        return ResolvedImage(url=result["secure_url"], public_id=result["public_id"], uploaded=True)

    return ResolvedImage(url=trimmed, public_id=extract_public_id(trimmed))


def resolve_listing_images(
    image_host: Optional[CloudinaryClient], payload: ListingPayload
) -> dict[str, ResolvedImage]:
    """
    Resolve the photo, floorplan and map images of a payload.

    If a later slot fails, images already uploaded for earlier slots are
    deleted before the error propagates.

    Returns:
        dict[str, ResolvedImage]: keyed by image slot name
    """
    resolved: dict[str, ResolvedImage] = {}
    try:
        for slot, (url_column, _) in IMAGE_SLOTS.items():
            resolved[slot] = resolve_image(image_host, getattr(payload, url_column))
    except ImageHostError:
        delete_assets_best_effort(image_host, uploaded_public_ids(resolved), reason="upload_failed")
        raise
    return resolved


def image_columns(resolved: dict[str, ResolvedImage]) -> dict[str, Optional[str]]:
    """Map resolved images onto listing column values."""
    columns: dict[str, Optional[str]] = {}
    for slot, (url_column, public_id_column) in IMAGE_SLOTS.items():
        image = resolved.get(slot, ResolvedImage())
        columns[url_column] = image.url
        columns[public_id_column] = image.public_id
    return columns


def uploaded_public_ids(resolved: dict[str, ResolvedImage]) -> list[str]:
    return [image.public_id for image in resolved.values() if image.uploaded and image.public_id]


def delete_assets_best_effort(
    image_host: Optional[CloudinaryClient], public_ids: Iterable[str], reason: str
) -> int:
    """
    Delete assets one by one, logging failures instead of raising.

    Used after a write has committed (or been abandoned), where a leftover
    asset is only wasted storage and is reclaimed by the orphan cleanup job.

    Args:
        image_host: Configured client, or None
        public_ids: Assets to delete
        reason: Short label for logs (e.g. "replaced", "listing_deleted")

    Returns:
        int: number of assets the host confirmed as deleted
    """
    public_ids = sorted(set(public_ids))
    if not public_ids:
        return 0
    if image_host is None:
        logger.warning("asset_cleanup_skipped", reason=reason, public_ids=public_ids)
        return 0

    deleted = 0
    for public_id in public_ids:
        try:
            if image_host.destroy(public_id):
                deleted += 1
        except ImageHostError as e:
            asset_cleanup_failures.inc()
            logger.warning(
                "asset_cleanup_failed", reason=reason, public_id=public_id, error=str(e)
            )

    logger.info("assets_cleaned_up", reason=reason, requested=len(public_ids), deleted=deleted)
    return deleted
