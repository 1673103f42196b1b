"""
Internal helpers for the admin listing route handlers.

Translate domain exceptions into HTTP errors so each handler only lists the
exceptions it expects.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from apartment_api.errors import ImageHostError, ListingNotFoundError


def not_found_404(error: ListingNotFoundError) -> HTTPException:
    """
    Build the 404 response for a missing listing.

    Args:
        error: Raised by the service layer

    Returns:
        HTTPException: 404 naming the listing id
    """
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Listing {error.listing_id} not found",
    )


def image_host_400(error: ImageHostError) -> HTTPException:
    """
    Build the response for an image that could not be stored.

    The write cannot proceed without the image, so the client sees why.
    """
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
