"""
Unit tests for deriving Cloudinary public ids from delivery URLs.
"""

from __future__ import annotations

import pytest

from apartment_api.cloudinary_api.public_id import extract_public_id


@pytest.mark.unit
@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "https://res.cloudinary.com/demo/image/upload/v1712345678/listings/astoria-1.jpg",
            "listings/astoria-1",
        ),
        ("https://res.cloudinary.com/demo/image/upload/listings/plan.PNG", "listings/plan"),
        (
            "https://res.cloudinary.com/demo/image/upload/c_fill,w_400/v17/listings/map.webp",
            "listings/map",
        ),
        (
            "https://res.cloudinary.com/demo/image/upload/v1/listings/my%20flat.jpg",
            "listings/my flat",
        ),
        ("https://res.cloudinary.com/demo/image/upload/v1/listings/nested/dir/a.jpg", "listings/nested/dir/a"),
    ],
)
def test_extract_public_id_from_cloudinary_urls(url: str, expected: str) -> None:
    """Test that version, transformations and extension are stripped from the path."""
    assert extract_public_id(url) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "   ",
        "https://example.com/image/upload/v1/listings/a.jpg",
        "https://res.cloudinary.com/demo/image/fetch/listings/a.jpg",
        "https://res.cloudinary.com/demo/image/upload/",
        "https://res.cloudinary.com/demo/image/upload/v123",
        "not a url",
        "https://res.cloudinary.com/demo/image/upload/v1/listings/a%ZZ.jpg",
        "https://res.cloudinary.com/demo/image/upload/v1/listings/50%.jpg",
        "https://res.cloudinary.com/demo/image/upload/v1/listings/%C3%28.jpg",
    ],
)
def test_extract_public_id_returns_none_for_unusable_urls(url: str) -> None:
    """Test that non-Cloudinary, malformed or empty URLs yield no public id."""
    assert extract_public_id(url) is None
