"""Derive Cloudinary public ids from delivery URLs."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import unquote, urlparse

HOST_SUFFIX = "cloudinary.com"
VERSION_SEGMENT = re.compile(r"^v\d+$")
FILE_EXTENSION = re.compile(r"\.[a-z0-9]+$", re.IGNORECASE)
MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def extract_public_id(url: Optional[str]) -> Optional[str]:
    """
    Recover the public id Cloudinary assigned to the asset behind ``url``.

    The public id is everything after the ``upload`` path segment, minus an
    optional ``v<digits>`` version segment (and any transformation segments
    before it), minus the file extension, percent-decoded.

    Example:
        >>> extract_public_id(
        ...     "https://res.cloudinary.com/demo/image/upload/v1712/listings/a%20b.jpg"
        ... )
        'listings/a b'
        >>> extract_public_id("https://example.com/image/upload/listings/a.jpg") is None
        True

    Args:
        url: Hosted image URL

    Returns:
        Optional[str]: public id, or None for empty, unparsable or non-Cloudinary URLs
        and for paths with malformed percent-escapes
    """
    if not url:
        return None

    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None

    hostname = parsed.hostname or ""
    if not hostname.endswith(HOST_SUFFIX):
        return None

    parts = [segment for segment in parsed.path.split("/") if segment]
    if "upload" not in parts:
        return None
    candidates = parts[parts.index("upload") + 1 :]
    if not candidates:
        return None

    version_index = next(
        (i for i, segment in enumerate(candidates) if VERSION_SEGMENT.match(segment)), None
    )
    if version_index is not None:
        candidates = candidates[version_index + 1 :]
    if not candidates:
        return None

    candidates[-1] = FILE_EXTENSION.sub("", candidates[-1])
    encoded = "/".join(candidates)
    if MALFORMED_ESCAPE.search(encoded):
        return None
    try:
        public_id = unquote(encoded, errors="strict").strip()
    except UnicodeDecodeError:
        return None
    return public_id or None
