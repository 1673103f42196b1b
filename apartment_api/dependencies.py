"""
FastAPI dependency providers.

Routes receive the database engine, the image host client and the admin
secret through these providers, so tests can swap each of them with
app.dependency_overrides.
"""

from __future__ import annotations

import hmac
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.engine import Engine

from apartment_api import config
from apartment_api.cloudinary_api.client import CloudinaryClient
from apartment_api.db.engine import engine


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide the database engine.

    Testing Example:
        >>> app.dependency_overrides[get_db_engine] = lambda: test_engine
    """
    yield engine


def get_image_host() -> Optional[CloudinaryClient]:
    """
    Provide an image host client built from environment credentials.

    Returns None when credentials are missing; uploads then fail with a
    configuration error while URL-only writes keep working.
    """
    return CloudinaryClient.from_config()


def get_admin_secret() -> Optional[str]:
    return config.ADMIN_SECRET


def require_admin(
    x_admin_key: Optional[str] = Header(None),
    admin_secret: Optional[str] = Depends(get_admin_secret),
) -> None:
    """
    Guard admin routes with the shared secret in the X-Admin-Key header.

    Raises:
        HTTPException: 503 if the server has no secret configured,
            401 if the header is missing or wrong
    """
    if not admin_secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="ADMIN_SECRET is not configured on the server.",
        )
    if not x_admin_key or not hmac.compare_digest(x_admin_key.encode(), admin_secret.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
