"""
Shared fixtures.

Tests run against an in-memory SQLite database unless TEST_DATABASE_URL points
somewhere else; the variable must be set before any apartment_api module is
imported because the engine is built at import time.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", "sqlite://")

from typing import Any, Callable, Generator, Iterator, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from apartment_api.db.engine import engine  # noqa: E402
from apartment_api.dependencies import get_admin_secret, get_image_host  # noqa: E402
from apartment_api.errors import ImageHostError  # noqa: E402
from apartment_api.main import app  # noqa: E402
from apartment_api.models.base import Base  # noqa: E402
from apartment_api.schemas.listings import ListingPayload  # noqa: E402
from apartment_api.services.listings import create_listing  # noqa: E402

ADMIN_KEY = "test-admin-key"


class FakeImageHost:
    """
    In-memory stand-in for CloudinaryClient.

    Uploaded ids are ``<folder>/upload-<n>``; ``stored`` holds what the host
    currently keeps, so deletes and folder listings behave like the real API.
    """

    def __init__(self, folder: str = "listings") -> None:
        self.folder = folder
        self.stored: list[str] = []
        self.uploads: list[str] = []
        self.destroyed: list[str] = []
        self.fail_upload_number: Optional[int] = None
        self.fail_destroy = False

    def upload(self, data_uri: str, folder: Optional[str] = None) -> dict[str, Any]:
        number = len(self.uploads) + 1
        if self.fail_upload_number == number:
            raise ImageHostError("Image host rejected upload: Invalid image file")
        public_id = f"{folder or self.folder}/upload-{number}"
        self.uploads.append(public_id)
        self.stored.append(public_id)
        return {
            "public_id": public_id,
            "secure_url": f"https://res.cloudinary.com/demo/image/upload/v1700000000/{public_id}.jpg",
        }

    def destroy(self, public_id: str) -> bool:
        if self.fail_destroy:
            raise ImageHostError("Image host request failed: timeout")
        self.destroyed.append(public_id)
        if public_id in self.stored:
            self.stored.remove(public_id)
            return True
        return False

    def iter_public_ids(self, folder: Optional[str] = None) -> Iterator[str]:
        prefix = f"{folder or self.folder}/"
        return iter([public_id for public_id in self.stored if public_id.startswith(prefix)])

    def delete_resources(self, public_ids: list[str]) -> dict[str, str]:
        statuses: dict[str, str] = {}
        for public_id in public_ids:
            if public_id in self.stored:
                self.stored.remove(public_id)
                statuses[public_id] = "deleted"
            else:
                statuses[public_id] = "not_found"
        return statuses


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Create every table before the test and drop them afterwards."""
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture
def client(db_engine: Engine, image_host: FakeImageHost) -> Generator[TestClient, None, None]:
    """FastAPI test client with the image host and admin secret overridden."""
    app.dependency_overrides[get_image_host] = lambda: image_host
    app.dependency_overrides[get_admin_secret] = lambda: ADMIN_KEY
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def make_listing(db_engine: Engine) -> Callable[..., int]:
    """
    Factory creating a listing through the service layer.

    Returns the new listing id. Keyword arguments override the defaults and
    use ListingPayload's snake_case field names.
    """

    def _make(**overrides: Any) -> int:
        fields: dict[str, Any] = {
            "title": "Test listing",
            "price": 2000,
            "borough": "Queens",
            "neighborhood": "Astoria",
        }
        fields.update(overrides)
        created = create_listing(db_engine, None, ListingPayload(**fields))
        return int(created["id"])

    return _make
