"""
Client for Cloudinary image hosting, built on the ``cloudinary`` SDK.

Only the calls the listing service needs are wrapped: image upload, single
destroy, prefix listing of uploaded resources (cursor paginated) and batch
deletion. Credentials travel with every call instead of living in the SDK's
global config, so a client is constructed explicitly and handed to whatever
needs it, and tests can substitute a fake.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Iterator, Optional

import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
import structlog

from apartment_api import config
from apartment_api.errors import ImageHostError
from apartment_api.metrics import image_host_latency, image_host_requests

logger = structlog.get_logger(__name__)

REQUEST_TIMEOUT = 30
LIST_PAGE_SIZE = 500
DELETE_BATCH_SIZE = 100


class CloudinaryClient:
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "listings",
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    @classmethod
    def from_config(cls) -> Optional["CloudinaryClient"]:
        """
        Build a client from environment configuration.

        Returns:
            Optional[CloudinaryClient]: None unless cloud name, key and secret are all set
        """
        if not (
            config.CLOUDINARY_CLOUD_NAME
            and config.CLOUDINARY_API_KEY
            and config.CLOUDINARY_API_SECRET
        ):
            return None
        return cls(
            cloud_name=config.CLOUDINARY_CLOUD_NAME,
            api_key=config.CLOUDINARY_API_KEY,
            api_secret=config.CLOUDINARY_API_SECRET,
            folder=config.CLOUDINARY_FOLDER,
        )

    @property
    def credentials(self) -> dict[str, Any]:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "secure": True,
            "timeout": REQUEST_TIMEOUT,
        }

    def _call(self, operation: str, func: Callable[..., Any], *args: Any, **options: Any) -> Any:
        """
        Run one SDK call with this client's credentials, recording latency and outcome.

        Raises:
            ImageHostError: when the SDK reports any API or transport failure
        """
        start_time = time.time()
        try:
            result = func(*args, **options, **self.credentials)
        except cloudinary.exceptions.Error as err:
            image_host_requests.labels(operation=operation, status="error").inc()
            logger.warning("image_host_request_failed", operation=operation, error=str(err))
            raise ImageHostError(f"Image host rejected {operation}: {err}") from err
        finally:
            image_host_latency.labels(operation=operation).observe(time.time() - start_time)

        image_host_requests.labels(operation=operation, status="ok").inc()
        return result

    def upload(self, data_uri: str, folder: Optional[str] = None) -> dict[str, Any]:
        """
        Upload an image given as a data URI.

        Args:
            data_uri: ``data:image/...;base64,...`` payload
            folder: Target folder (defaults to the client's folder)

        Returns:
            dict: Upload response; ``secure_url`` and ``public_id`` are always present
        """
        result = self._call(
            "upload",
            cloudinary.uploader.upload,
            data_uri,
            folder=folder or self.folder,
            resource_type="image",
        )

        if not result.get("secure_url") or not result.get("public_id"):
            raise ImageHostError("Image host upload response is missing secure_url or public_id")

        logger.info("image_uploaded", public_id=result["public_id"])
        return dict(result)

    def destroy(self, public_id: str) -> bool:
        """
        Delete a single uploaded image.

        Returns:
            bool: True if the host reported the asset as deleted
        """
        result = self._call(
            "delete", cloudinary.uploader.destroy, public_id, resource_type="image"
        )
        return result.get("result") == "ok"

    def list_resources(self, prefix: str, next_cursor: Optional[str] = None) -> dict[str, Any]:
        """Fetch one page of uploaded images whose public id starts with ``prefix``."""
        options: dict[str, Any] = {
            "type": "upload",
            "resource_type": "image",
            "prefix": prefix,
            "max_results": LIST_PAGE_SIZE,
        }
        if next_cursor:
            options["next_cursor"] = next_cursor
        return dict(self._call("list", cloudinary.api.resources, **options))

    def iter_public_ids(self, folder: Optional[str] = None) -> Iterator[str]:
        """
        Yield every public id under ``<folder>/``, following ``next_cursor`` until exhausted.
        """
        prefix = f"{folder or self.folder}/"
        next_cursor: Optional[str] = None

        while True:
            page = self.list_resources(prefix, next_cursor)
            for resource in page.get("resources") or []:
                public_id = resource.get("public_id")
                if public_id:
                    yield public_id
            next_cursor = page.get("next_cursor")
            if not next_cursor:
                break

    def delete_resources(self, public_ids: list[str]) -> dict[str, str]:
        """
        Delete up to DELETE_BATCH_SIZE images in one admin API call.

        Returns:
            dict[str, str]: the host's per-id status map (``"deleted"``, ``"not_found"``, ...)
        """
        if len(public_ids) > DELETE_BATCH_SIZE:
            raise ValueError(f"At most {DELETE_BATCH_SIZE} public ids per delete call")

        result = self._call(
            "delete",
            cloudinary.api.delete_resources,
            public_ids,
            type="upload",
            resource_type="image",
        )
        return dict(result.get("deleted") or {})
