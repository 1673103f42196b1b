"""Domain exceptions raised below the route layer and mapped to HTTP statuses by the routes."""


class ListingNotFoundError(Exception):
    """Raised when a listing id does not exist."""

    def __init__(self, listing_id: int) -> None:
        super().__init__(f"Listing {listing_id} not found")
        self.listing_id = listing_id


class ImageHostError(Exception):
    """Raised when the image host rejects a request or cannot be reached."""


class ImageHostNotConfiguredError(ImageHostError):
    """Raised when inline image data arrives but no image host credentials are set."""

    def __init__(self) -> None:
        super().__init__("Cloudinary is not configured; cannot upload image data.")
