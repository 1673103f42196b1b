from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StringConstraints
from pydantic.alias_generators import to_camel

from apartment_api.config import PUBLIC_PAGE_SIZE_DEFAULT, PUBLIC_PAGE_SIZE_MAX
from apartment_api.models.listings import PetsPolicy

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base for request/response bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ListingSearchParams(BaseModel):
    """
    Validated public search parameters.

    List-valued filters have already been split from their comma-separated
    query string form.
    """

    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    min_beds: Optional[int] = Field(None, ge=0)
    min_baths: Optional[int] = Field(None, ge=0)
    boroughs: list[str] = Field(default_factory=list)
    neighborhoods: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    subway: list[str] = Field(default_factory=list)
    pets_policy: Optional[PetsPolicy] = None
    page: int = Field(1, ge=1)
    limit: int = Field(PUBLIC_PAGE_SIZE_DEFAULT, ge=1, le=PUBLIC_PAGE_SIZE_MAX)


class ListingPayload(CamelModel):
    """
    Schema for creating a listing or fully replacing an existing one.

    Image fields accept either a hosted URL or a ``data:`` URI to upload.
    """

    title: NonEmptyStr = Field(..., description="Listing headline")
    address: Optional[NonEmptyStr] = Field(None, description="Street address")
    image_url: Optional[NonEmptyStr] = Field(None, description="Photo URL or data URI")
    floorplan_image_url: Optional[NonEmptyStr] = Field(None, description="Floorplan URL or data URI")
    map_image_url: Optional[NonEmptyStr] = Field(None, description="Map URL or data URI")
    price: int = Field(..., ge=0, description="Monthly rent")
    beds: Optional[float] = Field(None, ge=0, le=20)
    baths: Optional[float] = Field(None, ge=0, le=20)
    borough: NonEmptyStr = Field(..., description="Borough name, created if unknown")
    neighborhood: NonEmptyStr = Field(..., description="Neighborhood name, created if unknown")
    pets_policy: PetsPolicy = PetsPolicy.CASE_BY_CASE
    is_active: bool = True
    unit_features: list[NonEmptyStr] = Field(default_factory=list)
    building_features: list[NonEmptyStr] = Field(default_factory=list)
    subway_lines: list[NonEmptyStr] = Field(default_factory=list)


class ListingStatusPayload(CamelModel):
    is_active: StrictBool


class ListingOut(CamelModel):
    """Listing as shown to the public: related rows flattened to display names."""

    id: int
    title: str
    address: Optional[str] = None
    image_url: Optional[str] = None
    floorplan_image_url: Optional[str] = None
    map_image_url: Optional[str] = None
    price: int
    beds: Optional[float] = None
    baths: Optional[float] = None
    borough: str
    neighborhood: str
    pets_policy: PetsPolicy
    unit_features: list[str] = Field(default_factory=list)
    building_features: list[str] = Field(default_factory=list)
    subway_lines: list[str] = Field(default_factory=list)


class ListingDetail(ListingOut):
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ListingPage(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    data: list[ListingOut]


class AdminListingSummary(CamelModel):
    id: int
    title: str
    address: Optional[str] = None
    price: int
    is_active: bool
    borough: str
    neighborhood: str
    updated_at: Optional[datetime] = None


class AdminListingPage(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    data: list[AdminListingSummary]


class ListingEnvelope(CamelModel):
    data: ListingDetail


class FilterVocabulary(CamelModel):
    """Everything a search UI needs to render its filter controls."""

    boroughs: list[str]
    neighborhoods_by_borough: dict[str, list[str]]
    unit_features: list[str]
    building_features: list[str]
    subway_lines: list[str]
    borough_subway_lines: dict[str, list[str]]
    pets_policies: list[PetsPolicy]
