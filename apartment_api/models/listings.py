import enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.sql import func

from apartment_api.models.base import Base


class PetsPolicy(str, enum.Enum):
    ALLOWED = "ALLOWED"
    NOT_ALLOWED = "NOT_ALLOWED"
    CATS_ONLY = "CATS_ONLY"
    DOGS_ONLY = "DOGS_ONLY"
    CASE_BY_CASE = "CASE_BY_CASE"


class Listing(Base):
    """
    ORM model for a rentable unit.

    Each listing sits in one borough and one neighborhood and carries up to
    three hosted images (photo, floorplan, map). Every image is stored as a
    URL plus the image host's public id; both are set together or both null.
    Public search only ever sees rows with is_active = TRUE.
    """

    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_listings_price_non_negative"),
        CheckConstraint("beds IS NULL OR (beds >= 0 AND beds <= 20)", name="ck_listings_beds"),
        CheckConstraint("baths IS NULL OR (baths >= 0 AND baths <= 20)", name="ck_listings_baths"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    address = Column(String, nullable=True)

    image_url = Column(String, nullable=True)
    image_public_id = Column(String, nullable=True)
    floorplan_image_url = Column(String, nullable=True)
    floorplan_image_public_id = Column(String, nullable=True)
    map_image_url = Column(String, nullable=True)
    map_image_public_id = Column(String, nullable=True)

    price = Column(Integer, nullable=False, index=True)
    beds = Column(Numeric(3, 1, asdecimal=False), nullable=True)
    baths = Column(Numeric(3, 1, asdecimal=False), nullable=True)

    borough_id = Column(Integer, ForeignKey("boroughs.id"), nullable=False, index=True)
    neighborhood_id = Column(Integer, ForeignKey("neighborhoods.id"), nullable=False, index=True)

    pets_policy = Column(
        Enum(PetsPolicy, name="pets_policy"),
        nullable=False,
        server_default=PetsPolicy.CASE_BY_CASE.value,
    )
    is_active = Column(Boolean, nullable=False, server_default=text("TRUE"), index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class ListingFeature(Base):
    """Join row linking a listing to a unit or building feature."""

    __tablename__ = "listing_features"

    listing_id = Column(
        Integer, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True
    )
    feature_id = Column(
        Integer, ForeignKey("features.id", ondelete="CASCADE"), primary_key=True, index=True
    )


class ListingSubwayLine(Base):
    """Join row linking a listing to a subway line."""

    __tablename__ = "listing_subway_lines"

    listing_id = Column(
        Integer, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True
    )
    subway_line_id = Column(
        Integer, ForeignKey("subway_lines.id", ondelete="CASCADE"), primary_key=True, index=True
    )


# Image slot name -> (url column, public id column)
IMAGE_SLOTS: dict[str, tuple[str, str]] = {
    "image": ("image_url", "image_public_id"),
    "floorplan_image": ("floorplan_image_url", "floorplan_image_public_id"),
    "map_image": ("map_image_url", "map_image_public_id"),
}
