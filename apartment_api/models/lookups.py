"""SQLAlchemy models for the lookup tables that listings are tagged with."""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, UniqueConstraint

from apartment_api.models.base import Base


class FeatureType(str, enum.Enum):
    UNIT = "UNIT"
    BUILDING = "BUILDING"


class Borough(Base):
    """
    ORM model for a borough.

    Boroughs are created the first time a listing names them and are never
    deleted. Names are compared case-insensitively on lookup.
    """

    __tablename__ = "boroughs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)


class Neighborhood(Base):
    """ORM model for a neighborhood, scoped to its borough."""

    __tablename__ = "neighborhoods"
    __table_args__ = (UniqueConstraint("borough_id", "name", name="uq_neighborhoods_borough_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    borough_id = Column(
        Integer,
        ForeignKey("boroughs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Feature(Base):
    """ORM model for a named amenity, either of the unit or of the building."""

    __tablename__ = "features"
    __table_args__ = (UniqueConstraint("feature_type", "name", name="uq_features_type_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    feature_type = Column(Enum(FeatureType, name="feature_type"), nullable=False)


class SubwayLine(Base):
    """ORM model for a transit line. line_code is always stored upper-cased."""

    __tablename__ = "subway_lines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    line_code = Column(String, nullable=False, unique=True)
