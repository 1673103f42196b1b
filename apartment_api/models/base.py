from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for the listing marketplace ORM models.

    Lookup tables, listings and their join tables all register on this
    metadata, which Alembic and the test fixtures use to build the schema.
    """

    pass
