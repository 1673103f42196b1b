"""Create listing and lookup tables

Revision ID: 3b1f0c2a9d41
Revises:
Create Date: 2026-10-19 10:12:03.418220

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3b1f0c2a9d41"
down_revision = None
branch_labels = None
depends_on = None

FEATURE_TYPES = ("UNIT", "BUILDING")
PETS_POLICIES = ("ALLOWED", "NOT_ALLOWED", "CATS_ONLY", "DOGS_ONLY", "CASE_BY_CASE")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "boroughs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
    )

    op.create_table(
        "neighborhoods",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "borough_id",
            sa.Integer(),
            sa.ForeignKey("boroughs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.UniqueConstraint("borough_id", "name", name="uq_neighborhoods_borough_name"),
    )
    op.create_index("ix_neighborhoods_borough_id", "neighborhoods", ["borough_id"])

    op.create_table(
        "features",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("feature_type", sa.Enum(*FEATURE_TYPES, name="feature_type"), nullable=False),
        sa.UniqueConstraint("feature_type", "name", name="uq_features_type_name"),
    )

    op.create_table(
        "subway_lines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("line_code", sa.String(), nullable=False, unique=True),
    )

    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("image_public_id", sa.String(), nullable=True),
        sa.Column("floorplan_image_url", sa.String(), nullable=True),
        sa.Column("floorplan_image_public_id", sa.String(), nullable=True),
        sa.Column("map_image_url", sa.String(), nullable=True),
        sa.Column("map_image_public_id", sa.String(), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("beds", sa.Numeric(3, 1), nullable=True),
        sa.Column("baths", sa.Numeric(3, 1), nullable=True),
        sa.Column("borough_id", sa.Integer(), sa.ForeignKey("boroughs.id"), nullable=False),
        sa.Column(
            "neighborhood_id", sa.Integer(), sa.ForeignKey("neighborhoods.id"), nullable=False
        ),
        sa.Column(
            "pets_policy",
            sa.Enum(*PETS_POLICIES, name="pets_policy"),
            nullable=False,
            server_default="CASE_BY_CASE",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("TRUE")),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("price >= 0", name="ck_listings_price_non_negative"),
        sa.CheckConstraint("beds IS NULL OR (beds >= 0 AND beds <= 20)", name="ck_listings_beds"),
        sa.CheckConstraint(
            "baths IS NULL OR (baths >= 0 AND baths <= 20)", name="ck_listings_baths"
        ),
    )
    op.create_index("ix_listings_price", "listings", ["price"])
    op.create_index("ix_listings_is_active", "listings", ["is_active"])
    op.create_index("ix_listings_borough_id", "listings", ["borough_id"])
    op.create_index("ix_listings_neighborhood_id", "listings", ["neighborhood_id"])

    op.create_table(
        "listing_features",
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "feature_id",
            sa.Integer(),
            sa.ForeignKey("features.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_listing_features_feature_id", "listing_features", ["feature_id"])

    op.create_table(
        "listing_subway_lines",
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "subway_line_id",
            sa.Integer(),
            sa.ForeignKey("subway_lines.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index(
        "ix_listing_subway_lines_subway_line_id", "listing_subway_lines", ["subway_line_id"]
    )

    # Case-insensitive uniqueness for lookup names (PostgreSQL only)
    if op.get_bind().dialect.name == "postgresql":
        op.execute("CREATE UNIQUE INDEX uq_boroughs_name_lower ON boroughs (lower(name))")
        op.execute(
            "CREATE UNIQUE INDEX uq_neighborhoods_borough_name_lower "
            "ON neighborhoods (borough_id, lower(name))"
        )
        op.execute(
            "CREATE UNIQUE INDEX uq_features_type_name_lower "
            "ON features (feature_type, lower(name))"
        )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("listing_subway_lines")
    op.drop_table("listing_features")
    op.drop_table("listings")
    op.drop_table("subway_lines")
    op.drop_table("features")
    op.drop_table("neighborhoods")
    op.drop_table("boroughs")

    if op.get_bind().dialect.name == "postgresql":
        sa.Enum(name="pets_policy").drop(op.get_bind(), checkfirst=True)
        sa.Enum(name="feature_type").drop(op.get_bind(), checkfirst=True)
