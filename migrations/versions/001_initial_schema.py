"""Initial schema with PostGIS extension and the points_of_interest table.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Enable PostGIS extension
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    # ── points_of_interest ────────────────────────────────────────────
    op.create_table(
        "points_of_interest",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "kind",
            sa.Enum("FUEL_STATION", "PARKING_LOT", name="entitykind"),
            nullable=False,
        ),
        sa.Column("external_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("brand", sa.String(64), nullable=True),
        sa.Column("location", Geometry("POINT", srid=4326), nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("price", sa.Float, nullable=True),
        sa.Column("prices", sa.JSON, nullable=False),
        sa.Column("attributes", sa.JSON, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "kind", "external_id", name="uq_poi_kind_external_id"
        ),
        sa.CheckConstraint(
            "price IS NULL OR price >= 0", name="ck_poi_price_non_negative"
        ),
    )
    op.create_index(
        "idx_poi_location",
        "points_of_interest",
        ["location"],
        postgresql_using="gist",
    )
    op.create_index("idx_poi_kind", "points_of_interest", ["kind"])


def downgrade() -> None:
    op.drop_table("points_of_interest")
    op.execute("DROP TYPE IF EXISTS entitykind")
