"""create locations and items

Revision ID: 4c1e9a7d2b30
Revises:
Create Date: 2026-10-18 00:00:00
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "4c1e9a7d2b30"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "locations",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("parent_location_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_locations"),
        sa.ForeignKeyConstraint(
            ["parent_location_id"], ["locations.id"],
            name="fk_locations_parent_location", ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_locations_parent_location_id", "locations", ["parent_location_id"])

    op.create_table(
        "items",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("location_id", sa.String(255), nullable=False),
        sa.Column(
            "properties",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
            server_default=sa.text("'{}'"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_items"),
        sa.ForeignKeyConstraint(
            ["location_id"], ["locations.id"],
            name="fk_items_location", ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_items_location_id", "items", ["location_id"])


def downgrade() -> None:
    op.drop_index("ix_items_location_id", table_name="items")
    op.drop_table("items")
    op.drop_index("ix_locations_parent_location_id", table_name="locations")
    op.drop_table("locations")
