"""Recipe metadata catalog and recipe metadata columns

Revision ID: 002_metadata_catalog
Revises: 001_initial_schema
Create Date: 2026-10-19

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from recipebox.services.metadata import DEFAULT_NAMES

# revision identifiers, used by Alembic.
revision: str = "002_metadata_catalog"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CATALOG_TABLES = ("classifications", "sources", "meals", "courses", "preparations")


def upgrade() -> None:
    for name in CATALOG_TABLES:
        table = op.create_table(
            name,
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("name", sa.String(100), nullable=False),
            sa.UniqueConstraint("name", name=f"uq_{name}_name"),
        )
        op.bulk_insert(table, [
            {"id": str(uuid.uuid4()), "name": entry} for entry in DEFAULT_NAMES[name]
        ])

    op.add_column("recipes", sa.Column("source_id", sa.String(36), nullable=True))
    op.add_column("recipes", sa.Column("classification_id", sa.String(36), nullable=True))
    op.create_foreign_key(
        "fk_recipes_source_id_sources", "recipes", "sources",
        ["source_id"], ["id"], ondelete="SET NULL",
    )
    op.create_foreign_key(
        "fk_recipes_classification_id_classifications", "recipes", "classifications",
        ["classification_id"], ["id"], ondelete="SET NULL",
    )

    # Existing rows get empty lists
    for column in ("meal_ids", "course_ids", "preparation_ids"):
        op.add_column(
            "recipes",
            sa.Column(column, sa.JSON, nullable=False, server_default=sa.text("'[]'")),
        )
    op.add_column(
        "recipes",
        sa.Column("marked", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.add_column("recipes", sa.Column("date_added", sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    for column in ("date_added", "marked", "preparation_ids", "course_ids", "meal_ids"):
        op.drop_column("recipes", column)
    op.drop_constraint("fk_recipes_classification_id_classifications", "recipes", type_="foreignkey")
    op.drop_constraint("fk_recipes_source_id_sources", "recipes", type_="foreignkey")
    op.drop_column("recipes", "classification_id")
    op.drop_column("recipes", "source_id")
    for name in reversed(CATALOG_TABLES):
        op.drop_table(name)
