"""Initial schema with users, recipes, cookbooks

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("subscription_tier", sa.Integer, nullable=False, server_default="0"),
        sa.Column("subscription_status", sa.String(40), nullable=False, server_default="active"),
        sa.Column("subscription_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_override", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Recipes table
    op.create_table(
        "recipes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("ingredients", sa.Text, nullable=False),
        sa.Column("instructions", sa.Text, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("servings", sa.Integer, nullable=True),
        sa.Column("tags", sa.JSON, nullable=True),
        sa.Column("calories", sa.Integer, nullable=True),
        sa.Column("fat", sa.Float, nullable=True),
        sa.Column("cholesterol", sa.Float, nullable=True),
        sa.Column("sodium", sa.Float, nullable=True),
        sa.Column("protein", sa.Float, nullable=True),
        sa.Column("is_private", sa.Boolean, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_recipes_user_id", "recipes", ["user_id"])

    # Cookbooks table, recipe_refs is the ordered [{recipe_id, order}] list
    op.create_table(
        "cookbooks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("cover_image", sa.String(500), nullable=True),
        sa.Column("is_private", sa.Boolean, nullable=True),
        sa.Column("recipe_refs", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_cookbooks_user_id", "cookbooks", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_cookbooks_user_id", table_name="cookbooks")
    op.drop_table("cookbooks")
    op.drop_index("ix_recipes_user_id", table_name="recipes")
    op.drop_table("recipes")
    op.drop_table("users")
