"""create catalog schema

Revision ID: 3f2a9c71d4b8
Revises:
Create Date: 2026-03-02 10:12:41.508113

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f2a9c71d4b8"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False)]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False))
    return columns


def _moderation() -> list:
    return [
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_by_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_pro", sa.Boolean(), nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("verify_token", sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_verify_token", "users", ["verify_token"])

    op.create_table(
        "brands",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        *_moderation(),
        *_timestamps(),
    )
    op.create_index("ix_brands_name", "brands", ["name"])
    op.create_index("ix_brands_slug", "brands", ["slug"], unique=True)
    op.create_index("ix_brands_status", "brands", ["status"])

    op.create_table(
        "lines",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("brand_id", sa.String(length=36), sa.ForeignKey("brands.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(length=1000), nullable=True),
        sa.Column("release_year", sa.Integer(), nullable=True),
        *_moderation(),
        *_timestamps(),
    )
    op.create_index("ix_lines_brand_id", "lines", ["brand_id"])
    op.create_index("ix_lines_slug", "lines", ["slug"], unique=True)
    op.create_index("ix_lines_status", "lines", ["status"])

    op.create_table(
        "series",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_moderation(),
        *_timestamps(),
    )
    op.create_index("ix_series_slug", "series", ["slug"], unique=True)
    op.create_index("ix_series_status", "series", ["status"])

    op.create_table(
        "characters",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("series_id", sa.String(length=36), sa.ForeignKey("series.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(length=1000), nullable=True),
        *_moderation(),
        *_timestamps(),
    )
    op.create_index("ix_characters_series_id", "characters", ["series_id"])
    op.create_index("ix_characters_slug", "characters", ["slug"], unique=True)
    op.create_index("ix_characters_status", "characters", ["status"])

    op.create_table(
        "tags",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_tags_name", "tags", ["name"], unique=True)

    op.create_table(
        "figures",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("brand_id", sa.String(length=36), sa.ForeignKey("brands.id"), nullable=False),
        sa.Column("line_id", sa.String(length=36), sa.ForeignKey("lines.id"), nullable=False),
        sa.Column("character_id", sa.String(length=36), sa.ForeignKey("characters.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sku", sa.String(length=100), nullable=True),
        sa.Column("size", sa.String(length=50), nullable=True),
        sa.Column("height_cm", sa.Float(), nullable=True),
        sa.Column("width_cm", sa.Float(), nullable=True),
        sa.Column("depth_cm", sa.Float(), nullable=True),
        sa.Column("scale", sa.String(length=50), nullable=True),
        sa.Column("material", sa.String(length=255), nullable=True),
        sa.Column("maker", sa.String(length=255), nullable=True),
        sa.Column("price_mxn", sa.Float(), nullable=True),
        sa.Column("price_usd", sa.Float(), nullable=True),
        sa.Column("price_yen", sa.Float(), nullable=True),
        sa.Column("original_price_currency", sa.String(length=3), nullable=False),
        sa.Column("release_year", sa.Integer(), nullable=True),
        sa.Column("release_month", sa.Integer(), nullable=True),
        sa.Column("release_day", sa.Integer(), nullable=True),
        sa.Column("is_released", sa.Boolean(), nullable=False),
        sa.Column("is_nsfw", sa.Boolean(), nullable=False),
        *_moderation(),
        sa.Column("approved_by_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_figures_brand_id", "figures", ["brand_id"])
    op.create_index("ix_figures_line_id", "figures", ["line_id"])
    op.create_index("ix_figures_character_id", "figures", ["character_id"])
    op.create_index("ix_figures_name", "figures", ["name"])
    op.create_index("ix_figures_release_year", "figures", ["release_year"])
    op.create_index("ix_figures_is_released", "figures", ["is_released"])
    op.create_index("ix_figures_status", "figures", ["status"])
    op.create_index("ix_figures_created_at", "figures", ["created_at"])

    op.create_table(
        "figure_images",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="CASCADE"), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_figure_images_figure_id", "figure_images", ["figure_id"])

    op.create_table(
        "figure_variants",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("parent_figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("price_mxn", sa.Float(), nullable=True),
        sa.Column("price_usd", sa.Float(), nullable=True),
        sa.Column("price_yen", sa.Float(), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_figure_variants_parent_figure_id", "figure_variants", ["parent_figure_id"])

    op.create_table(
        "variant_images",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("variant_id", sa.String(length=36), sa.ForeignKey("figure_variants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_variant_images_variant_id", "variant_images", ["variant_id"])

    op.create_table(
        "figure_tags",
        sa.Column("figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", sa.String(length=36), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "figure_series",
        sa.Column("figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("series_id", sa.String(length=36), sa.ForeignKey("series.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "user_figures",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("user_price", sa.Float(), nullable=True),
        sa.Column("preorder_month", sa.String(length=7), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "figure_id", name="uq_user_figure"),
    )
    op.create_index("ix_user_figures_user_id", "user_figures", ["user_id"])
    op.create_index("ix_user_figures_figure_id", "user_figures", ["figure_id"])
    op.create_index("ix_user_figures_status", "user_figures", ["status"])

    op.create_table(
        "lists",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_official", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("created_by_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_lists_is_featured", "lists", ["is_featured"])
    op.create_index("ix_lists_created_by_id", "lists", ["created_by_id"])

    op.create_table(
        "list_items",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("list_id", sa.String(length=36), sa.ForeignKey("lists.id", ondelete="CASCADE"), nullable=False),
        sa.Column("figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="CASCADE"), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("list_id", "figure_id", name="uq_list_figure"),
    )
    op.create_index("ix_list_items_list_id", "list_items", ["list_id"])
    op.create_index("ix_list_items_figure_id", "list_items", ["figure_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "figure_id", name="uq_review_user_figure"),
    )
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_figure_id", "reviews", ["figure_id"])
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"])

    op.create_table(
        "review_images",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("review_id", sa.String(length=36), sa.ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_review_images_review_id", "review_images", ["review_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(length=500), nullable=True),
        sa.Column("figure_id", sa.String(length=36), sa.ForeignKey("figures.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])

    op.create_table(
        "home_sections",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("config", sa.Text(), nullable=False),
        sa.Column("view_all_url", sa.String(length=500), nullable=True),
        sa.Column("is_visible", sa.Boolean(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_home_sections_order", "home_sections", ["order"])

    op.create_table(
        "system_configurations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_system_configurations_key", "system_configurations", ["key"], unique=True)


def downgrade() -> None:
    for table in (
        "system_configurations",
        "home_sections",
        "notifications",
        "review_images",
        "reviews",
        "list_items",
        "lists",
        "user_figures",
        "figure_series",
        "figure_tags",
        "variant_images",
        "figure_variants",
        "figure_images",
        "figures",
        "tags",
        "characters",
        "series",
        "lines",
        "brands",
        "users",
    ):
        op.drop_table(table)
