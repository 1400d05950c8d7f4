"""create catalog tables

Revision ID: 5c2f0e9a41d7
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c2f0e9a41d7"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ANONYMOUS_USER_ID = 1


def upgrade() -> None:
    """Create users, assets, posts, tags and taggings, and seed the anonymous user."""
    users = op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "assets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("object_key", sa.String(255), nullable=False, unique=True),
        sa.Column("preview_image_url", sa.Text(), nullable=False),
        sa.Column("props_name", sa.Text(), nullable=True),
        sa.Column("props_sound", sa.Integer(), nullable=True),
        sa.Column("props_layer_count", sa.Integer(), nullable=True),
        sa.CheckConstraint(
            "props_sound IS NULL OR (props_sound >= 0 AND props_sound < 13)",
            name="ck_assets_props_sound",
        ),
        sa.CheckConstraint(
            "props_layer_count IS NULL OR props_layer_count >= 0",
            name="ck_assets_props_layer_count",
        ),
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "asset_id",
            sa.Integer(),
            sa.ForeignKey("assets.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.CheckConstraint("title <> ''", name="ck_posts_title_not_empty"),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"])
    op.create_index("ix_posts_created_at", "posts", [sa.text("created_at DESC")])

    op.create_table(
        "tags",
        sa.Column("name", sa.Text(), primary_key=True),
    )

    op.create_table(
        "taggings",
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("tag_name", sa.Text(), sa.ForeignKey("tags.name"), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_taggings_tag_name", "taggings", ["tag_name"])

    # Owner of uploads made without signing in; "!" is not a valid bcrypt hash,
    # so nobody can sign in as this user.
    op.bulk_insert(
        users,
        [{"id": ANONYMOUS_USER_ID, "username": "anonymous", "hashed_password": "!"}],
    )
    op.execute(
        "SELECT setval(pg_get_serial_sequence('users', 'id'), "
        "(SELECT MAX(id) FROM users))"
    )


def downgrade() -> None:
    """Drop all catalog tables."""
    op.drop_index("ix_taggings_tag_name", table_name="taggings")
    op.drop_table("taggings")
    op.drop_table("tags")
    op.drop_index("ix_posts_created_at", table_name="posts")
    op.drop_index("ix_posts_user_id", table_name="posts")
    op.drop_table("posts")
    op.drop_table("assets")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
