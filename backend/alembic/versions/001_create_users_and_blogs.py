"""Create users and blogs tables

Revision ID: 001
Revises: None
Create Date: 2024-06-10 00:00:00.000000+00:00

What:  Initial schema: `users` (unique username, bcrypt hash) and `blogs`.
       blogs.author is plain text with no foreign key to users.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "username",
            sa.String(255),
            nullable=False,
            comment="Login name, unique across all users",
        ),
        sa.Column(
            "password",
            sa.String(255),
            nullable=False,
            comment="Salted bcrypt hash of the password",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "blogs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "author",
            sa.String(255),
            nullable=False,
            comment="Username of the writer; not validated against users",
        ),
        sa.Column("category", sa.String(255), nullable=False),
        sa.Column("external_link", sa.Text(), nullable=True),
        sa.Column(
            "image",
            sa.String(512),
            nullable=True,
            comment="URL path of the uploaded image, e.g. /uploads/1718000000000-ab12cd34.png",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_blogs"),
    )
    op.create_index("ix_blogs_author", "blogs", ["author"])


def downgrade() -> None:
    op.drop_index("ix_blogs_author", table_name="blogs")
    op.drop_table("blogs")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
