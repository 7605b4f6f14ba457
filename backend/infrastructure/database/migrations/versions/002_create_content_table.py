"""Create content table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "content",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("topic", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("keywords", postgresql.JSON(), nullable=False, server_default="[]"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("content_type", sa.String(length=20), nullable=False, server_default="blog_post"),
        sa.Column("tone", sa.String(length=50), nullable=False, server_default="professional"),
        sa.Column("target_audience", sa.String(length=100), nullable=True),
        sa.Column("word_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tokens_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "generation_cost",
            sa.Numeric(precision=10, scale=4),
            nullable=False,
            server_default="0",
        ),
        sa.Column("ai_model", sa.String(length=100), nullable=True),
        sa.Column("generation_options", postgresql.JSON(), nullable=True),
        sa.Column("quality_analysis", postgresql.JSON(), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_content_slug", "content", ["slug"], unique=True)
    op.create_index("ix_content_status", "content", ["status"])
    op.create_index("ix_content_content_type", "content", ["content_type"])
    op.create_index("ix_content_user_id_status", "content", ["user_id", "status"])
    op.create_index("ix_content_user_id_created_at", "content", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_content_user_id_created_at", table_name="content")
    op.drop_index("ix_content_user_id_status", table_name="content")
    op.drop_index("ix_content_content_type", table_name="content")
    op.drop_index("ix_content_status", table_name="content")
    op.drop_index("ix_content_slug", table_name="content")
    op.drop_table("content")
