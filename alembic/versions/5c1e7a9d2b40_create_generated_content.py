"""create generated_content

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-12 10:14:02.518341

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1e7a9d2b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "generated_content",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("content_id", sa.String(length=36), nullable=False),
        sa.Column("video_identifier", sa.String(length=64), nullable=False),
        sa.Column("page_title", sa.String(length=512), nullable=False),
        sa.Column("domain", sa.String(length=255), nullable=False),
        sa.Column("page_url", sa.Text(), nullable=False),
        sa.Column("video_src", sa.Text(), nullable=False),
        sa.Column("content_type", sa.String(length=8), nullable=False),
        sa.Column("generated_json", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        # one quiz and one qa per video; concurrent first requests converge here
        sa.UniqueConstraint("video_identifier", "content_type", name="uq_generated_content_video_type"),
    )
    op.create_index("ix_generated_content_content_id", "generated_content", ["content_id"], unique=True)
    op.create_index("ix_generated_content_video_identifier", "generated_content", ["video_identifier"])
    op.create_index("idx_generated_content_type_created", "generated_content", ["content_type", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_generated_content_type_created", table_name="generated_content")
    op.drop_index("ix_generated_content_video_identifier", table_name="generated_content")
    op.drop_index("ix_generated_content_content_id", table_name="generated_content")
    op.drop_table("generated_content")
