from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from video_ai.db.base_class import Base


class GeneratedContent(Base):
    """
    One generated quiz or Q&A set for a video.

    Rows are written once and never updated. The (video_identifier, content_type)
    constraint is what makes concurrent first requests for a video converge.
    """
    __tablename__ = "generated_content"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    content_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)

    # sha256(domain|pageUrl|videoSrc), hex
    video_identifier: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    page_title: Mapped[str] = mapped_column(String(512), nullable=False)
    domain: Mapped[str] = mapped_column(String(255), nullable=False)
    page_url: Mapped[str] = mapped_column(Text, nullable=False)
    video_src: Mapped[str] = mapped_column(Text, nullable=False)

    content_type: Mapped[str] = mapped_column(String(8), nullable=False)  # quiz|qa
    generated_json: Mapped[str] = mapped_column(Text, nullable=False)     # JSON string

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("video_identifier", "content_type", name="uq_generated_content_video_type"),
        Index("idx_generated_content_type_created", "content_type", "created_at"),
    )
