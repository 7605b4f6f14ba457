"""
Content database model.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.content_text import reading_time, strip_markup
from core.domain.content import ContentStatus, ContentTone, ContentType

from .base import Base, TimestampMixin, utc_now

if TYPE_CHECKING:
    from .user import User

EXCERPT_LENGTH = 160


class Content(Base, TimestampMixin):
    """Generated blog content owned by a single user."""

    __tablename__ = "content"
    __table_args__ = (
        Index("ix_content_user_id_status", "user_id", "status"),
        Index("ix_content_user_id_created_at", "user_id", "created_at"),
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Owner
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Content
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    topic: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    # Metadata
    status: Mapped[str] = mapped_column(
        String(20),
        default=ContentStatus.DRAFT.value,
        nullable=False,
        index=True,
    )
    content_type: Mapped[str] = mapped_column(
        String(20),
        default=ContentType.BLOG_POST.value,
        nullable=False,
        index=True,
    )
    tone: Mapped[str] = mapped_column(
        String(50),
        default=ContentTone.PROFESSIONAL.value,
        nullable=False,
    )
    target_audience: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    word_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # AI Generation (primary call only)
    tokens_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    generation_cost: Mapped[Decimal] = mapped_column(
        Numeric(10, 4), default=Decimal("0"), nullable=False
    )
    ai_model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    generation_options: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    quality_analysis: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    """
    Structure (as returned by the quality analysis call):
    {
        "analysis": "Score: 7/10 ...",
        "tokens_used": 512,
        "analyzed_at": "2026-01-01T00:00:00+00:00"
    }
    """

    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    user: Mapped["User"] = relationship("User", back_populates="content_items")

    def __repr__(self) -> str:
        return f"<Content(id={self.id}, slug={self.slug}, status={self.status})>"

    @property
    def reading_time(self) -> int:
        """Estimated minutes to read the body."""
        return reading_time(self.word_count or 0)

    @property
    def excerpt(self) -> str:
        return strip_markup(self.body or "")[:EXCERPT_LENGTH]

    @property
    def quality_score(self) -> Optional[float]:
        """Numeric score, only present when the analysis carries a structured `score`.

        The analysis call returns free text, so this stays None for every
        record the pipeline produces today.
        """
        if isinstance(self.quality_analysis, dict):
            score = self.quality_analysis.get("score")
            if isinstance(score, (int, float)) and not isinstance(score, bool):
                return float(score)
        return None

    @property
    def is_published(self) -> bool:
        return self.status == ContentStatus.PUBLISHED.value

    @property
    def is_draft(self) -> bool:
        return self.status == ContentStatus.DRAFT.value

    def publish(self) -> None:
        """Move to published, stamping published_at only the first time."""
        self.status = ContentStatus.PUBLISHED.value
        if self.published_at is None:
            self.published_at = utc_now()

    def archive(self) -> None:
        self.status = ContentStatus.ARCHIVED.value
