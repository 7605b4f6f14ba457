"""
Content record store.

Owns every read and write of Content rows: creation with globally unique
slugs, ownership-scoped lookups, filtered listing, partial updates and
per-user statistics.
"""

import logging
from collections import Counter
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.utils import escape_like
from core.content_text import count_words, slugify
from core.domain.content import ContentStatus, GenerationOptions
from core.exceptions import ContentNotFoundError, PersistenceError
from infrastructure.database.models.content import Content

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 50

UPDATABLE_FIELDS = {"title", "body", "meta_description", "keywords", "status"}
DEFAULT_SLUG_ATTEMPTS = 5


def _is_uuid(value: str) -> bool:
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


def _is_slug_conflict(error: IntegrityError) -> bool:
    """True for a unique violation on content.slug, not other constraints."""
    message = str(error.orig).lower()
    return "slug" in message and ("unique" in message or "duplicate" in message)


class ContentStore:
    """Persistence operations for Content, always scoped to an owner."""

    def __init__(self, db: AsyncSession, slug_max_attempts: int = DEFAULT_SLUG_ATTEMPTS):
        self.db = db
        self.slug_max_attempts = slug_max_attempts

    async def next_free_slug(self, base: str) -> str:
        """Return `base` if unused, otherwise `base-N` with the smallest free N."""
        result = await self.db.execute(
            select(Content.slug).where(
                or_(
                    Content.slug == base,
                    Content.slug.like(f"{escape_like(base)}-%", escape="\\"),
                )
            )
        )
        taken = set(result.scalars().all())
        if base not in taken:
            return base

        suffix = 1
        while f"{base}-{suffix}" in taken:
            suffix += 1
        return f"{base}-{suffix}"

    async def create(
        self,
        *,
        user_id: str,
        title: str,
        topic: str,
        body: str,
        options: GenerationOptions,
        meta_description: Optional[str] = None,
        keywords: Optional[list[str]] = None,
        tokens_used: int = 0,
        generation_cost: Decimal = Decimal("0"),
        ai_model: Optional[str] = None,
        commit: bool = True,
    ) -> Content:
        """
        Insert a new draft.

        The slug is chosen and inserted inside a SAVEPOINT; a unique-constraint
        conflict from a concurrent writer rolls back only that savepoint and the
        next free suffix is tried, up to `slug_max_attempts` times.

        Args:
            commit: Commit immediately. Bulk generation passes False so the
                whole batch shares the caller's transaction.

        Raises:
            PersistenceError: Slug retries exhausted or the database write failed
        """
        base_slug = slugify(title)

        for attempt in range(1, self.slug_max_attempts + 1):
            try:
                slug = await self.next_free_slug(base_slug)
                content = Content(
                    user_id=user_id,
                    title=title,
                    slug=slug,
                    topic=topic,
                    body=body,
                    meta_description=meta_description,
                    keywords=list(keywords or []),
                    status=ContentStatus.DRAFT.value,
                    content_type=options.content_type.value,
                    tone=options.tone,
                    target_audience=options.target_audience,
                    word_count=count_words(body),
                    tokens_used=tokens_used,
                    generation_cost=generation_cost,
                    ai_model=ai_model,
                    generation_options=options.snapshot(),
                )
                async with self.db.begin_nested():
                    self.db.add(content)
            except IntegrityError as e:
                if not _is_slug_conflict(e):
                    raise PersistenceError(f"Failed to save content: {e.orig}") from e
                logger.warning(
                    "Slug conflict on %r (attempt %d/%d), retrying",
                    base_slug, attempt, self.slug_max_attempts,
                )
                continue
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to save content: {e}") from e

            if commit:
                try:
                    await self.db.commit()
                except SQLAlchemyError as e:
                    await self.db.rollback()
                    raise PersistenceError(f"Failed to save content: {e}") from e
            return content

        raise PersistenceError(
            f"Could not allocate a unique slug for {base_slug!r} "
            f"after {self.slug_max_attempts} attempts"
        )

    async def get_for_owner(self, content_id: str, user_id: str) -> Content:
        """
        Fetch one item owned by `user_id`.

        Raises:
            ContentNotFoundError: Missing, malformed id, or owned by someone else
        """
        if not _is_uuid(content_id):
            raise ContentNotFoundError(content_id)

        result = await self.db.execute(
            select(Content).where(
                Content.id == content_id,
                Content.user_id == user_id,
            )
        )
        content = result.scalar_one_or_none()
        if not content:
            raise ContentNotFoundError(content_id)
        return content

    async def list_for_owner(
        self,
        user_id: str,
        status: Optional[str] = None,
        content_type: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[Content], int]:
        """
        List an owner's content, newest first.

        Returns:
            Tuple of (items on the requested page, total matching items)
        """
        per_page = max(1, min(per_page, MAX_PAGE_SIZE))
        page = max(1, page)

        query = select(Content).where(Content.user_id == user_id)
        if status:
            query = query.where(Content.status == status)
        if content_type:
            query = query.where(Content.content_type == content_type)
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.where(
                or_(
                    Content.title.ilike(pattern, escape="\\"),
                    Content.topic.ilike(pattern, escape="\\"),
                    Content.body.ilike(pattern, escape="\\"),
                )
            )

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        query = query.order_by(Content.created_at.desc(), Content.id)
        query = query.offset((page - 1) * per_page).limit(per_page)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def update(self, content: Content, changes: dict[str, Any]) -> Content:
        """
        Apply a partial update.

        `word_count` is recomputed whenever the body changes and
        `published_at` is stamped only on the first move into published.
        """
        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "status":
                if value == ContentStatus.PUBLISHED.value:
                    content.publish()
                elif value == ContentStatus.ARCHIVED.value:
                    content.archive()
                else:
                    content.status = value
                continue
            if field == "keywords":
                value = list(value or [])
            setattr(content, field, value)

        if "body" in changes:
            content.word_count = count_words(content.body)

        await self.db.commit()
        await self.db.refresh(content)
        return content

    async def set_quality_analysis(self, content: Content, analysis: dict[str, Any]) -> Content:
        content.quality_analysis = analysis
        await self.db.commit()
        await self.db.refresh(content)
        return content

    async def delete(self, content: Content) -> None:
        """Permanently remove an item."""
        await self.db.delete(content)
        await self.db.commit()

    async def stats_for_owner(self, user_id: str) -> dict[str, Any]:
        """Aggregate counts and totals for an owner's library."""
        owner_filter = Content.user_id == user_id

        status_rows = await self.db.execute(
            select(Content.status, func.count(Content.id))
            .where(owner_filter)
            .group_by(Content.status)
        )
        by_status = {row[0]: row[1] for row in status_rows.all()}

        totals = (
            await self.db.execute(
                select(
                    func.coalesce(func.sum(Content.word_count), 0),
                    func.coalesce(func.sum(Content.tokens_used), 0),
                    func.coalesce(func.sum(Content.generation_cost), 0),
                ).where(owner_filter)
            )
        ).one()

        type_rows = await self.db.execute(
            select(Content.content_type, func.count(Content.id))
            .where(owner_filter)
            .group_by(Content.content_type)
        )

        # Bucketed in Python so the query stays portable across backends
        created = await self.db.execute(select(Content.created_at).where(owner_filter))
        by_month = Counter(ts.strftime("%Y-%m") for ts in created.scalars().all() if ts)

        total_cost = Decimal(str(totals[2])).quantize(Decimal("0.0001"))

        return {
            "total_content": sum(by_status.values()),
            "published_content": by_status.get(ContentStatus.PUBLISHED.value, 0),
            "draft_content": by_status.get(ContentStatus.DRAFT.value, 0),
            "archived_content": by_status.get(ContentStatus.ARCHIVED.value, 0),
            "total_words": int(totals[0]),
            "total_tokens_used": int(totals[1]),
            "total_cost": float(total_cost),
            "content_by_type": {row[0]: row[1] for row in type_rows.all()},
            "content_by_month": dict(sorted(by_month.items())),
        }
