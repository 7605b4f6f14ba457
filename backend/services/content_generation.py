"""
Single-item content generation pipeline.

topic -> article call -> title / meta description / keywords -> cost ->
persisted draft -> generation stats.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from core.content_text import extract_title
from core.domain.content import GenerationOptions
from core.exceptions import EnrichmentError, GenerationError, PersistenceError
from core.interfaces.services import ContentGenerationClient
from core.pricing import CostEstimate, CostEstimator
from infrastructure.config.settings import Settings
from infrastructure.database.models.content import Content
from services.content_store import ContentStore

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class GenerationContext:
    """Per-invocation knobs, passed in rather than read from global settings."""

    timeout_seconds: float = 120.0
    meta_max_length: int = 155
    keyword_count: int = 10
    slug_max_attempts: int = 5
    bulk_delay_seconds: float = 0.5
    max_bulk_topics: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationContext":
        return cls(
            timeout_seconds=settings.generation_timeout_seconds,
            slug_max_attempts=settings.slug_max_attempts,
            bulk_delay_seconds=settings.bulk_delay_ms / 1000,
            max_bulk_topics=settings.max_bulk_topics,
        )


@dataclass
class GenerationStats:
    """Figures for the primary generation call only."""

    tokens_used: int
    model: str
    cost_estimate: CostEstimate
    word_count: int
    reading_time: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokens_used": self.tokens_used,
            "model": self.model,
            "cost_estimate": self.cost_estimate.to_dict(),
            "word_count": self.word_count,
            "reading_time": self.reading_time,
        }


@dataclass
class GenerationOutcome:
    content: Content
    stats: GenerationStats


class ContentGenerationPipeline:
    """
    Orchestrates the generation client calls for one content item.

    Only the article call is fatal. Meta description and keyword extraction
    failures leave their fields empty, and once the overall deadline passes
    the remaining optional calls are skipped while the article is still saved.
    """

    def __init__(
        self,
        db: AsyncSession,
        ai_service: ContentGenerationClient,
        cost_estimator: CostEstimator,
        context: GenerationContext,
        store: Optional[ContentStore] = None,
    ):
        self.db = db
        self.ai_service = ai_service
        self.cost_estimator = cost_estimator
        self.context = context
        self.store = store or ContentStore(db, slug_max_attempts=context.slug_max_attempts)

    @staticmethod
    def _remaining(deadline: float) -> float:
        return max(0.0, deadline - asyncio.get_running_loop().time())

    async def _enrich(
        self,
        step: str,
        call: Callable[[], Awaitable[ResultT]],
        deadline: float,
    ) -> ResultT:
        """Run an optional call within the deadline; raise EnrichmentError on any failure."""
        remaining = self._remaining(deadline)
        if remaining <= 0:
            raise EnrichmentError(f"{step} skipped: generation deadline reached", step, timed_out=True)
        try:
            result = await asyncio.wait_for(call(), timeout=remaining)
        except TimeoutError:
            raise EnrichmentError(f"{step} timed out", step, timed_out=True)
        if result.error is not None:
            raise EnrichmentError(result.error, step)
        return result

    async def generate(
        self,
        user_id: str,
        topic: str,
        options: GenerationOptions,
        title: Optional[str] = None,
        commit: bool = True,
    ) -> GenerationOutcome:
        """
        Generate, enrich and persist one draft.

        Args:
            user_id: Owner of the new content
            topic: Generation seed (already validated by the caller)
            options: Normalized generation options
            title: Explicit title; extracted from the body when omitted
            commit: Commit the insert. Bulk generation shares one transaction.

        Raises:
            GenerationError: The article call failed or timed out
            PersistenceError: The draft could not be saved
        """
        deadline = asyncio.get_running_loop().time() + self.context.timeout_seconds

        try:
            article = await asyncio.wait_for(
                self.ai_service.generate_article(topic, options),
                timeout=self._remaining(deadline),
            )
        except TimeoutError:
            article = None
            error = f"Article generation timed out after {self.context.timeout_seconds}s"
        else:
            error = article.error

        if article is None or error is not None:
            logger.error(
                "Content generation failed for user %s: %s",
                user_id,
                error,
                extra={"user_id": user_id, "topic": topic, "error": error},
            )
            raise GenerationError(error)

        title = title or extract_title(article.content)

        meta_description: Optional[str] = None
        keywords = list(options.keywords)
        optional_steps_open = True

        try:
            meta = await self._enrich(
                "meta description",
                lambda: self.ai_service.generate_meta_description(
                    article.content, self.context.meta_max_length
                ),
                deadline,
            )
            meta_description = meta.meta_description or None
        except EnrichmentError as e:
            self._log_enrichment_failure(e, user_id, topic)
            optional_steps_open = not e.timed_out

        if optional_steps_open and not keywords:
            try:
                extracted = await self._enrich(
                    "keyword extraction",
                    lambda: self.ai_service.extract_keywords(
                        article.content, self.context.keyword_count
                    ),
                    deadline,
                )
                keywords = extracted.keywords
            except EnrichmentError as e:
                self._log_enrichment_failure(e, user_id, topic)

        cost = self.cost_estimator.estimate(article.tokens_used, article.model)

        try:
            content = await self.store.create(
                user_id=user_id,
                title=title,
                topic=topic,
                body=article.content,
                options=options,
                meta_description=meta_description,
                keywords=keywords,
                tokens_used=article.tokens_used,
                generation_cost=cost.total_cost,
                ai_model=article.model,
                commit=commit,
            )
        except PersistenceError as e:
            logger.error(
                "Content generation failed for user %s: %s",
                user_id,
                e,
                extra={"user_id": user_id, "topic": topic, "error": str(e)},
            )
            raise

        logger.info(
            "Content generated successfully: %s (%d tokens, $%s)",
            content.id,
            article.tokens_used,
            cost.total_cost,
            extra={
                "user_id": user_id,
                "content_id": content.id,
                "topic": topic,
                "model": article.model,
                "tokens_used": article.tokens_used,
                "cost": float(cost.total_cost),
            },
        )

        return GenerationOutcome(
            content=content,
            stats=GenerationStats(
                tokens_used=article.tokens_used,
                model=article.model,
                cost_estimate=cost,
                word_count=content.word_count,
                reading_time=content.reading_time,
            ),
        )

    async def analyze_quality(self, user_id: str, content_id: str) -> Content:
        """
        Run the quality analysis call and store its raw result on the item.

        Raises:
            ContentNotFoundError: Not found or not owned by `user_id`
            GenerationError: The analysis call failed or timed out
        """
        content = await self.store.get_for_owner(content_id, user_id)

        try:
            result = await asyncio.wait_for(
                self.ai_service.analyze_quality(content.body),
                timeout=self.context.timeout_seconds,
            )
        except TimeoutError:
            raise GenerationError(
                f"Quality analysis timed out after {self.context.timeout_seconds}s"
            )
        if result.error is not None:
            logger.error(
                "Quality analysis failed for content %s: %s",
                content_id,
                result.error,
                extra={"user_id": user_id, "content_id": content_id, "error": result.error},
            )
            raise GenerationError(result.error)

        logger.info(
            "Quality analysis stored for content %s",
            content_id,
            extra={"user_id": user_id, "content_id": content_id, "tokens_used": result.tokens_used},
        )
        return await self.store.set_quality_analysis(content, result.to_record())

    @staticmethod
    def _log_enrichment_failure(error: EnrichmentError, user_id: str, topic: str) -> None:
        logger.warning(
            "Optional %s failed, continuing without it: %s",
            error.step,
            error,
            extra={"user_id": user_id, "topic": topic, "error": str(error)},
        )
