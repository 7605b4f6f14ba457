"""
Bulk Content Generation Service.

Runs the single-item pipeline over a list of topics, one at a time, with a
fixed pause between topics to stay under the provider's rate limits.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import GenerationOptions
from core.exceptions import GenerationError, PersistenceError
from infrastructure.database.models.content import Content
from services.content_generation import ContentGenerationPipeline

logger = logging.getLogger(__name__)


@dataclass
class TopicResult:
    """Outcome of one topic, reported in input order."""

    index: int
    topic: str
    success: bool
    content_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class BulkOutcome:
    content: list[Content] = field(default_factory=list)
    results: list[TopicResult] = field(default_factory=list)
    total_tokens_used: int = 0
    total_cost: Decimal = Decimal("0")

    @property
    def generation_stats(self) -> dict[str, Any]:
        successful = len(self.content)
        return {
            "total_topics": len(self.results),
            "successful_generations": successful,
            "failed_generations": len(self.results) - successful,
            "total_tokens_used": self.total_tokens_used,
            "total_cost": float(self.total_cost),
        }


class BulkGenerationService:
    """
    Sequential bulk generation.

    Every insert joins one transaction that is committed after the last
    topic. A topic whose article call fails is recorded and skipped; any
    other exception rolls back every row created by the batch. Provider
    cost already incurred for those rows is not recoverable.
    """

    def __init__(
        self,
        db: AsyncSession,
        pipeline: ContentGenerationPipeline,
        delay_seconds: Optional[float] = None,
        max_topics: Optional[int] = None,
    ):
        self.db = db
        self.pipeline = pipeline
        context = pipeline.context
        self.delay_seconds = (
            context.bulk_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.max_topics = max_topics or context.max_bulk_topics

    async def generate(
        self,
        user_id: str,
        topics: list[str],
        options: GenerationOptions,
    ) -> BulkOutcome:
        """
        Generate one draft per topic, in order.

        Titles are always extracted from the generated body.

        Raises:
            ValueError: Topic count outside 1..max_topics
            PersistenceError: A write failed; the whole batch was rolled back
        """
        if not 1 <= len(topics) <= self.max_topics:
            raise ValueError(f"Bulk generation accepts 1 to {self.max_topics} topics")

        outcome = BulkOutcome()

        try:
            for index, topic in enumerate(topics):
                if index > 0:
                    await asyncio.sleep(self.delay_seconds)

                try:
                    generated = await self.pipeline.generate(
                        user_id, topic, options, title=None, commit=False
                    )
                except GenerationError as e:
                    outcome.results.append(
                        TopicResult(index=index, topic=topic, success=False, error=str(e))
                    )
                    continue

                outcome.content.append(generated.content)
                outcome.total_tokens_used += generated.stats.tokens_used
                outcome.total_cost += generated.stats.cost_estimate.total_cost
                outcome.results.append(
                    TopicResult(
                        index=index,
                        topic=topic,
                        success=True,
                        content_id=generated.content.id,
                    )
                )

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self._log_batch_failure(user_id, topics, e)
            raise PersistenceError(f"Bulk generation rolled back: {e}") from e
        except Exception as e:
            await self.db.rollback()
            self._log_batch_failure(user_id, topics, e)
            raise

        stats = outcome.generation_stats
        logger.info(
            "Bulk content generation completed: %d/%d topics succeeded",
            stats["successful_generations"],
            stats["total_topics"],
            extra={
                "user_id": user_id,
                "tokens_used": stats["total_tokens_used"],
                "cost": stats["total_cost"],
            },
        )
        return outcome

    @staticmethod
    def _log_batch_failure(user_id: str, topics: list[str], error: Exception) -> None:
        logger.error(
            "Bulk content generation failed for %d topics, batch rolled back: %s",
            len(topics),
            error,
            extra={"user_id": user_id, "error": str(error)},
        )
