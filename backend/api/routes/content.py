"""
Content API routes.
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.dependencies import (
    get_ai_service,
    get_bulk_service,
    get_content_store,
    get_current_user,
    get_generation_pipeline,
)
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.content import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    ContentGenerateRequest,
    ContentGenerateResponse,
    ContentListResponse,
    ContentResponse,
    ContentStatsResponse,
    ContentUpdateRequest,
    ModelsResponse,
)
from api.utils import error_detail
from core.domain.content import ContentStatus, ContentType
from core.exceptions import ContentNotFoundError, GenerationError, PersistenceError
from core.interfaces.services import ContentGenerationClient
from infrastructure.database.models import User
from services.bulk_generation import BulkGenerationService
from services.content_generation import ContentGenerationPipeline
from services.content_store import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ContentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


def _not_found() -> HTTPException:
    # Same response whether the item is missing or owned by someone else
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Content not found",
    )


def _persistence_failed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"message": "Failed to save content. Please try again."},
    )


@router.get("", response_model=ContentListResponse)
async def list_content(
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    content_type: Optional[ContentType] = None,
    search: Optional[str] = Query(None, max_length=200),
    current_user: User = Depends(get_current_user),
    store: ContentStore = Depends(get_content_store),
):
    """
    List the current user's content, newest first.
    """
    items, total = await store.list_for_owner(
        current_user.id,
        status=status_filter.value if status_filter else None,
        content_type=content_type.value if content_type else None,
        search=search.strip() if search and search.strip() else None,
        page=page,
        per_page=per_page,
    )

    return ContentListResponse(
        data=items,
        pagination={
            "current_page": page,
            "last_page": max(1, math.ceil(total / per_page)),
            "per_page": per_page,
            "total": total,
        },
    )


@router.post("/generate", response_model=ContentGenerateResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("generate"))
async def generate_content(
    request: Request,
    body: ContentGenerateRequest,
    current_user: User = Depends(get_current_user),
    pipeline: ContentGenerationPipeline = Depends(get_generation_pipeline),
):
    """
    Generate a single draft with AI.

    The article call is the only fatal step; meta description and keyword
    failures leave those fields empty.
    """
    try:
        outcome = await pipeline.generate(
            current_user.id,
            body.topic,
            body.to_options(),
            title=body.title,
        )
    except GenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("Content generation failed", e),
        )
    except PersistenceError:
        raise _persistence_failed()

    return ContentGenerateResponse(
        message="Content generated successfully",
        content=outcome.content,
        generation_stats=outcome.stats.to_dict(),
    )


@router.post("/bulk-generate", response_model=BulkGenerateResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("bulk_generate"))
async def bulk_generate_content(
    request: Request,
    body: BulkGenerateRequest,
    current_user: User = Depends(get_current_user),
    bulk_service: BulkGenerationService = Depends(get_bulk_service),
):
    """
    Generate one draft per topic, sequentially.

    Topics whose generation fails are reported in `results`; a save
    failure rolls back the whole batch.
    """
    try:
        outcome = await bulk_service.generate(current_user.id, body.topics, body.to_options())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except PersistenceError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail(
                "Bulk content generation failed",
                "No content was saved. Please try again.",
            ),
        )

    stats = outcome.generation_stats
    return BulkGenerateResponse(
        message=(
            f"Bulk content generation completed. {stats['successful_generations']} "
            f"of {stats['total_topics']} content pieces generated successfully."
        ),
        content=outcome.content,
        results=[vars(result) for result in outcome.results],
        generation_stats=stats,
    )


@router.get("/stats", response_model=ContentStatsResponse)
async def get_content_stats(
    current_user: User = Depends(get_current_user),
    store: ContentStore = Depends(get_content_store),
):
    """
    Aggregate statistics over the current user's content.
    """
    return await store.stats_for_owner(current_user.id)


@router.get("/models", response_model=ModelsResponse)
async def get_available_models(
    current_user: User = Depends(get_current_user),
    ai_service: ContentGenerationClient = Depends(get_ai_service),
):
    """
    List chat models offered by the provider (cached).
    """
    result = await ai_service.get_available_models()
    if result.error is not None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=error_detail("Failed to fetch available models", result.error),
        )
    return ModelsResponse(models=result.models, count=result.count)


@router.get("/{content_id}", response_model=ContentResponse)
async def get_content(
    content_id: str,
    current_user: User = Depends(get_current_user),
    store: ContentStore = Depends(get_content_store),
):
    """
    Get a specific content item by ID.
    """
    try:
        return await store.get_for_owner(content_id, current_user.id)
    except ContentNotFoundError:
        raise _not_found()


@router.put("/{content_id}", response_model=ContentResponse)
async def update_content(
    content_id: str,
    body: ContentUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: ContentStore = Depends(get_content_store),
):
    """
    Update a content item.
    """
    try:
        content = await store.get_for_owner(content_id, current_user.id)
    except ContentNotFoundError:
        raise _not_found()

    return await store.update(content, body.changes())


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content(
    content_id: str,
    current_user: User = Depends(get_current_user),
    store: ContentStore = Depends(get_content_store),
):
    """
    Delete a content item.
    """
    try:
        content = await store.get_for_owner(content_id, current_user.id)
    except ContentNotFoundError:
        raise _not_found()

    await store.delete(content)


@router.post("/{content_id}/analyze-quality", response_model=ContentResponse)
@limiter.limit(get_rate_limit("analyze_quality"))
async def analyze_content_quality(
    request: Request,
    content_id: str,
    current_user: User = Depends(get_current_user),
    pipeline: ContentGenerationPipeline = Depends(get_generation_pipeline),
):
    """
    Run AI quality analysis and store the result on the item.
    """
    try:
        return await pipeline.analyze_quality(current_user.id, content_id)
    except ContentNotFoundError:
        raise _not_found()
    except GenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("Quality analysis failed", e),
        )
