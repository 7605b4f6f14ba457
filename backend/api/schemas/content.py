"""
Content API schemas for generation, listing, updates and stats.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.domain.content import (
    DEFAULT_TARGET_AUDIENCE,
    DEFAULT_WORD_COUNT,
    MAX_KEYWORD_LENGTH,
    MAX_KEYWORDS,
    MAX_WORD_COUNT,
    MIN_WORD_COUNT,
    ContentStatus,
    ContentTone,
    ContentType,
    GenerationOptions,
)
from infrastructure.config.settings import settings

# ============================================================================
# Generation Requests
# ============================================================================


class GenerationOptionsSchema(BaseModel):
    """Options shared by single and bulk generation."""

    content_type: ContentType = ContentType.BLOG_POST
    tone: ContentTone = ContentTone.PROFESSIONAL
    target_audience: str = Field(default=DEFAULT_TARGET_AUDIENCE, max_length=100)
    word_count: int = Field(default=DEFAULT_WORD_COUNT, ge=MIN_WORD_COUNT, le=MAX_WORD_COUNT)
    keywords: list[str] = Field(default_factory=list, max_length=MAX_KEYWORDS)
    ai_model: Optional[str] = Field(None, max_length=100)
    temperature: Optional[float] = Field(None, ge=0, le=2)

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v: list[str]) -> list[str]:
        cleaned = []
        for keyword in v:
            keyword = keyword.strip()
            if not keyword:
                continue
            if len(keyword) > MAX_KEYWORD_LENGTH:
                raise ValueError(
                    f"Keywords must be at most {MAX_KEYWORD_LENGTH} characters: '{keyword[:20]}...'"
                )
            cleaned.append(keyword)
        return cleaned

    @field_validator("target_audience")
    @classmethod
    def default_blank_audience(cls, v: str) -> str:
        return v.strip() or DEFAULT_TARGET_AUDIENCE

    def to_options(self) -> GenerationOptions:
        """Normalize into domain options with every default filled in."""
        return GenerationOptions(
            content_type=self.content_type,
            tone=self.tone.value,
            target_audience=self.target_audience,
            word_count=self.word_count,
            keywords=list(self.keywords),
            model=self.ai_model or settings.openai_model,
            temperature=(
                self.temperature if self.temperature is not None else settings.openai_temperature
            ),
            max_tokens=settings.openai_max_tokens,
        )


class ContentGenerateRequest(GenerationOptionsSchema):
    """Request to generate a single piece of content."""

    topic: str = Field(..., min_length=5, max_length=200)
    title: Optional[str] = Field(
        None, max_length=255, description="Explicit title; extracted from the body when omitted"
    )

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 5:
            raise ValueError("Topic must be at least 5 characters")
        return v

    @field_validator("title")
    @classmethod
    def blank_title_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class BulkGenerateRequest(GenerationOptionsSchema):
    """Request to generate one draft per topic."""

    topics: list[str] = Field(..., min_length=1, max_length=10)

    @field_validator("topics")
    @classmethod
    def validate_topics(cls, v: list[str]) -> list[str]:
        topics = []
        for topic in v:
            topic = topic.strip()
            if not 5 <= len(topic) <= 200:
                raise ValueError("Each topic must be between 5 and 200 characters")
            topics.append(topic)
        return topics


# ============================================================================
# Updates
# ============================================================================


class ContentUpdateRequest(BaseModel):
    """Partial update of a content item."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    body: Optional[str] = Field(None, min_length=1)
    meta_description: Optional[str] = Field(None, max_length=160)
    keywords: Optional[list[str]] = Field(None, max_length=MAX_KEYWORDS)
    status: Optional[ContentStatus] = None

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        if any(len(keyword) > MAX_KEYWORD_LENGTH for keyword in v):
            raise ValueError(f"Keywords must be at most {MAX_KEYWORD_LENGTH} characters")
        return [keyword.strip() for keyword in v if keyword.strip()]

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        if data.get("status") is not None:
            data["status"] = data["status"].value
        # meta_description may be cleared; other fields ignore explicit nulls
        return {
            field: value
            for field, value in data.items()
            if value is not None or field == "meta_description"
        }


# ============================================================================
# Responses
# ============================================================================


class ContentResponse(BaseModel):
    """Content item response."""

    id: str
    user_id: str
    title: str
    slug: str
    topic: str
    body: str
    excerpt: str
    meta_description: Optional[str]
    keywords: list[str]
    status: str
    content_type: str
    tone: str
    target_audience: Optional[str]
    word_count: int
    reading_time: int
    tokens_used: int
    generation_cost: float
    ai_model: Optional[str]
    generation_options: Optional[dict[str, Any]] = None
    quality_analysis: Optional[dict[str, Any]] = None
    quality_score: Optional[float] = None
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaginationMeta(BaseModel):
    current_page: int
    last_page: int
    per_page: int
    total: int


class ContentListResponse(BaseModel):
    """Paginated content list."""

    data: list[ContentResponse]
    pagination: PaginationMeta


class CostEstimateResponse(BaseModel):
    model: str
    total_tokens: int
    input_tokens: int
    output_tokens: int
    input_cost: float
    output_cost: float
    total_cost: float
    currency: str = "USD"


class GenerationStatsResponse(BaseModel):
    """Figures for the primary article call."""

    tokens_used: int
    model: str
    cost_estimate: CostEstimateResponse
    word_count: int
    reading_time: int


class ContentGenerateResponse(BaseModel):
    message: str
    content: ContentResponse
    generation_stats: GenerationStatsResponse


class TopicResultResponse(BaseModel):
    index: int
    topic: str
    success: bool
    content_id: Optional[str] = None
    error: Optional[str] = None


class BulkGenerationStatsResponse(BaseModel):
    total_topics: int
    successful_generations: int
    failed_generations: int
    total_tokens_used: int
    total_cost: float


class BulkGenerateResponse(BaseModel):
    message: str
    content: list[ContentResponse]
    results: list[TopicResultResponse]
    generation_stats: BulkGenerationStatsResponse


class ContentStatsResponse(BaseModel):
    """Aggregates over the current user's library."""

    total_content: int
    published_content: int
    draft_content: int
    archived_content: int
    total_words: int
    total_tokens_used: int
    total_cost: float
    content_by_type: dict[str, int]
    content_by_month: dict[str, int]


class ModelInfo(BaseModel):
    id: str
    created: Optional[int] = None
    owned_by: Optional[str] = None


class ModelsResponse(BaseModel):
    models: list[ModelInfo]
    count: int
