"""Service interfaces for external integrations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from core.domain.content import GenerationOptions


@dataclass
class ArticleResult:
    """Result of the primary article generation call."""

    content: str = ""
    tokens_used: int = 0
    model: str = ""
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class MetaDescriptionResult:
    """Result of meta description generation."""

    meta_description: str = ""
    length: int = 0
    tokens_used: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class KeywordResult:
    """Result of keyword extraction."""

    keywords: list[str] = field(default_factory=list)
    count: int = 0
    tokens_used: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class QualityResult:
    """Result of a quality analysis. `analysis` is free text."""

    analysis: str = ""
    tokens_used: int = 0
    analyzed_at: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_record(self) -> dict[str, Any]:
        """Shape stored on the content row."""
        return {
            "analysis": self.analysis,
            "tokens_used": self.tokens_used,
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None,
        }


@dataclass
class ModelsResult:
    """Available generation models."""

    models: list[dict[str, Any]] = field(default_factory=list)
    count: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ContentGenerationClient(ABC):
    """Abstract client for the hosted text-generation service.

    Implementations never raise for provider failures; they return the
    result object with `error` set instead.
    """

    @abstractmethod
    async def generate_article(self, topic: str, options: GenerationOptions) -> ArticleResult:
        """Generate a full blog article for a topic."""
        ...

    @abstractmethod
    async def generate_meta_description(
        self, content: str, max_length: int = 155
    ) -> MetaDescriptionResult:
        """Generate an SEO meta description for a body of text."""
        ...

    @abstractmethod
    async def extract_keywords(self, content: str, count: int = 10) -> KeywordResult:
        """Extract the most important SEO keywords from a body of text."""
        ...

    @abstractmethod
    async def analyze_quality(self, content: str) -> QualityResult:
        """Score content 1-10 and suggest improvements (free text)."""
        ...

    @abstractmethod
    async def get_available_models(self) -> ModelsResult:
        """List models usable for generation."""
        ...
