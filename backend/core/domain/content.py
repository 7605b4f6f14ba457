"""Content domain entities."""
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class ContentStatus(str, Enum):
    """Content lifecycle status."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ContentType(str, Enum):
    """Kind of piece requested from the generator."""
    BLOG_POST = "blog_post"
    ARTICLE = "article"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        """Human-readable label used inside prompts ("blog post")."""
        return self.value.replace("_", " ")


class ContentTone(str, Enum):
    """Writing tone."""
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FRIENDLY = "friendly"
    FORMAL = "formal"
    CONVERSATIONAL = "conversational"


DEFAULT_WORD_COUNT = 1000
DEFAULT_TARGET_AUDIENCE = "general readers"
MIN_WORD_COUNT = 100
MAX_WORD_COUNT = 5000
MAX_KEYWORDS = 10
MAX_KEYWORD_LENGTH = 50


@dataclass
class GenerationOptions:
    """Normalized generation options.

    Every field carries its documented default so callers only set what
    the user actually supplied. `model`, `temperature` and `max_tokens`
    left as None fall back to the generation client's configured values.
    """

    content_type: ContentType = ContentType.BLOG_POST
    tone: str = ContentTone.PROFESSIONAL.value
    target_audience: str = DEFAULT_TARGET_AUDIENCE
    word_count: int = DEFAULT_WORD_COUNT
    keywords: list[str] = field(default_factory=list)
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    def snapshot(self) -> dict[str, Any]:
        """Write-once audit copy stored as `generation_options`."""
        data = asdict(self)
        data["content_type"] = self.content_type.value
        data["keywords"] = list(self.keywords)
        return data
