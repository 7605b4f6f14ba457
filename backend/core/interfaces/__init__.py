# Interfaces (Abstract Contracts)
# Adapters implement these interfaces
from .services import (
    ArticleResult,
    ContentGenerationClient,
    KeywordResult,
    MetaDescriptionResult,
    ModelsResult,
    QualityResult,
)

__all__ = [
    "ContentGenerationClient",
    "ArticleResult",
    "MetaDescriptionResult",
    "KeywordResult",
    "QualityResult",
    "ModelsResult",
]
