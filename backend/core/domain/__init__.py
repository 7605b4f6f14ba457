# Domain Entities
# Pure business objects with no external dependencies
from .content import ContentStatus, ContentTone, ContentType, GenerationOptions

__all__ = [
    "ContentStatus",
    "ContentTone",
    "ContentType",
    "GenerationOptions",
]
