# AI Adapters
# OpenAI integration

from .openai_adapter import (
    OpenAIContentService,
    content_ai_service,
    estimate_tokens,
)

__all__ = [
    "OpenAIContentService",
    "content_ai_service",
    "estimate_tokens",
]
