"""
API request and response schemas.
"""

from .content import (
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

__all__ = [
    "BulkGenerateRequest",
    "BulkGenerateResponse",
    "ContentGenerateRequest",
    "ContentGenerateResponse",
    "ContentListResponse",
    "ContentResponse",
    "ContentStatsResponse",
    "ContentUpdateRequest",
    "ModelsResponse",
]
