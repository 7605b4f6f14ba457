"""
Domain exceptions raised by the content services.

The API layer maps these onto HTTP responses; services never raise
HTTPException themselves.
"""


class ContentEngineError(Exception):
    """Base class for content engine errors."""


class GenerationError(ContentEngineError):
    """The primary article generation call failed or timed out. Nothing was persisted."""


class EnrichmentError(ContentEngineError):
    """A meta description or keyword call failed. Never fatal to the request."""

    def __init__(self, message: str, step: str, timed_out: bool = False):
        super().__init__(message)
        self.step = step
        self.timed_out = timed_out


class PersistenceError(ContentEngineError):
    """Writing content to the store failed."""


class ContentNotFoundError(ContentEngineError):
    """The content does not exist or belongs to another user."""

    def __init__(self, content_id: str):
        super().__init__(f"Content {content_id} not found")
        self.content_id = content_id
