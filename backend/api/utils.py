"""
Shared API utility functions.
"""

from infrastructure.config.settings import settings


def escape_like(value: str) -> str:
    """Escape LIKE wildcards for safe use in SQL LIKE/ILIKE patterns."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def error_detail(message: str, error: Exception | str) -> dict[str, str]:
    """Error body for failed operations; the underlying cause is shown outside production only."""
    if settings.is_production:
        return {"message": message, "error": "An unexpected error occurred. Please try again."}
    return {"message": message, "error": str(error)}
