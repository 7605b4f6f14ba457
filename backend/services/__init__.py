"""
Service layer for business logic.
"""

from functools import lru_cache

from core.pricing import CostEstimator
from infrastructure.config.settings import settings


@lru_cache
def get_cost_estimator() -> CostEstimator:
    """
    Get singleton cost estimator built from the configured price table.

    Returns:
        Configured CostEstimator instance
    """
    return CostEstimator(
        pricing=settings.openai_pricing,
        default_model=settings.pricing_default_model,
        input_ratio=settings.cost_input_ratio,
    )


__all__ = [
    "get_cost_estimator",
]
