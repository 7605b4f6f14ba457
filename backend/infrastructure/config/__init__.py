from .settings import DEFAULT_MODEL_PRICING, Settings, get_settings, settings

__all__ = [
    "DEFAULT_MODEL_PRICING",
    "Settings",
    "get_settings",
    "settings",
]
