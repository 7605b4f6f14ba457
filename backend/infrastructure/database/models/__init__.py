"""
SQLAlchemy database models.
"""

from .base import Base, TimestampMixin
from .content import Content
from .user import User, UserStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "UserStatus",
    "Content",
]
