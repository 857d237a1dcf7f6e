"""Domain entities for internal representation.

These are pure frozen dataclasses used internally by services, the
session store and repositories. They are NOT used for API contracts -
use DTOs from the dto package for that.
"""

from .activity import ActivityItem, Notification
from .cache_entry import CacheEntryEntity
from .session import AuthSession, Role, User

__all__ = [
    "ActivityItem",
    "AuthSession",
    "CacheEntryEntity",
    "Notification",
    "Role",
    "User",
]
