"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    SessionLocal,
    get_engine,
    init_database,
    get_db_session,
)
from domain.models.types import UTCDateTime
from domain.models.user import AppUser
from domain.models.feeding import FeedingBlock, FeedingEntry

__all__ = [
    # Database
    "Base",
    "SessionLocal",
    "get_engine",
    "init_database",
    "get_db_session",
    "UTCDateTime",
    # User models
    "AppUser",
    # Feeding models
    "FeedingBlock",
    "FeedingEntry",
]
