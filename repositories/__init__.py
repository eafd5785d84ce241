"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.feeding_block_repository import FeedingBlockRepository
from repositories.feeding_entry_repository import FeedingEntryRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "FeedingBlockRepository",
    "FeedingEntryRepository",
]
