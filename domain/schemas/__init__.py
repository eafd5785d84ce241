"""
Domain schemas package - Pydantic models for responses.
"""

from domain.schemas.feeding_schemas import (
    FeedingEntryResponse,
    FeedingBlockResponse,
    BlockWithEntriesResponse,
)

__all__ = [
    "FeedingEntryResponse",
    "FeedingBlockResponse",
    "BlockWithEntriesResponse",
]
