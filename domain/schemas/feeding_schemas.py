from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class FeedingEntryResponse(BaseModel):
    """Schema for a feeding entry"""

    id: UUID
    block_id: UUID
    feeding_time: datetime
    feeding_day: date
    volume_in_ounces: Optional[float] = Field(
        None, ge=0, description="Recorded or projected volume; null when not yet known"
    )
    completed: bool = False

    model_config = {"from_attributes": True}


class FeedingBlockResponse(BaseModel):
    """Schema for a feeding block without its entries"""

    id: UUID
    username: str
    number: int = Field(..., ge=1)
    is_eliminating: bool
    elimination_start_date: Optional[datetime] = None
    baseline_volume: Optional[float] = Field(None, ge=0)
    current_group: int = Field(default=0, ge=0)

    model_config = {"from_attributes": True}


class BlockWithEntriesResponse(BaseModel):
    """A block together with the entries of one display window"""

    block: FeedingBlockResponse
    entries: List[FeedingEntryResponse] = Field(default_factory=list)
