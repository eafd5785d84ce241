"""
Feeding Entry Repository - Data access layer for feeding entries

All time-range queries are half-open: [start, end).
"""

from datetime import date, datetime
from typing import List, Optional, Set
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import FeedingBlock, FeedingEntry


class FeedingEntryRepository(BaseRepository[FeedingEntry]):
    """Repository for feeding entry data access"""

    def __init__(self, db: Session):
        super().__init__(db, FeedingEntry)

    def get_by_id_and_user(
        self, entry_id: UUID, username: str
    ) -> Optional[FeedingEntry]:
        """Get an entry only if its block belongs to the given user"""
        return (
            self.db.query(FeedingEntry)
            .join(FeedingBlock, FeedingEntry.block_id == FeedingBlock.id)
            .filter(FeedingEntry.id == entry_id, FeedingBlock.username == username)
            .first()
        )

    def get_by_block(self, block_id: UUID) -> List[FeedingEntry]:
        """Get every entry of a block ordered by feeding time"""
        return (
            self.db.query(FeedingEntry)
            .filter(FeedingEntry.block_id == block_id)
            .order_by(FeedingEntry.feeding_time)
            .all()
        )

    def entries_in_range(
        self, block_id: UUID, start: datetime, end: datetime
    ) -> List[FeedingEntry]:
        """Get entries of a block with start <= feeding_time < end, ordered by time"""
        return (
            self.db.query(FeedingEntry)
            .filter(
                FeedingEntry.block_id == block_id,
                FeedingEntry.feeding_time >= start,
                FeedingEntry.feeding_time < end,
            )
            .order_by(FeedingEntry.feeding_time)
            .all()
        )

    def entries_in_range_for_blocks(
        self, block_ids: List[UUID], start: datetime, end: datetime
    ) -> List[FeedingEntry]:
        """Same as entries_in_range for several blocks in one query"""
        if not block_ids:
            return []
        return (
            self.db.query(FeedingEntry)
            .filter(
                FeedingEntry.block_id.in_(block_ids),
                FeedingEntry.feeding_time >= start,
                FeedingEntry.feeding_time < end,
            )
            .order_by(FeedingEntry.feeding_time)
            .all()
        )

    def most_recent_entry_before(
        self, block_id: UUID, instant: datetime
    ) -> Optional[FeedingEntry]:
        """Latest entry of a block strictly before `instant`"""
        return (
            self.db.query(FeedingEntry)
            .filter(
                FeedingEntry.block_id == block_id,
                FeedingEntry.feeding_time < instant,
            )
            .order_by(FeedingEntry.feeding_time.desc())
            .first()
        )

    def entries_from(
        self, block_id: UUID, instant: datetime, inclusive: bool = True
    ) -> List[FeedingEntry]:
        """Entries of a block at (or strictly after) `instant`, ordered by time"""
        if inclusive:
            time_filter = FeedingEntry.feeding_time >= instant
        else:
            time_filter = FeedingEntry.feeding_time > instant
        return (
            self.db.query(FeedingEntry)
            .filter(FeedingEntry.block_id == block_id, time_filter)
            .order_by(FeedingEntry.feeding_time)
            .all()
        )

    def entries_from_day(self, block_id: UUID, day: date) -> List[FeedingEntry]:
        """Entries of a block whose calendar day is on or after `day`"""
        return (
            self.db.query(FeedingEntry)
            .filter(FeedingEntry.block_id == block_id, FeedingEntry.feeding_day >= day)
            .order_by(FeedingEntry.feeding_time)
            .all()
        )

    def days_with_entries(
        self, block_id: UUID, first_day: date, last_day: date
    ) -> Set[date]:
        """Calendar days in [first_day, last_day] that already hold an entry"""
        rows = (
            self.db.query(FeedingEntry.feeding_day)
            .filter(
                FeedingEntry.block_id == block_id,
                FeedingEntry.feeding_day >= first_day,
                FeedingEntry.feeding_day <= last_day,
            )
            .all()
        )
        return {row[0] for row in rows}

    def count_for_block(self, block_id: UUID) -> int:
        """Number of entries a block owns"""
        return (
            self.db.query(FeedingEntry)
            .filter(FeedingEntry.block_id == block_id)
            .count()
        )

    def set_volume_from(
        self, block_id: UUID, instant: datetime, volume: float
    ) -> int:
        """Write `volume` to every entry of a block at or after `instant`"""
        entries = self.entries_from(block_id, instant, inclusive=True)
        for entry in entries:
            entry.volume_in_ounces = volume
        self.db.flush()
        return len(entries)
