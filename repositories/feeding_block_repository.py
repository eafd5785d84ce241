"""
Feeding Block Repository - Data access layer for feeding blocks
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import FeedingBlock


class FeedingBlockRepository(BaseRepository[FeedingBlock]):
    """Repository for feeding block data access"""

    def __init__(self, db: Session):
        super().__init__(db, FeedingBlock)

    def get_by_id_and_user(
        self, block_id: UUID, username: str, with_lock: bool = False
    ) -> Optional[FeedingBlock]:
        """Get a block only if it belongs to the given user"""
        query = self.db.query(FeedingBlock).filter(
            FeedingBlock.id == block_id, FeedingBlock.username == username
        )
        if with_lock:
            query = query.with_for_update()
        return query.first()

    def get_by_user(self, username: str) -> List[FeedingBlock]:
        """Get all blocks for a user ordered by number"""
        return (
            self.db.query(FeedingBlock)
            .filter(FeedingBlock.username == username)
            .order_by(FeedingBlock.number)
            .all()
        )

    def max_block_number(self, username: str) -> int:
        """Highest block number in use for a user, 0 when they have none"""
        result = (
            self.db.query(func.max(FeedingBlock.number))
            .filter(FeedingBlock.username == username)
            .scalar()
        )
        return result or 0

    def create_block(
        self, username: str, number: int, is_eliminating: bool = False
    ) -> FeedingBlock:
        """Insert a block with no elimination state"""
        block = FeedingBlock(
            username=username,
            number=number,
            is_eliminating=is_eliminating,
            elimination_start_date=None,
            baseline_volume=None,
            current_group=0,
        )
        return self.add(block)

    def update_baseline(
        self, block: FeedingBlock, baseline_volume: float, current_group: int
    ) -> FeedingBlock:
        """Move the elimination reference point of a block"""
        block.baseline_volume = baseline_volume
        block.current_group = current_group
        self.db.flush()
        return block

    def shift_numbers_down(self, username: str, above_number: int) -> int:
        """
        Decrement the number of every block of a user numbered above
        `above_number`.

        Rows are updated one at a time in ascending order so that the
        (username, number) uniqueness constraint holds after every statement.

        Returns:
            Number of renumbered blocks
        """
        blocks = (
            self.db.query(FeedingBlock)
            .filter(
                FeedingBlock.username == username,
                FeedingBlock.number > above_number,
            )
            .order_by(FeedingBlock.number)
            .all()
        )
        for block in blocks:
            block.number -= 1
            self.db.flush()
        return len(blocks)
