"""
Feeding block and feeding entry models.
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    Float,
    Boolean,
    Date,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Index,
    UUID,
)
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base
from domain.models.types import UTCDateTime


class FeedingBlock(Base):
    """Ordered per-user grouping of feeding entries"""

    __tablename__ = "feeding_block"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(
        String(255),
        ForeignKey("app_user.username", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    number = Column(Integer, nullable=False)
    is_eliminating = Column(Boolean, nullable=False, default=False)
    elimination_start_date = Column(UTCDateTime)
    baseline_volume = Column(Float)
    current_group = Column(Integer, nullable=False, default=0)

    user = relationship("AppUser", back_populates="feeding_blocks")
    entries = relationship(
        "FeedingEntry",
        back_populates="block",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FeedingEntry.feeding_time",
    )

    __table_args__ = (
        UniqueConstraint("username", "number", name="uq_feeding_block_user_number"),
        CheckConstraint("number >= 1", name="ck_feeding_block_number_positive"),
        CheckConstraint(
            "baseline_volume IS NULL OR baseline_volume >= 0",
            name="ck_feeding_block_baseline_nonneg",
        ),
        CheckConstraint("current_group >= 0", name="ck_feeding_block_group_nonneg"),
        Index("idx_feeding_block_username", "username"),
    )

    def has_elimination_baseline(self) -> bool:
        """True once an elimination start date and baseline volume are recorded"""
        return self.elimination_start_date is not None and self.baseline_volume is not None


class FeedingEntry(Base):
    """A single scheduled or recorded feeding"""

    __tablename__ = "feeding_entry"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    block_id = Column(
        UUID(as_uuid=True),
        ForeignKey("feeding_block.id", ondelete="CASCADE"),
        nullable=False,
    )
    feeding_time = Column(UTCDateTime, nullable=False)
    # Local calendar day the entry was materialized for
    feeding_day = Column(Date, nullable=False)
    volume_in_ounces = Column(Float)
    completed = Column(Boolean, nullable=False, default=False)

    block = relationship("FeedingBlock", back_populates="entries")

    __table_args__ = (
        UniqueConstraint("block_id", "feeding_day", name="uq_feeding_entry_block_day"),
        CheckConstraint(
            "volume_in_ounces IS NULL OR volume_in_ounces >= 0",
            name="ck_feeding_entry_volume_nonneg",
        ),
        Index("idx_feeding_entry_block_time", "block_id", "feeding_time"),
    )
