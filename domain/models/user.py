"""
User-related database models.
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.models.types import UTCDateTime


class AppUser(Base):
    """Account that owns feeding blocks. Identity is managed elsewhere."""

    __tablename__ = "app_user"

    username = Column(String(255), primary_key=True)
    full_name = Column(Text)
    created_at = Column(UTCDateTime, server_default=func.now())

    # Relationships
    feeding_blocks = relationship(
        "FeedingBlock",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FeedingBlock.number",
    )
