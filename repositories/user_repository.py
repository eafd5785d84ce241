"""
User Repository - Data access layer for account rows that own feeding blocks
"""

from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import AppUser
from app.exceptions import ConflictError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access.

    Unlike the feeding repositories, create_user and delete_user commit: they
    bootstrap or remove an owner outside any schedule transaction.
    """

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_username(self, username: str) -> Optional[AppUser]:
        """Get user by username"""
        return self.db.get(AppUser, username)

    def create_user(self, username: str, full_name: str = None) -> AppUser:
        """Create a new user"""
        user = AppUser(username=username, full_name=full_name)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User {username} already exists")

    def delete_user(self, username: str) -> bool:
        """Delete user and all of their blocks and entries (cascade)"""
        user = self.get_by_username(username)
        if user:
            self.db.delete(user)
            self.db.commit()
            return True
        return False
