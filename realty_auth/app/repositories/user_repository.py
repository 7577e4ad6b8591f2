from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from realty_auth.domain.entities import User


class DuplicateKeyError(Exception):
    """Raised when an insert or update violates a unique index"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        """Get user by Google account ID"""
        pass

    @abstractmethod
    async def get_by_verification_token(
        self, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Get user holding an unexpired email verification token hash"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user, raising DuplicateKeyError on unique violations"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def clear_expired_tokens(self, now: datetime) -> int:
        """Unset verification/reset token fields whose expiry has passed"""
        pass
