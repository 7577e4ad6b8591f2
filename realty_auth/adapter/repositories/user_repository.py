from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from realty_auth.app.repositories.user_repository import DuplicateKeyError, IUserRepository
from realty_auth.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        """Get user by Google account ID"""
        stmt = select(User).where(User.google_id == google_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_verification_token(
        self, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Get user holding an unexpired email verification token hash"""
        stmt = select(User).where(
            User.email_verification_token == token_hash,
            User.email_verification_expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self._flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        user.updated_at = datetime.utcnow()
        self.session.add(user)
        await self._flush()
        await self.session.refresh(user)
        return user

    async def clear_expired_tokens(self, now: datetime) -> int:
        """Unset verification/reset token fields whose expiry has passed"""
        verification_stmt = (
            update(User)
            .where(User.email_verification_expires_at < now)
            .values(email_verification_token=None, email_verification_expires_at=None)
            .execution_options(synchronize_session="fetch")
        )
        reset_stmt = (
            update(User)
            .where(User.reset_password_expires_at < now)
            .values(reset_password_token=None, reset_password_expires_at=None)
            .execution_options(synchronize_session="fetch")
        )
        verification_result = await self.session.execute(verification_stmt)
        reset_result = await self.session.execute(reset_stmt)
        return verification_result.rowcount + reset_result.rowcount

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateKeyError(str(exc.orig)) from exc
