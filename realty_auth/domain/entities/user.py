"""
User Entity

Represents an agent account that can authenticate with a password or Google.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class User(SQLModel, table=True):
    """
    User entity - the authenticatable identity.

    Business Rules:
    - Email must be unique across all users (stored lowercase, trimmed)
    - google_id must be unique when present
    - Password stored as bcrypt hash (cost factor 12), never in plaintext
    - Only SHA-256 hashes of verification and reset tokens are stored
    - last_used_reset_token makes reset tokens single-use
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(unique=True, index=True, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Email verification
    is_email_verified: bool = Field(default=False)
    email_verification_token: Optional[str] = Field(
        default=None, index=True, max_length=64
    )
    email_verification_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Password reset
    reset_password_token: Optional[str] = Field(default=None, index=True, max_length=64)
    reset_password_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    last_used_reset_token: Optional[str] = None

    # Google sign-in; NULLs do not collide on the unique index
    google_id: Optional[str] = Field(default=None, unique=True, max_length=255)
    google_email: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_email_verified", "is_email_verified"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
