"""
Credential Store

Owns user persistence rules that involve secrets: password hashing,
verification token hashing and the uniqueness of registered emails.
Use cases go through this service instead of touching hashes directly.
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import bcrypt

from realty_auth.libs.result import Error, Result, Return
from realty_auth.app.repositories.user_repository import DuplicateKeyError, IUserRepository
from realty_auth.domain.entities import User

PASSWORD_HASH_ROUNDS = 12
EMAIL_VERIFICATION_TTL = timedelta(hours=24)


@dataclass
class CreatedUser:
    """A freshly inserted user and the plaintext verification token to email"""

    user: User
    verification_token: Optional[str]


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_token(token: str) -> str:
    """SHA-256 hex digest used for every token persisted on a user"""
    return hashlib.sha256(token.encode()).hexdigest()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(PASSWORD_HASH_ROUNDS)
    ).decode("utf-8")


class CredentialStore:
    """
    User persistence and credential hashing.

    Business Rules:
    - Emails are stored lowercase and trimmed, and are unique
    - Passwords are hashed with bcrypt (cost factor 12)
    - Verification tokens: 32 random bytes, only the SHA-256 hash is stored,
      valid for 24 hours
    - Reset tokens are signed JWTs; only their hash is stored and
      last_used_reset_token rejects replays
    """

    def __init__(self, users: IUserRepository):
        self.users = users

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: Optional[str],
        password: str,
        google_id: Optional[str] = None,
        is_email_verified: bool = False,
    ) -> Result[CreatedUser]:
        """
        Insert a new user.

        The existence check gives a clean error for the common case; the
        unique index on email is what actually guarantees uniqueness when two
        registrations race.

        Returns:
            Result[CreatedUser] or Error(DUPLICATE_EMAIL)
        """
        email = normalize_email(email)
        if await self.users.get_by_email(email) is not None:
            return Return.err(Error("DUPLICATE_EMAIL", "User with this email already exists"))

        user = User(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            phone=phone.strip() if phone else None,
            password_hash=hash_password(password),
            is_email_verified=is_email_verified,
            google_id=google_id,
            google_email=email if google_id else None,
        )

        verification_token = None
        if not is_email_verified:
            verification_token = self.generate_email_verification_token(user)

        try:
            user = await self.users.create(user)
        except DuplicateKeyError:
            return Return.err(Error("DUPLICATE_EMAIL", "User with this email already exists"))

        return Return.ok(CreatedUser(user=user, verification_token=verification_token))

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self.users.get_by_email(normalize_email(email))

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        return await self.users.get_by_id(user_id)

    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        return await self.users.get_by_google_id(google_id)

    async def find_by_verification_token(self, token: str) -> Optional[User]:
        """Find the user whose unexpired verification hash matches the plaintext token"""
        return await self.users.get_by_verification_token(hash_token(token), datetime.utcnow())

    async def email_exists(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    def verify_password(self, user: Optional[User], candidate: str) -> bool:
        """
        Check a candidate password against the stored bcrypt hash.

        A missing user still costs one bcrypt round so response timing does
        not reveal whether the email is registered.
        """
        if user is None:
            bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(PASSWORD_HASH_ROUNDS))
            return False

        try:
            return bcrypt.checkpw(candidate.encode("utf-8"), user.password_hash.encode("utf-8"))
        except ValueError:
            # Corrupt stored hash, or a candidate over 72 bytes
            return False

    def generate_email_verification_token(self, user: User) -> str:
        """Store a fresh verification hash on the user and return the plaintext"""
        token = secrets.token_hex(32)
        user.email_verification_token = hash_token(token)
        user.email_verification_expires_at = datetime.utcnow() + EMAIL_VERIFICATION_TTL
        return token

    def record_reset_token(self, user: User, reset_token: str, expires_at: datetime) -> None:
        user.reset_password_token = hash_token(reset_token)
        user.reset_password_expires_at = expires_at

    def consume_reset_token(self, user: User, reset_token: str, new_password: str) -> None:
        """Set the new password and burn the reset token"""
        user.password_hash = hash_password(new_password)
        user.last_used_reset_token = reset_token
        user.reset_password_token = None
        user.reset_password_expires_at = None

    def mark_email_verified(self, user: User) -> None:
        user.is_email_verified = True
        user.email_verification_token = None
        user.email_verification_expires_at = None

    def link_google_account(self, user: User, google_id: str, google_email: str) -> None:
        user.google_id = google_id
        user.google_email = normalize_email(google_email)
        # Google has already verified the address
        user.is_email_verified = True

    async def save(self, user: User) -> User:
        return await self.users.update(user)

    async def update_profile(
        self,
        user_id: UUID,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[User]:
        """Partial update; fields left as None are not touched"""
        user = await self.users.get_by_id(user_id)
        if user is None:
            return None

        if first_name is not None:
            user.first_name = first_name.strip()
        if last_name is not None:
            user.last_name = last_name.strip()
        if phone is not None:
            user.phone = phone.strip()

        return await self.users.update(user)

    async def clear_expired_tokens(self) -> int:
        return await self.users.clear_expired_tokens(datetime.utcnow())
