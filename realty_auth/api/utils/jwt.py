import secrets
from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(days=7)
RESET_TOKEN_TTL = timedelta(minutes=15)
RESET_TOKEN_TYPE = "reset"


class TokenCodec:
    """
    Issues and verifies HS256 JWTs signed with the server secret.

    verify() is the only method that grants authority. decode() reads claims
    without checking the signature and is meant for introspection only.
    """

    def __init__(self, secret: Optional[str]):
        if not secret:
            raise RuntimeError("JWT_SECRET environment variable is required")
        self._secret = secret

    def _encode(self, claims: dict, expires_delta: timedelta) -> str:
        now = datetime.now(UTC)
        payload = {
            **claims,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def issue_access_token(self, user_id, email: str) -> str:
        """
        Generate JWT access token

        Args:
            user_id: User UUID
            email: User email

        Returns:
            JWT token string (HS256, 7-day expiry)
        """
        return self._encode({"userId": str(user_id), "email": email}, ACCESS_TOKEN_TTL)

    def issue_reset_token(self, user_id, email: str) -> str:
        """
        Generate password reset token

        The jti keeps two tokens issued within the same second distinct, so
        burning one never burns the other.

        Returns:
            JWT token string (HS256, 15-minute expiry, type=reset)
        """
        return self._encode(
            {
                "userId": str(user_id),
                "email": email,
                "type": RESET_TOKEN_TYPE,
                "jti": secrets.token_hex(8),
            },
            RESET_TOKEN_TTL,
        )

    def verify(self, token: Optional[str]) -> Optional[dict]:
        """
        Verify and decode JWT token

        Returns:
            Decoded payload dict or None if malformed, expired or badly signed
        """
        if not token:
            return None
        try:
            return jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError:
            return None

    def decode(self, token: Optional[str]) -> Optional[dict]:
        """Read claims without verifying the signature"""
        if not token:
            return None
        try:
            return jwt.get_unverified_claims(token)
        except JWTError:
            return None

    def expiry_of(self, token: Optional[str]) -> Optional[datetime]:
        claims = self.decode(token)
        if not claims or "exp" not in claims:
            return None
        return datetime.fromtimestamp(claims["exp"], UTC)

    def is_expired(self, token: Optional[str]) -> bool:
        expires_at = self.expiry_of(token)
        if expires_at is None:
            return True
        return expires_at < datetime.now(UTC)
