"""
Reset Password Use Case

Sets a new password from a valid, unused reset token.
"""

import logging
from uuid import UUID

from realty_auth.libs.result import Error, Result, Return
from realty_auth.api.utils.jwt import RESET_TOKEN_TYPE, TokenCodec
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from realty_auth.domain.password_policy import check_password
from .dtos import MessageResponse

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - Token must verify (INVALID_OR_EXPIRED_TOKEN)
    - Token must be a reset token; access tokens are refused
      (INVALID_TOKEN_TYPE)
    - Token must not have been used before (TOKEN_ALREADY_USED)
    - New password must satisfy the password policy (INVALID_PASSWORD)
    - The used token is remembered and the stored reset hash is cleared
    """

    def __init__(self, uow: UnitOfWork, token_codec: TokenCodec):
        self.uow = uow
        self.token_codec = token_codec

    async def execute(self, reset_token: str, new_password: str) -> Result[MessageResponse]:
        """
        Execute reset password use case.

        Errors:
            - INVALID_OR_EXPIRED_TOKEN: Bad signature, malformed or expired
            - INVALID_TOKEN_TYPE: Not a reset token
            - USER_NOT_FOUND: Token subject no longer exists
            - TOKEN_ALREADY_USED: Token was already consumed
            - INVALID_PASSWORD: New password fails the policy
        """
        claims = self.token_codec.verify(reset_token)
        if claims is None:
            return Return.err(
                Error("INVALID_OR_EXPIRED_TOKEN", "Invalid or expired reset token")
            )

        if claims.get("type") != RESET_TOKEN_TYPE:
            return Return.err(Error("INVALID_TOKEN_TYPE", "Invalid token type for password reset"))

        try:
            user_id = UUID(str(claims.get("userId")))
        except ValueError:
            return Return.err(Error("USER_NOT_FOUND", "User not found"))

        async with self.uow:
            store = CredentialStore(self.uow.users)
            user = await store.find_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.last_used_reset_token == reset_token:
                return Return.err(
                    Error("TOKEN_ALREADY_USED", "This reset link has already been used")
                )

            password_check = check_password(new_password)
            if not password_check.is_valid:
                return Return.err(Error("INVALID_PASSWORD", "; ".join(password_check.errors)))

            store.consume_reset_token(user, reset_token, new_password)
            await store.save(user)
            await self.uow.commit()
            logger.info(f"Password reset for user {user_id}")

        return Return.ok(MessageResponse(message="Password reset successfully"))
