"""
Forgot Password Use Case

Issues a short-lived reset token and emails it.
"""

import logging

from realty_auth.libs.result import Result, Return
from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.email_sender import EmailSender
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent"


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Known and unknown emails get the same message (no enumeration)
    - The reset token is a 15 minute JWT with type=reset
    - Only the SHA-256 hash of the token and its expiry are stored
    """

    def __init__(self, uow: UnitOfWork, token_codec: TokenCodec, email_sender: EmailSender):
        self.uow = uow
        self.token_codec = token_codec
        self.email_sender = email_sender

    async def execute(self, email: str) -> Result[MessageResponse]:
        async with self.uow:
            store = CredentialStore(self.uow.users)
            user = await store.find_by_email(email)

            if user is None:
                return Return.ok(MessageResponse(message=FORGOT_PASSWORD_MESSAGE))

            reset_token = self.token_codec.issue_reset_token(user.id, user.email)
            expires_at = self.token_codec.expiry_of(reset_token)
            store.record_reset_token(user, reset_token, expires_at.replace(tzinfo=None))
            user = await store.save(user)
            await self.uow.commit()
            user_id, user_email, first_name = user.id, user.email, user.first_name

        sent = await self.email_sender.send_password_reset_email(user_email, reset_token, first_name)
        if not sent:
            logger.warning(f"Password reset email could not be sent to user {user_id}")

        return Return.ok(MessageResponse(message=FORGOT_PASSWORD_MESSAGE))
