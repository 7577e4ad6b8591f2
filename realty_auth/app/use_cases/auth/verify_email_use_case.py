"""
Verify Email Use Case

Marks an email verified from the token in the verification link.
"""

import logging

from realty_auth.libs.result import Error, Result, Return
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.email_sender import EmailSender
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import UserInfo, VerifyEmailResponse

logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - The token is hashed and matched against an unexpired stored hash
    - Verification clears the token, so a second use fails
    - A welcome email follows; failing to send it does not fail verification
    """

    def __init__(self, uow: UnitOfWork, email_sender: EmailSender):
        self.uow = uow
        self.email_sender = email_sender

    async def execute(self, token: str) -> Result[VerifyEmailResponse]:
        async with self.uow:
            store = CredentialStore(self.uow.users)
            user = await store.find_by_verification_token(token)

            if user is None:
                return Return.err(
                    Error("INVALID_OR_EXPIRED_TOKEN", "Invalid or expired verification token")
                )

            store.mark_email_verified(user)
            user = await store.save(user)
            await self.uow.commit()
            user_info = UserInfo.from_entity(user)

        sent = await self.email_sender.send_welcome_email(user_info.email, user_info.first_name)
        if not sent:
            logger.warning(f"Welcome email could not be sent to user {user_info.id}")

        return Return.ok(VerifyEmailResponse(user=user_info, message="Email verified successfully"))
