"""
Resend Verification Use Case

Replaces a user's verification token and emails the new link.
"""

import logging

from realty_auth.libs.result import Error, Result, Return
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.email_sender import EmailSender
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse

logger = logging.getLogger(__name__)


class ResendVerificationUseCase:
    """
    Use case for resending the verification email.

    Business Rules:
    - Unknown email: USER_NOT_FOUND
    - Already verified: ALREADY_VERIFIED
    - The new token overwrites the old one, which stops working
    """

    def __init__(self, uow: UnitOfWork, email_sender: EmailSender):
        self.uow = uow
        self.email_sender = email_sender

    async def execute(self, email: str) -> Result[MessageResponse]:
        async with self.uow:
            store = CredentialStore(self.uow.users)
            user = await store.find_by_email(email)

            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.is_email_verified:
                return Return.err(Error("ALREADY_VERIFIED", "Email is already verified"))

            verification_token = store.generate_email_verification_token(user)
            user = await store.save(user)
            await self.uow.commit()
            user_id, user_email, first_name = user.id, user.email, user.first_name

        sent = await self.email_sender.send_resend_verification_email(
            user_email, verification_token, first_name
        )
        if not sent:
            logger.warning(f"Verification email could not be resent to user {user_id}")

        return Return.ok(MessageResponse(message="Verification email sent successfully"))
