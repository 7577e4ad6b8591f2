"""
Register Use Case

Creates a local account, issues an access token straight away and emails a
verification link.
"""

import logging

from realty_auth.libs.result import Error, Result, Return
from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.email_sender import EmailSender
from realty_auth.app.services.unit_of_work import UnitOfWork
from realty_auth.domain.password_policy import check_password
from .dtos import AuthResponse, RegisterCommand, UserInfo

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Use case for user registration.

    Business Rules:
    - First name, last name, email and password are required
    - Password must satisfy the password policy
    - Email must be unique (DUPLICATE_EMAIL)
    - A verification token is stored with the user before the insert
    - The access token is issued even though the email is unverified;
      login enforces verification separately
    - A failed verification email does not fail the registration
    """

    def __init__(self, uow: UnitOfWork, token_codec: TokenCodec, email_sender: EmailSender):
        self.uow = uow
        self.token_codec = token_codec
        self.email_sender = email_sender

    async def execute(self, command: RegisterCommand) -> Result[AuthResponse]:
        if not all(
            value and value.strip()
            for value in (command.first_name, command.last_name, command.email)
        ) or not command.password:
            return Return.err(Error("MISSING_FIELDS", "All fields are required"))

        password_check = check_password(command.password)
        if not password_check.is_valid:
            return Return.err(Error("INVALID_PASSWORD", "; ".join(password_check.errors)))

        async with self.uow:
            store = CredentialStore(self.uow.users)
            result = await store.create(
                first_name=command.first_name,
                last_name=command.last_name,
                email=command.email,
                phone=command.phone,
                password=command.password,
            )
            if result.is_err():
                return result

            await self.uow.commit()
            user = result.value.user
            user_info = UserInfo.from_entity(user)
            verification_token = result.value.verification_token

        access_token = self.token_codec.issue_access_token(user_info.id, user_info.email)

        sent = await self.email_sender.send_verification_email(
            user_info.email, verification_token, user_info.first_name
        )
        if not sent:
            logger.warning(f"Verification email could not be sent to user {user_info.id}")

        logger.info(f"User registered: {user_info.id}")
        return Return.ok(AuthResponse(user=user_info, access_token=access_token))
