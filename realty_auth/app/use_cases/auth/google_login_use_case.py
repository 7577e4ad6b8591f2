"""
Google Login Use Case

Signs in, links or creates an account from a Google identity.
"""

import logging
import secrets

from realty_auth.libs.result import Result, Return
from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import GoogleAuthResponse, GoogleLoginCommand, UserInfo

logger = logging.getLogger(__name__)


class GoogleLoginUseCase:
    """
    Use case for Google sign-in.

    Business Rules:
    - A user already linked to the Google ID signs in (isNewUser false)
    - Otherwise a user with the same email gets the Google ID linked and is
      marked verified (isNewUser false)
    - Otherwise a verified user is created with a random, unusable password
      (isNewUser true)
    """

    def __init__(self, uow: UnitOfWork, token_codec: TokenCodec):
        self.uow = uow
        self.token_codec = token_codec

    async def execute(self, command: GoogleLoginCommand) -> Result[GoogleAuthResponse]:
        async with self.uow:
            store = CredentialStore(self.uow.users)
            is_new_user = False

            user = await store.find_by_google_id(command.google_id)
            if user is None:
                user = await store.find_by_email(command.email)
                if user is not None:
                    store.link_google_account(user, command.google_id, command.email)
                    user = await store.save(user)
                    logger.info(f"Linked Google account to user {user.id}")
                else:
                    result = await store.create(
                        first_name=command.first_name,
                        last_name=command.last_name,
                        email=command.email,
                        phone=None,
                        password=secrets.token_hex(32),
                        google_id=command.google_id,
                        is_email_verified=True,
                    )
                    if result.is_err():
                        return result
                    user = result.value.user
                    is_new_user = True
                    logger.info(f"Created user {user.id} from Google sign-in")

            await self.uow.commit()

            access_token = self.token_codec.issue_access_token(user.id, user.email)
            return Return.ok(
                GoogleAuthResponse(
                    user=UserInfo.from_entity(user),
                    access_token=access_token,
                    is_new_user=is_new_user,
                )
            )
