"""
Update Profile Use Case

Partial update of the caller's own name and phone.
"""

import logging
from uuid import UUID

from realty_auth.libs.result import Error, Result, Return
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from realty_auth.app.use_cases.auth.dtos import UserInfo, UserResponse
from .dtos import UpdateProfileCommand

logger = logging.getLogger(__name__)


class UpdateProfileUseCase:
    """
    Use case for profile updates.

    Business Rules:
    - Only first name, last name and phone can change
    - Fields not supplied keep their current value
    - Email, password and verification state are never touched here
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: str, command: UpdateProfileCommand) -> Result[UserResponse]:
        try:
            parsed_id = UUID(str(user_id))
        except ValueError:
            return Return.err(Error("USER_NOT_FOUND", "User not found"))

        async with self.uow:
            user = await CredentialStore(self.uow.users).update_profile(
                parsed_id,
                first_name=command.first_name,
                last_name=command.last_name,
                phone=command.phone,
            )
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            await self.uow.commit()
            logger.info(f"Profile updated for user {user.id}")
            return Return.ok(UserResponse(user=UserInfo.from_entity(user)))
