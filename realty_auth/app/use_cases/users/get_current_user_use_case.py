"""
Get Current User Use Case

Loads the user named by verified access token claims.
"""

from uuid import UUID

from realty_auth.libs.result import Error, Result, Return
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from realty_auth.app.use_cases.auth.dtos import UserInfo, UserResponse


class GetCurrentUserUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: str) -> Result[UserResponse]:
        """
        Args:
            user_id: userId claim of a verified access token

        Returns:
            Result with the user, or Error(USER_NOT_FOUND)
        """
        try:
            parsed_id = UUID(str(user_id))
        except ValueError:
            return Return.err(Error("USER_NOT_FOUND", "User not found"))

        async with self.uow:
            user = await CredentialStore(self.uow.users).find_by_id(parsed_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            return Return.ok(UserResponse(user=UserInfo.from_entity(user)))
