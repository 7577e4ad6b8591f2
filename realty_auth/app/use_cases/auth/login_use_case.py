"""
Login Use Case

Authenticates email and password and returns a fresh access token.
"""

from realty_auth.libs.result import Error, Result, Return
from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import AuthResponse, UserInfo


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Unknown email and wrong password fail with the same INVALID_CREDENTIALS
      error, in constant time
    - Email verification is not checked here; the route enforces it
    """

    def __init__(self, uow: UnitOfWork, token_codec: TokenCodec):
        self.uow = uow
        self.token_codec = token_codec

    async def execute(self, email: str, password: str) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with AuthResponse, or Error(INVALID_CREDENTIALS)
        """
        async with self.uow:
            store = CredentialStore(self.uow.users)
            user = await store.find_by_email(email)

            if not store.verify_password(user, password):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            access_token = self.token_codec.issue_access_token(user.id, user.email)
            return Return.ok(
                AuthResponse(user=UserInfo.from_entity(user), access_token=access_token)
            )
