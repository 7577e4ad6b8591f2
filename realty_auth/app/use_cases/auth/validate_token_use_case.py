"""
Validate Token Use Case

Token health check for clients holding an access or reset token.
"""

from uuid import UUID

from realty_auth.libs.result import Result, Return
from realty_auth.api.utils.jwt import RESET_TOKEN_TYPE, TokenCodec
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import TokenValidationResponse

ACCESS_TOKEN_TYPE = "access"


class ValidateTokenUseCase:
    """
    Use case for validating a token.

    Business Rules:
    - A token is valid when it verifies and its user still exists
    - Reset tokens that were already used to reset a password are invalid
    - Never fails; an invalid token is a successful answer of "no"
    """

    def __init__(self, uow: UnitOfWork, token_codec: TokenCodec):
        self.uow = uow
        self.token_codec = token_codec

    def validate_access_token(self, token: str) -> bool:
        return self.token_codec.verify(token) is not None

    async def execute(self, token: str) -> Result[TokenValidationResponse]:
        claims = self.token_codec.verify(token)
        if claims is None:
            return Return.ok(TokenValidationResponse(is_valid=False))

        token_type = RESET_TOKEN_TYPE if claims.get("type") == RESET_TOKEN_TYPE else ACCESS_TOKEN_TYPE

        try:
            user_id = UUID(str(claims.get("userId")))
        except ValueError:
            return Return.ok(TokenValidationResponse(is_valid=False, token_type=token_type))

        async with self.uow:
            user = await CredentialStore(self.uow.users).find_by_id(user_id)
            if user is None:
                return Return.ok(TokenValidationResponse(is_valid=False, token_type=token_type))
            already_used = token_type == RESET_TOKEN_TYPE and user.last_used_reset_token == token

        return Return.ok(TokenValidationResponse(is_valid=not already_used, token_type=token_type))
