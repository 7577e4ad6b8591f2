import logging

from realty_auth.libs.result import Result, Return
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import ClearExpiredTokensResponse

logger = logging.getLogger(__name__)


class ClearExpiredTokensUseCase:
    """
    Unsets verification and reset token fields whose expiry has passed.

    Idempotent: a second run right after the first clears nothing.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[ClearExpiredTokensResponse]:
        async with self.uow:
            cleared = await CredentialStore(self.uow.users).clear_expired_tokens()
            await self.uow.commit()

        logger.info(f"Cleared expired tokens on {cleared} user records")
        return Return.ok(
            ClearExpiredTokensResponse(cleared=cleared, message="Expired tokens cleared successfully")
        )
