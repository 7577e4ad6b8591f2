from realty_auth.libs.result import Result, Return
from realty_auth.app.services.credential_store import CredentialStore
from realty_auth.app.services.unit_of_work import UnitOfWork
from .dtos import CheckEmailResponse


class CheckEmailUseCase:
    """Reports whether an email is already registered"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str) -> Result[CheckEmailResponse]:
        async with self.uow:
            exists = await CredentialStore(self.uow.users).email_exists(email)
        return Return.ok(CheckEmailResponse(exists=exists))
