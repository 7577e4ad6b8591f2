from abc import ABC, abstractmethod
from typing import Optional


class EmailSender(ABC):
    """
    Outbound transactional email - application layer.

    Implementations log delivery failures and return False instead of
    raising; a failed send never fails the calling flow.
    """

    @abstractmethod
    async def send_verification_email(
        self, email: str, verification_token: str, first_name: Optional[str] = None
    ) -> bool:
        pass

    @abstractmethod
    async def send_resend_verification_email(
        self, email: str, verification_token: str, first_name: Optional[str] = None
    ) -> bool:
        pass

    @abstractmethod
    async def send_password_reset_email(
        self, email: str, reset_token: str, first_name: Optional[str] = None
    ) -> bool:
        pass

    @abstractmethod
    async def send_welcome_email(self, email: str, first_name: Optional[str] = None) -> bool:
        pass
