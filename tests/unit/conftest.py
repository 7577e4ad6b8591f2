from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from realty_auth.api.utils.jwt import TokenCodec
from realty_auth.app.services.credential_store import hash_password
from realty_auth.domain.entities import User

TEST_SECRET = "unit-test-secret"
TEST_PASSWORD = "P@ssw0rd1"


class FakeClock:
    """Manually advanced clock for time-window tests"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_google_id = AsyncMock(return_value=None)
    uow.users.get_by_verification_token = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.clear_expired_tokens = AsyncMock(return_value=0)
    return uow


@pytest.fixture
def token_codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def email_sender():
    sender = MagicMock()
    sender.send_verification_email = AsyncMock(return_value=True)
    sender.send_resend_verification_email = AsyncMock(return_value=True)
    sender.send_password_reset_email = AsyncMock(return_value=True)
    sender.send_welcome_email = AsyncMock(return_value=True)
    return sender


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt at cost 12 is slow; hash once per session
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def make_user(password_hash):
    def _make_user(**overrides) -> User:
        fields = {
            "id": uuid4(),
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@acme.com",
            "phone": "5551234567",
            "password_hash": password_hash,
            "is_email_verified": True,
        }
        fields.update(overrides)
        return User(**fields)

    return _make_user
