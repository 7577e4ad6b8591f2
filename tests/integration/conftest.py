from datetime import datetime
from typing import List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from realty_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from realty_auth.app.services.credential_store import hash_password, hash_token
from realty_auth.app.services.email_sender import EmailSender
from realty_auth.depends import get_email_sender, get_unit_of_work
from realty_auth.domain.entities import User

PASSWORD = "P@ssw0rd1"


class IntegrationConfig(ApplicationConfig):
    ENVIRONMENT = "development"
    JWT_SECRET = "integration-test-secret"
    SMTP_HOST = None
    CACHE_BACKEND = "memory"
    API_PREFIX = "/api"
    CORS_ORIGINS = []


class RecordingEmailSender(EmailSender):
    """Keeps every email in memory so tests can follow the emailed links"""

    def __init__(self):
        self.sent: List[Tuple[str, str, Optional[str]]] = []

    def last_token(self, kind: str, email: str) -> Optional[str]:
        for sent_kind, to_email, token in reversed(self.sent):
            if sent_kind == kind and to_email == email:
                return token
        return None

    async def send_verification_email(self, email, verification_token, first_name=None):
        self.sent.append(("verification", email, verification_token))
        return True

    async def send_resend_verification_email(self, email, verification_token, first_name=None):
        self.sent.append(("verification", email, verification_token))
        return True

    async def send_password_reset_email(self, email, reset_token, first_name=None):
        self.sent.append(("reset", email, reset_token))
        return True

    async def send_welcome_email(self, email, first_name=None):
        self.sent.append(("welcome", email, None))
        return True


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def outbox():
    return RecordingEmailSender()


@pytest.fixture
def app(db_session, outbox):
    from realty_auth.api.app import create_app

    app = create_app(IntegrationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_sender] = lambda: outbox
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def issue_csrf_token(client):
    async def _issue() -> str:
        response = await client.get("/api/auth/csrf-token")
        return response.json()["data"]["token"]

    return _issue


@pytest.fixture
def seed_user(db_session):
    """Insert a user directly, bypassing the API"""

    async def _seed(
        email: str = "jane@acme.com",
        verified: bool = True,
        verification_token: Optional[str] = None,
        verification_expires_at: Optional[datetime] = None,
        **fields,
    ) -> User:
        user = User(
            first_name=fields.pop("first_name", "Jane"),
            last_name=fields.pop("last_name", "Doe"),
            email=email,
            phone=fields.pop("phone", "5551234567"),
            password_hash=hash_password(fields.pop("password", PASSWORD)),
            is_email_verified=verified,
            email_verification_token=hash_token(verification_token) if verification_token else None,
            email_verification_expires_at=verification_expires_at,
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _seed


@pytest.fixture
def register(client):
    async def _register(email: str = "jane@x.com", **overrides):
        body = {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": email,
            "phone": "5551234567",
            "password": PASSWORD,
        }
        body.update(overrides)
        return await client.post("/api/auth/register", json=body)

    return _register
