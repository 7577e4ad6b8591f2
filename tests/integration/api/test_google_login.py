import pytest
from httpx import AsyncClient


def google_payload(**overrides):
    payload = {
        "googleId": "g-123",
        "email": "jane@acme.com",
        "firstName": "Jane",
        "lastName": "Doe",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_first_google_login_creates_verified_user(client: AsyncClient):
    response = await client.post("/api/auth/google", json=google_payload())

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isNewUser"] is True
    assert data["user"]["isEmailVerified"] is True
    assert data["user"]["googleId"] == "g-123"
    assert data["user"]["phone"] == ""
    assert response.json()["message"] == "User registered successfully with Google"


@pytest.mark.asyncio
async def test_second_google_login_finds_the_same_user(client: AsyncClient):
    first = await client.post("/api/auth/google", json=google_payload())
    second = await client.post("/api/auth/google", json=google_payload(email="renamed@acme.com"))

    assert second.json()["data"]["isNewUser"] is False
    assert second.json()["data"]["user"]["id"] == first.json()["data"]["user"]["id"]


@pytest.mark.asyncio
async def test_google_login_links_existing_password_account(client: AsyncClient, seed_user):
    user = await seed_user(email="jane@acme.com", verified=False)
    user_id = str(user.id)

    response = await client.post("/api/auth/google", json=google_payload())

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["isNewUser"] is False
    assert data["user"]["id"] == user_id
    assert data["user"]["isEmailVerified"] is True


@pytest.mark.asyncio
async def test_unverified_google_linked_account_must_verify(client: AsyncClient, seed_user):
    await seed_user(email="jane@acme.com", verified=False, google_id="g-123")

    response = await client.post("/api/auth/google", json=google_payload())

    assert response.status_code == 403
    assert response.json()["data"]["requiresVerification"] is True


@pytest.mark.asyncio
async def test_google_login_requires_all_fields(client: AsyncClient):
    response = await client.post("/api/auth/google", json={"googleId": "g-123"})

    assert response.status_code == 400
