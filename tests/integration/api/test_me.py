import pytest
from httpx import AsyncClient

from realty_auth.api.utils.jwt import TokenCodec


def bearer(user):
    token = TokenCodec("integration-test-secret").issue_access_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_me_returns_current_user(client: AsyncClient, seed_user):
    user = await seed_user(email="jane@acme.com")
    user_id = str(user.id)

    response = await client.get("/api/auth/me", headers=bearer(user))

    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == user_id


@pytest.mark.asyncio
async def test_me_works_before_verification(client: AsyncClient, register):
    registered = await register(email="jane@x.com")
    token = registered.json()["data"]["accessToken"]

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["isEmailVerified"] is False


@pytest.mark.asyncio
async def test_me_without_token(client: AsyncClient):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Access token is required"}


@pytest.mark.asyncio
async def test_me_with_bad_token(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired access token"


@pytest.mark.asyncio
async def test_profile_partial_update(client: AsyncClient, seed_user):
    user = await seed_user(email="jane@acme.com")

    response = await client.put(
        "/api/auth/profile", json={"firstName": "<Janet>", "phone": "555-0000"}, headers=bearer(user)
    )

    assert response.status_code == 200
    updated = response.json()["data"]["user"]
    assert updated["firstName"] == "Janet"
    assert updated["lastName"] == "Doe"
    assert updated["phone"] == "555-0000"
    assert updated["email"] == "jane@acme.com"


@pytest.mark.asyncio
async def test_profile_requires_token(client: AsyncClient):
    response = await client.put("/api/auth/profile", json={"firstName": "Janet"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, seed_user):
    user = await seed_user(email="jane@acme.com")

    response = await client.post("/api/auth/logout", headers=bearer(user))
    anonymous = await client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}
    assert anonymous.status_code == 401
