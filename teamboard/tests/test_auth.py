from datetime import timedelta

import pytest

from teamboard.common.security import create_access_token, decode_token


@pytest.mark.asyncio
async def test_register(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={"name": "Carol", "email": "carol@test.com", "password": "supersecret"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "carol@test.com"
    assert data["user"]["role"] == "member"
    assert "hashed_password" not in data["user"]
    assert decode_token(data["token"])["sub"] == data["user"]["id"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    payload = {"name": "Carol", "email": "carol@test.com", "password": "supersecret"}
    await client.post("/api/v1/auth/register", json=payload)
    response = await client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_short_password(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={"name": "Carol", "email": "carol@test.com", "password": "short"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login(client, test_user):
    response = await client.post(
        "/api/v1/auth/login", json={"email": test_user.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == str(test_user.id)


@pytest.mark.asyncio
async def test_login_wrong_password(client, test_user):
    response = await client.post(
        "/api/v1/auth/login", json={"email": test_user.email, "password": "wrongpass"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email(client):
    response = await client.post(
        "/api/v1/auth/login", json={"email": "nobody@test.com", "password": "whatever1"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_missing_token(client):
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Access token required"


@pytest.mark.asyncio
async def test_invalid_token(client):
    response = await client.get(
        "/api/v1/users/me", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_expired_token(client, test_user):
    token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(seconds=-5))
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Request-Duration-Ms" in response.headers
