"""API tests for /api/users — register, login, session, OAuth, delete."""

import pytest

from conftest import bearer, register_user


@pytest.mark.asyncio
async def test_register_returns_tokens_and_cookies(client):
    r = await client.post(
        "/api/users/register",
        json={"name": "Ana", "email": "ana@example.com", "password": "secret123"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    data = body["data"]
    assert data["id"]
    assert data["email"] == "ana@example.com"
    assert data["accessToken"]
    assert data["refreshToken"]
    assert r.cookies.get("accessToken") == data["accessToken"]
    assert r.cookies.get("refreshToken") == data["refreshToken"]

    set_cookie = r.headers.get_list("set-cookie")
    assert all("httponly" in c.lower() for c in set_cookie)
    assert all("samesite=strict" in c.lower() for c in set_cookie)


@pytest.mark.asyncio
async def test_register_then_delete_own_account(client):
    data = await register_user(client)
    r = await client.delete(f"/api/users/{data['id']}", headers=bearer(data))
    assert r.status_code == 200
    assert r.json()["message"] == "User deleted successfully"

    r = await client.delete(f"/api/users/{data['id']}", headers=bearer(data))
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "User not found"}


@pytest.mark.asyncio
async def test_delete_other_account_forbidden(client):
    mine = await register_user(client, email="me@example.com")
    theirs = await register_user(client, email="them@example.com")
    r = await client.delete(f"/api/users/{theirs['id']}", headers=bearer(mine))
    assert r.status_code == 403
    assert r.json()["success"] is False


@pytest.mark.asyncio
async def test_delete_requires_token(client):
    data = await register_user(client)
    r = await client.delete(f"/api/users/{data['id']}")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_register_duplicate(client):
    await register_user(client)
    r = await client.post(
        "/api/users/register",
        json={"name": "Again", "email": "owner@example.com", "password": "secret123"},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "User with this email already exists."


@pytest.mark.asyncio
async def test_register_invalid_body(client):
    r = await client.post(
        "/api/users/register", json={"name": "Ana", "email": "nope", "password": "1"}
    )
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    fields = {issue["field"] for issue in body["details"]}
    assert {"email", "password"} <= fields


@pytest.mark.asyncio
async def test_login(client):
    data = await register_user(client, password="secret123")
    r = await client.post(
        "/api/users/login", json={"email": "owner@example.com", "password": "secret123"}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["data"]["id"] == data["id"]
    assert r.cookies.get("accessToken")


@pytest.mark.asyncio
async def test_login_bad_credentials(client):
    await register_user(client, password="secret123")
    r = await client.post(
        "/api/users/login", json={"email": "owner@example.com", "password": "wrong-one"}
    )
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Invalid email or password"}


@pytest.mark.asyncio
async def test_me_with_bearer(client, owner):
    r = await client.get("/api/users/me", headers=owner["headers"])
    assert r.status_code == 200
    user = r.json()["data"]
    assert user["id"] == owner["id"]
    assert user["provider"] == "email"
    assert "password_hash" not in user


@pytest.mark.asyncio
async def test_me_with_cookie(client, owner):
    client.cookies.set("accessToken", owner["accessToken"])
    r = await client.get("/api/users/me")
    assert r.status_code == 200
    assert r.json()["data"]["id"] == owner["id"]


@pytest.mark.asyncio
async def test_me_without_token(client):
    r = await client.get("/api/users/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Access token missing or invalid"


@pytest.mark.asyncio
async def test_me_with_garbage_token(client):
    r = await client.get("/api/users/me", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_me_after_account_deleted(client, owner):
    r = await client.delete(f"/api/users/{owner['id']}", headers=owner["headers"])
    assert r.status_code == 200
    r = await client.get("/api/users/me", headers=owner["headers"])
    assert r.status_code == 200
    assert r.json()["data"] is None


@pytest.mark.asyncio
async def test_refresh_from_body(client, owner):
    r = await client.post("/api/users/refresh", json={"refreshToken": owner["refreshToken"]})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["accessToken"]
    assert data["user"]["id"] == owner["id"]
    assert r.cookies.get("accessToken") == data["accessToken"]


@pytest.mark.asyncio
async def test_refresh_from_cookie(client, owner):
    client.cookies.set("refreshToken", owner["refreshToken"])
    r = await client.post("/api/users/refresh")
    assert r.status_code == 200
    assert r.json()["data"]["user"]["id"] == owner["id"]


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client, owner):
    r = await client.post("/api/users/refresh", json={"refreshToken": owner["accessToken"]})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_refresh_missing_token(client):
    r = await client.post("/api/users/refresh")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookies(client, owner):
    r = await client.post("/api/users/logout")
    assert r.status_code == 200
    assert r.json()["message"] == "Logout successful"
    set_cookie = " ".join(r.headers.get_list("set-cookie"))
    assert 'accessToken=""' in set_cookie
    assert 'refreshToken=""' in set_cookie


@pytest.mark.asyncio
async def test_microsoft_auth_create_then_authenticate(client):
    payload = {"microsoft_id": "ms-oid-0123456789", "name": "Bob", "email": "bob@example.com"}
    r = await client.post("/api/users/microsoft-auth", json=payload)
    assert r.status_code == 200
    assert r.json()["message"] == "User created successfully"
    data = r.json()["data"]
    assert data["id"] == "ms-oid-0123456789"

    r = await client.post("/api/users/microsoft-auth", json=payload)
    assert r.status_code == 200
    assert r.json()["message"] == "User authenticated successfully"
    assert r.json()["data"]["id"] == data["id"]

    r = await client.get("/api/users/me", headers=bearer(data))
    assert r.json()["data"]["provider"] == "microsoft"


@pytest.mark.asyncio
async def test_microsoft_auth_email_conflict(client, owner):
    r = await client.post(
        "/api/users/microsoft-auth",
        json={"microsoft_id": "ms-oid-0123456789", "name": "Bob", "email": "owner@example.com"},
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_unknown_route(client):
    r = await client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Route not found"}


@pytest.mark.asyncio
async def test_microsoft_auth_cannot_use_password_account_id(client, owner):
    r = await client.post(
        "/api/users/microsoft-auth", json={"microsoft_id": owner["id"], "name": "Mallory"}
    )
    assert r.status_code == 409
    assert r.json()["success"] is False
    assert "accessToken" not in r.cookies

    r = await client.get("/api/users/me", headers=owner["headers"])
    assert r.json()["data"]["name"] == "Shop Owner"
