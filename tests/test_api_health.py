"""Basic API smoke tests — root, health, plan catalog."""

import pytest

from bizbuilder.core.config import DEFAULT_PLAN_ID


@pytest.mark.asyncio
async def test_root(client):
    r = await client.get("/")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "API is running successfully"
    assert body["data"]["name"] == "bizbuilder"


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["status"] == "OK"
    assert data["uptime"] >= 0
    assert data["timestamp"]


@pytest.mark.asyncio
async def test_plans_list(client):
    r = await client.get("/api/plans")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["total"] == 5
    names = [p["name"] for p in data["items"]]
    assert names[0] == "FREE"
    assert "PREMIUM" in names
    amounts = [p["amount"] for p in data["items"]]
    assert amounts == sorted(amounts)


@pytest.mark.asyncio
async def test_plan_get(client):
    r = await client.get(f"/api/plans/{DEFAULT_PLAN_ID}")
    assert r.status_code == 200
    plan = r.json()["data"]
    assert plan["name"] == "FREE"
    assert plan["amount"] == 0


@pytest.mark.asyncio
async def test_plan_not_found(client):
    r = await client.get("/api/plans/does-not-exist")
    assert r.status_code == 404
    assert r.json()["error"] == "Plan not found"


@pytest.mark.asyncio
async def test_new_users_get_the_free_plan(client, owner):
    assert owner["plan_id"] == DEFAULT_PLAN_ID
