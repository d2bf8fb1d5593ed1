"""API tests for /api/crm — contacts, interactions, activities."""

import uuid

import pytest

from conftest import bearer, register_user

_CONTACT = {
    "first_name": "María",
    "last_name": "Gómez",
    "email": "Maria@Cliente.uy",
    "phone_number": "099123456",
    "job_title": "Compras",
}


async def _create_contact(client, headers, **overrides) -> dict:
    r = await client.post("/api/crm/contacts", json={**_CONTACT, **overrides}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.asyncio
async def test_crm_requires_auth(client):
    r = await client.get("/api/crm/contacts")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_contact_crud(client, owner):
    headers = owner["headers"]
    contact = await _create_contact(client, headers)
    assert contact["email"] == "maria@cliente.uy"

    r = await client.get("/api/crm/contacts", headers=headers)
    assert [c["id"] for c in r.json()["data"]] == [contact["id"]]

    r = await client.put(
        f"/api/crm/contacts/{contact['id']}",
        json={"job_title": "Gerente", "first_name": None},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["data"]["job_title"] == "Gerente"
    assert r.json()["data"]["first_name"] == "María"

    r = await client.delete(f"/api/crm/contacts/{contact['id']}", headers=headers)
    assert r.status_code == 200
    r = await client.delete(f"/api/crm/contacts/{contact['id']}", headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Contact not found."


@pytest.mark.asyncio
async def test_duplicate_contact_email(client, owner):
    await _create_contact(client, owner["headers"])
    r = await client.post(
        "/api/crm/contacts", json={**_CONTACT, "email": "maria@cliente.uy"}, headers=owner["headers"]
    )
    assert r.status_code == 409
    assert r.json()["error"] == "A contact with this email already exists."


@pytest.mark.asyncio
async def test_same_contact_email_for_different_users(client, owner):
    await _create_contact(client, owner["headers"])
    other = await register_user(client, email="other@example.com")
    await _create_contact(client, bearer(other))


@pytest.mark.asyncio
async def test_contacts_are_private(client, owner):
    contact = await _create_contact(client, owner["headers"])
    other = await register_user(client, email="other@example.com")
    r = await client.get("/api/crm/contacts", headers=bearer(other))
    assert r.json()["data"] == []
    r = await client.put(
        f"/api/crm/contacts/{contact['id']}", json={"job_title": "x"}, headers=bearer(other)
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_interactions(client, owner):
    headers = owner["headers"]
    contact = await _create_contact(client, headers)
    r = await client.post(
        "/api/crm/interactions",
        json={"contact_id": contact["id"], "channel": "whatsapp", "content": "Pidió presupuesto"},
        headers=headers,
    )
    assert r.status_code == 201
    interaction = r.json()["data"]
    assert interaction["user_id"] == owner["id"]

    r = await client.get(
        "/api/crm/interactions", params={"contact_id": contact["id"]}, headers=headers
    )
    assert [i["id"] for i in r.json()["data"]] == [interaction["id"]]
    r = await client.get(
        "/api/crm/interactions", params={"contact_id": str(uuid.uuid4())}, headers=headers
    )
    assert r.json()["data"] == []

    r = await client.put(
        f"/api/crm/interactions/{interaction['id']}", json={"content": "Presupuesto enviado"},
        headers=headers,
    )
    assert r.json()["data"]["content"] == "Presupuesto enviado"
    assert r.json()["data"]["channel"] == "whatsapp"

    r = await client.delete(f"/api/crm/interactions/{interaction['id']}", headers=headers)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_interaction_for_unknown_contact(client, owner):
    r = await client.post(
        "/api/crm/interactions",
        json={"contact_id": str(uuid.uuid4()), "channel": "email"},
        headers=owner["headers"],
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_activities(client, owner):
    headers = owner["headers"]
    contact = await _create_contact(client, headers)
    r = await client.post(
        "/api/crm/activities",
        json={"type": "call", "description": "Llamar", "contact_id": contact["id"],
              "due_date": "2026-11-01T10:00:00Z"},
        headers=headers,
    )
    assert r.status_code == 201
    call = r.json()["data"]
    assert call["completed"] is False

    r = await client.post("/api/crm/activities", json={"type": "meeting"}, headers=headers)
    meeting = r.json()["data"]

    r = await client.put(
        f"/api/crm/activities/{meeting['id']}", json={"completed": True}, headers=headers
    )
    assert r.status_code == 200
    assert r.json()["data"]["completed"] is True

    r = await client.get("/api/crm/activities", params={"completed": "true"}, headers=headers)
    assert [a["id"] for a in r.json()["data"]] == [meeting["id"]]
    r = await client.get("/api/crm/activities", params={"completed": "false"}, headers=headers)
    assert [a["id"] for a in r.json()["data"]] == [call["id"]]
    r = await client.get("/api/crm/activities", headers=headers)
    assert len(r.json()["data"]) == 2

    r = await client.delete(f"/api/crm/activities/{call['id']}", headers=headers)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_activity_invalid_type(client, owner):
    r = await client.post("/api/crm/activities", json={"type": "x"}, headers=owner["headers"])
    assert r.status_code == 400
