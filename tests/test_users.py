"""Client provisioning, ownership and deactivation tests."""
import uuid

from coachdesk.core.constants import UserRole


def _new_client_payload(email=None):
    return {
        "email": email or f"client-{uuid.uuid4().hex[:8]}@example.com",
        "name": "New Client",
        "password": "ClientPassw0rd!",
    }


async def test_admin_provisions_client_who_can_log_in(async_client, make_user, auth_headers):
    admin = make_user(role=UserRole.ADMIN)
    payload = _new_client_payload()

    r = await async_client.post("/users/clients", json=payload, headers=auth_headers(admin))
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["email"] == payload["email"]
    assert created["role"] == "CLIENT"
    assert created["active"] is True
    assert "password_hash" not in created

    r = await async_client.post("/auth/login", json={"email": payload["email"], "password": payload["password"]})
    assert r.status_code == 200

    r = await async_client.get("/users/clients", headers=auth_headers(admin))
    assert r.status_code == 200
    assert created["id"] in [c["id"] for c in r.json()["data"]]


async def test_duplicate_email_is_conflict_regardless_of_case(async_client, make_user, auth_headers):
    admin = make_user(role=UserRole.ADMIN)
    payload = _new_client_payload()

    r = await async_client.post("/users/clients", json=payload, headers=auth_headers(admin))
    assert r.status_code == 201

    payload["email"] = payload["email"].upper()
    r = await async_client.post("/users/clients", json=payload, headers=auth_headers(admin))
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CONFLICT"


async def test_client_cannot_provision_or_list(async_client, make_user, auth_headers):
    client = make_user()

    r = await async_client.post("/users/clients", json=_new_client_payload(), headers=auth_headers(client))
    assert r.status_code == 403

    r = await async_client.get("/users/clients", headers=auth_headers(client))
    assert r.status_code == 403


async def test_ownership_on_client_record(async_client, make_user, auth_headers):
    admin = make_user(role=UserRole.ADMIN)
    alice = make_user()
    bob = make_user()

    r = await async_client.get(f"/users/clients/{alice.id}", headers=auth_headers(alice))
    assert r.status_code == 200
    assert r.json()["data"]["id"] == alice.id

    r = await async_client.get(f"/users/clients/{alice.id}", headers=auth_headers(bob))
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"

    r = await async_client.get(f"/users/clients/{alice.id}", headers=auth_headers(admin))
    assert r.status_code == 200

    r = await async_client.get("/users/clients/missing-id", headers=auth_headers(admin))
    assert r.status_code == 404


async def test_deactivation_revokes_access(async_client, make_user, auth_headers, password):
    admin = make_user(role=UserRole.ADMIN)
    client = make_user()
    r = await async_client.post("/auth/login", json={"email": client.email, "password": password})
    tokens = r.json()["data"]
    client_headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    r = await async_client.get("/users/me", headers=client_headers)
    assert r.status_code == 200

    r = await async_client.patch(
        f"/users/clients/{client.id}",
        json={"active": False},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    assert r.json()["data"]["active"] is False

    # outstanding access token stops working immediately
    r = await async_client.get("/users/me", headers=client_headers)
    assert r.status_code == 401

    # and the session it came with is gone
    r = await async_client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "TOKEN_REVOKED"

    r = await async_client.post("/auth/login", json={"email": client.email, "password": password})
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "ACCOUNT_DISABLED"


async def test_client_cannot_change_own_active_flag(async_client, make_user, auth_headers):
    client = make_user()
    r = await async_client.patch(f"/users/clients/{client.id}", json={"active": True}, headers=auth_headers(client))
    assert r.status_code == 403


async def test_update_own_profile(async_client, make_user, auth_headers):
    client = make_user(name="Before")

    r = await async_client.patch("/users/me", json={"name": "After Name"}, headers=auth_headers(client))

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "After Name"
    assert data["role"] == "CLIENT"


async def test_health(async_client):
    r = await async_client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "ok"}


async def test_admin_accounts_are_not_reachable_as_clients(async_client, make_user, auth_headers):
    admin = make_user(role=UserRole.ADMIN)
    other_admin = make_user(role=UserRole.ADMIN)

    r = await async_client.get(f"/users/clients/{other_admin.id}", headers=auth_headers(admin))
    assert r.status_code == 404
    assert r.json()["error"] == {"code": "NOT_FOUND", "message": "Client not found"}

    r = await async_client.patch(f"/users/clients/{admin.id}", json={"active": False}, headers=auth_headers(admin))
    assert r.status_code == 404

    r = await async_client.delete(f"/users/clients/{other_admin.id}", headers=auth_headers(admin))
    assert r.status_code == 404

    # the admin is still active and can keep working
    r = await async_client.get("/users/clients", headers=auth_headers(admin))
    assert r.status_code == 200


async def test_delete_client_deactivates_and_keeps_record(async_client, make_user, auth_headers, password):
    admin = make_user(role=UserRole.ADMIN)
    client = make_user()
    r = await async_client.post("/auth/login", json={"email": client.email, "password": password})
    refresh = r.json()["data"]["refresh_token"]

    r = await async_client.delete(f"/users/clients/{client.id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["data"]["active"] is False

    r = await async_client.get(f"/users/clients/{client.id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["data"]["active"] is False

    r = await async_client.post("/auth/refresh", json={"refresh_token": refresh})
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "TOKEN_REVOKED"


async def test_client_cannot_delete_clients(async_client, make_user, auth_headers):
    client = make_user()
    r = await async_client.delete(f"/users/clients/{client.id}", headers=auth_headers(client))
    assert r.status_code == 403


async def test_unknown_route_uses_error_envelope(async_client):
    r = await async_client.get("/no-such-route")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": {"code": "HTTP_ERROR", "message": "Not Found"}}

    r = await async_client.put("/health")
    assert r.status_code == 405
    assert r.json()["error"]["code"] == "HTTP_ERROR"
