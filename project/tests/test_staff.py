# tests/test_staff.py

import time
from datetime import timedelta

import jwt

from electra.utils.database import AsyncSessionLocal, seed_accounts
from electra.utils.security import create_access_token
from tests.conftest import ADMIN, STAFF, bearer, login


def new_staff(**overrides):
    data = {"name": "Ravi", "phone": "9123456789", "password": "secret1", "role": "staff"}
    data.update(overrides)
    return data


# ────────────── LOGIN ──────────────
def test_login_returns_token_with_identity(client):
    body = login(client, ADMIN)

    payload = jwt.decode(body["token"], "test-secret-key", algorithms=["HS256"])
    assert payload["phone"] == ADMIN["phone"]
    assert payload["role"] == "admin"
    assert payload["id"] == body["staff"]["id"]
    # токен живёт 24 часа
    remaining = payload["exp"] - time.time()
    assert 23 * 3600 < remaining <= 24 * 3600
    assert "password" not in body["staff"]


def test_login_wrong_password_and_unknown_phone_are_identical(client):
    wrong_password = client.post("/api/staff/login", json={"phone": ADMIN["phone"], "password": "nope"})
    unknown_phone = client.post("/api/staff/login", json={"phone": "9999999999", "password": "nope"})

    assert wrong_password.status_code == unknown_phone.status_code == 401
    assert wrong_password.json() == unknown_phone.json() == {"detail": "Invalid credentials"}


def test_login_requires_phone_and_password(client):
    response = client.post("/api/staff/login", json={"phone": ADMIN["phone"]})
    assert response.status_code == 400
    assert "password" in response.json()["errors"]


# ────────────── AUTH ──────────────
def test_staff_list_requires_token(client):
    assert client.get("/api/staff").status_code == 401
    assert client.get("/api/staff", headers=bearer("garbage")).status_code == 401


def test_expired_token_is_rejected(client):
    staff = login(client, ADMIN)["staff"]
    token = create_access_token(
        {"id": staff["id"], "phone": staff["phone"], "role": staff["role"]},
        expires_delta=timedelta(seconds=-1),
    )

    response = client.get("/api/staff", headers=bearer(token))

    assert response.status_code == 401
    assert response.json() == {"detail": "Token expired"}


def test_staff_list_hides_passwords(client, staff_headers):
    response = client.get("/api/staff", headers=staff_headers)

    assert response.status_code == 200
    staff = response.json()
    assert {s["phone"] for s in staff} == {"9876543210", "9876543211", "7875353444"}
    assert all("password" not in s for s in staff)


def test_non_admin_cannot_create_staff(client, staff_headers):
    response = client.post("/api/staff", json=new_staff(), headers=staff_headers)
    assert response.status_code == 403


# ────────────── CREATE ──────────────
def test_admin_creates_staff(client, admin_headers):
    response = client.post("/api/staff", json=new_staff(email=" Ravi@Example.COM "), headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Ravi"
    assert body["role"] == "staff"
    assert body["email"] == "ravi@example.com"
    assert body["attendance"] == []
    assert "password" not in body

    login(client, {"phone": "9123456789", "password": "secret1"})


def test_create_staff_missing_fields_reports_each_field(client, admin_headers):
    response = client.post("/api/staff", json={"name": "Ravi"}, headers=admin_headers)

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert {"phone", "password", "role"} <= set(errors)


def test_create_staff_rejects_unknown_role(client, admin_headers):
    response = client.post("/api/staff", json=new_staff(role="manager"), headers=admin_headers)

    assert response.status_code == 400
    assert "role" in response.json()["errors"]


def test_create_staff_rejects_bad_phone(client, admin_headers):
    response = client.post("/api/staff", json=new_staff(phone="12345"), headers=admin_headers)

    assert response.status_code == 400
    assert "phone" in response.json()["errors"]


def test_create_staff_duplicate_phone(client, admin_headers):
    response = client.post("/api/staff", json=new_staff(phone=STAFF["phone"]), headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"detail": "Phone number already exists", "field": "phone"}


# ────────────── READ / UPDATE / DELETE ──────────────
def test_get_staff_member(client, admin_headers):
    created = client.post("/api/staff", json=new_staff(), headers=admin_headers).json()

    response = client.get(f"/api/staff/{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["phone"] == "9123456789"

    assert client.get("/api/staff/9999", headers=admin_headers).status_code == 404


def test_update_staff_keeps_password_unless_given(client, admin_headers):
    created = client.post("/api/staff", json=new_staff(), headers=admin_headers).json()

    response = client.put(f"/api/staff/{created['id']}", json={"name": "Ravi K"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Ravi K"
    assert response.json()["phone"] == "9123456789"
    login(client, {"phone": "9123456789", "password": "secret1"})

    response = client.put(
        f"/api/staff/{created['id']}", json={"password": "changed1"}, headers=admin_headers
    )
    assert response.status_code == 200
    login(client, {"phone": "9123456789", "password": "changed1"})
    old = client.post("/api/staff/login", json={"phone": "9123456789", "password": "secret1"})
    assert old.status_code == 401


def test_update_staff_validates_merged_record(client, admin_headers):
    created = client.post("/api/staff", json=new_staff(), headers=admin_headers).json()

    response = client.put(f"/api/staff/{created['id']}", json={"role": "boss"}, headers=admin_headers)
    assert response.status_code == 400
    assert "role" in response.json()["errors"]

    response = client.put(
        f"/api/staff/{created['id']}", json={"phone": STAFF["phone"]}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["field"] == "phone"


def test_update_missing_staff_is_not_found(client, admin_headers):
    response = client.put("/api/staff/9999", json={"name": "X"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_staff(client, admin_headers):
    created = client.post("/api/staff", json=new_staff(), headers=admin_headers).json()

    response = client.delete(f"/api/staff/{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Staff member deleted successfully"}

    assert client.delete(f"/api/staff/{created['id']}", headers=admin_headers).status_code == 404


def test_delete_requires_admin(client, staff_headers):
    assert client.delete("/api/staff/1", headers=staff_headers).status_code == 403


# ────────────── SEED ──────────────
def test_seed_accounts_is_idempotent(client, admin_headers):
    async def seed_twice():
        async with AsyncSessionLocal() as session:
            return await seed_accounts(session)

    assert client.portal.call(seed_twice) == []
    response = client.get("/api/staff", headers=admin_headers)
    assert len(response.json()) == 3
