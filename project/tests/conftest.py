# tests/conftest.py

import os
import tempfile

# настройки читаются при импорте electra, поэтому окружение - до импорта
_tmp_dir = tempfile.mkdtemp(prefix="electra-tests-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(_tmp_dir, "test.db")
os.environ["AUTH_SECRET_KEY"] = "test-secret-key"
os.environ["AUTH_HASH_ROUNDS"] = "1000"
os.environ["LOG_DIR"] = os.path.join(_tmp_dir, "log")
os.environ["LOG_PRINT"] = "0"
os.environ["ORDER_IMAGE_FOLDER"] = "sarathi-orders"

import cloudinary.uploader
import pytest
from fastapi.testclient import TestClient

from electra.main import app
from electra.utils.database import AsyncSessionLocal, Base, engine, seed_accounts

ADMIN = {"phone": "9876543210", "password": "admin123"}
STAFF = {"phone": "9876543211", "password": "staff123"}
SPECIAL = {"phone": "7875353444", "password": "staff123"}


async def reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_accounts(session)


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clean_db(client):
    # сброс выполняется в event loop клиента, там же живут соединения движка
    client.portal.call(reset_db)
    yield


def login(client, credentials: dict) -> dict:
    response = client.post("/api/staff/login", json=credentials)
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    return bearer(login(client, ADMIN)["token"])


@pytest.fixture
def staff_headers(client):
    return bearer(login(client, STAFF)["token"])


@pytest.fixture
def special_staff(client):
    return login(client, SPECIAL)["staff"]


@pytest.fixture
def executive_headers(client, admin_headers):
    response = client.post(
        "/api/staff",
        json={"name": "Exec", "phone": "9000000001", "password": "exec123", "role": "executive"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return bearer(login(client, {"phone": "9000000001", "password": "exec123"})["token"])


@pytest.fixture
def cloudinary_stub(monkeypatch):
    """Подмена загрузки/удаления Cloudinary: вызовы складываются в списки."""
    calls = {"upload": [], "destroy": []}

    def fake_upload(file, **options):
        calls["upload"].append(options)
        name = f"img{len(calls['upload'])}"
        return {
            "secure_url": f"https://res.cloudinary.com/demo/image/upload/v1/{options.get('folder', '')}/{name}.jpg",
            "public_id": name,
        }

    def fake_destroy(public_id, **options):
        calls["destroy"].append(public_id)
        return {"result": "ok"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    monkeypatch.setattr(cloudinary.uploader, "destroy", fake_destroy)
    return calls
