import os

# Cấu hình môi trường trước khi import ứng dụng
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ.pop("CLOUDINARY_URL", None)

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from blogchat.main import app
from blogchat.models import init_db
from blogchat.services import upload_service


@pytest.fixture
async def db():
    """Beanie trên một MongoDB giả lập mới cho mỗi test."""
    await init_db(AsyncMongoMockClient())


@pytest.fixture
async def client(db, tmp_path, monkeypatch):
    monkeypatch.setattr(upload_service, "UPLOAD_DIR", str(tmp_path / "uploads"))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def signup(client):
    async def _signup(username, password="secret123", email=None, image=None):
        response = await client.post("/api/auth/signup", json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
            "image": image,
        })
        assert response.status_code == 201, response.text
        return response.json()

    return _signup
