"""Shared fixtures: an app bound to a throwaway SQLite database and a logged-in client."""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'products.db'}",
        jwt_secret="test-secret",
        admin_username="admin",
        admin_password="password123",
        environment="test",
    )


@pytest.fixture
def client(settings):
    """Test client with the lifespan (credential, engine, tables) running."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token(client):
    response = client.post("/login", json={"username": "admin", "password": "password123"})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def widget():
    return {"name": "Widget", "price": 9.99, "description": "x"}
