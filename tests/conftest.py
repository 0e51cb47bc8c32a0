import json

import pytest
from fastapi.testclient import TestClient

from database.db import SheetStore
from dependencies.store import get_store
from main import app
from models.registry import init_sheets
from services.auth_service import set_admin_credentials

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "secret"


@pytest.fixture()
def store():
    # in-memory workbook, every sheet with its header row
    store = init_sheets(SheetStore())
    set_admin_credentials(store, ADMIN_USERNAME, ADMIN_PASSWORD)
    return store


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def rpc(client):
    """POST one action the way the dashboard does (JSON sent as text/plain)"""
    def call(action, payload=None):
        response = client.post(
            "/v1/exec",
            content=json.dumps({"action": action, "payload": payload or {}}),
            headers={"Content-Type": "text/plain;charset=utf-8"},
        )
        assert response.status_code == 200
        return response.json()
    return call
