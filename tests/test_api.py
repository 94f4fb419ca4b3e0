"""Tests for API endpoints."""

import httpx
import pytest
from fastapi.testclient import TestClient

import doorctl.door as door_module
from doorctl.config import get_settings
from doorctl.door import DoorControlClient
from doorctl.main import app


@pytest.fixture(autouse=True)
def door_client(device):
    """Point the global door client at the fake device."""
    door_module._door_client = DoorControlClient(
        base_url="http://10.0.0.5/ISAPI",
        username=device.username,
        password=device.password,
        transport=httpx.MockTransport(device.handler),
    )

    yield door_module._door_client

    door_module._door_client = None


@pytest.fixture
def client():
    """Test client fixture."""
    with TestClient(app) as client:
        yield client


def test_health_check(client):
    """Test health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_control_door(client, device):
    """Test sending a door command."""
    response = client.post("/api/door/control", json={"doorId": 1, "command": "open"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert "<statusCode>1</statusCode>" in data["result"]
    assert device.authorized[0].content == b"<RemoteControlDoor><cmd>open</cmd></RemoteControlDoor>"


def test_control_door_reuses_challenge(client, device):
    """Test consecutive API calls share the cached challenge."""
    for command in ("temporaryOpen", "temporaryClose"):
        response = client.post("/api/door/control", json={"doorId": 2, "command": command})
        assert response.status_code == 200

    assert len(device.probes) == 1
    assert len(device.authorized) == 2


@pytest.mark.parametrize("body", [
    {"doorId": 0, "command": "open"},
    {"doorId": -1, "command": "open"},
    {"doorId": 1, "command": "unlock"},
    {"command": "open"},
    {"doorId": 1},
])
def test_control_door_invalid_body(client, device, body):
    """Test invalid bodies are rejected before reaching the device."""
    response = client.post("/api/door/control", json=body)

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert isinstance(data["error"], list)
    assert device.probes == []


def test_control_door_device_rejects(client, device):
    """Test authentication failure on the device."""
    device.auth_status = 401

    response = client.post("/api/door/control", json={"doorId": 1, "command": "open"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to control door"}


def test_control_door_probe_failed(client, device):
    """Test a device that does not challenge."""
    device.probe_status = 200

    response = client.post("/api/door/control", json={"doorId": 1, "command": "open"})

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert device.authorized == []


def test_control_door_not_configured(client, monkeypatch):
    """Test missing device settings."""
    for name in ("DOOR_API_BASE_URL", "DOOR_API_USERNAME", "DOOR_API_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    door_module._door_client = None

    try:
        response = client.post("/api/door/control", json={"doorId": 1, "command": "open"})
    finally:
        get_settings.cache_clear()

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to control door"
