"""Integration tests for the limits and usage endpoints"""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration

DEFAULT_LIMITS = {
    "dailyTransferLimit": 5000,
    "monthlyTransferLimit": 50000,
    "dailyReceiveLimit": 10000,
    "monthlyReceiveLimit": 100000,
}


def test_get_default_limits(client: TestClient):
    response = client.get("/api/limits")

    assert response.status_code == 200
    assert response.json() == {"success": True, "limits": DEFAULT_LIMITS}


@pytest.mark.parametrize("method", ["post", "put"])
def test_update_limits(client: TestClient, method):
    new_limits = {
        "dailyTransferLimit": 1000,
        "monthlyTransferLimit": 20000,
        "dailyReceiveLimit": 3000,
        "monthlyReceiveLimit": 30000,
        "note": "ignored",
    }

    response = getattr(client, method)("/api/limits", json=new_limits)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Limits updated successfully"
    assert body["limits"]["dailyTransferLimit"] == 1000
    assert "note" not in body["limits"]
    assert client.get("/api/limits").json()["limits"]["monthlyReceiveLimit"] == 30000


def test_update_limits_unreasonably_high_leaves_limits(client: TestClient):
    response = client.post("/api/limits", json={**DEFAULT_LIMITS, "dailyTransferLimit": 20_000_000})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "dailyTransferLimit seems unreasonably high"}
    assert client.get("/api/limits").json()["limits"] == DEFAULT_LIMITS


def test_update_limits_daily_above_monthly(client: TestClient):
    response = client.put("/api/limits", json={**DEFAULT_LIMITS, "dailyTransferLimit": 60000})

    assert response.status_code == 400
    assert "Daily transfer limit cannot exceed monthly" in response.json()["error"]


def test_update_limits_missing_field(client: TestClient):
    partial = {k: v for k, v in DEFAULT_LIMITS.items() if k != "dailyReceiveLimit"}

    response = client.post("/api/limits", json=partial)

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required field: dailyReceiveLimit"


def test_update_limits_malformed_json(client: TestClient):
    response = client.post("/api/limits", content="nope", headers={"Content-Type": "application/json"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to update limits"}


def test_usage_report(client: TestClient, make_payload):
    client.post(
        "/api/transactions",
        json=[
            make_payload("a", amount=4000, date="2024-03-15T08:00:00Z"),
            make_payload("b", amount=1000, date="2024-03-02T08:00:00Z"),
            make_payload("c", type="received", amount=2500, date="2024-03-15T09:00:00Z"),
        ],
    )

    response = client.get("/api/usage", params={"now": "2024-03-15T18:00:00Z"})

    assert response.status_code == 200
    usage = response.json()["usage"]
    assert usage["dailyTransfer"]["used"] == 4000
    assert usage["dailyTransfer"]["percentage"] == pytest.approx(80.0)
    assert usage["dailyTransfer"]["level"] == "warning"
    assert usage["monthlyTransfer"]["used"] == 5000
    assert usage["dailyReceive"]["remaining"] == 7500
    assert usage["monthlyReceive"]["level"] == "ok"


def test_usage_invalid_reference_time(client: TestClient):
    response = client.get("/api/usage", params={"now": "someday"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid date format"
