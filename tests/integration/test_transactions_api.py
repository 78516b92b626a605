"""Integration tests for the transaction ingestion endpoints"""

import pytest
from fastapi.testclient import TestClient

from vfcash_gateway.api.main import create_app
from vfcash_gateway.config import Settings
from vfcash_gateway.infrastructure.database.repositories import SqlTransactionStore

pytestmark = pytest.mark.integration


def test_health_endpoints(client: TestClient):
    for path in ("/health", "/api/health"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, make_payload):
    client.post("/api/transactions", json=make_payload("m1"))

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "vfcash_transactions_ingested_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/api/transactions", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert client.get("/api/transactions").headers["X-Request-ID"]


def test_list_empty(client: TestClient):
    response = client.get("/api/transactions")

    assert response.status_code == 200
    assert response.json() == {"success": True, "transactions": [], "count": 0}


def test_post_single_transaction(client: TestClient, make_payload):
    payload = make_payload("t1", senderName="Omar")

    response = client.post("/api/transactions", json=payload)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Transaction received successfully",
        "transactionCount": 1,
    }

    listing = client.get("/api/transactions").json()
    assert listing["count"] == 1
    stored = listing["transactions"][0]
    assert stored["id"] == "t1"
    assert stored["phoneNumber"] == payload["phoneNumber"]
    assert stored["date"] == payload["date"]
    assert stored["senderName"] == "Omar"
    assert "serviceFees" not in stored


def test_post_same_id_updates_in_place(client: TestClient, make_payload):
    client.post("/api/transactions", json=make_payload("t1", amount=50))
    client.post("/api/transactions", json=make_payload("t2"))

    response = client.post("/api/transactions", json=make_payload("t1", amount=80))

    assert response.json()["transactionCount"] == 2
    transactions = client.get("/api/transactions").json()["transactions"]
    assert [t["id"] for t in transactions] == ["t2", "t1"]
    assert transactions[1]["amount"] == 80


def test_post_single_invalid(client: TestClient, make_payload):
    response = client.post("/api/transactions", json=make_payload(amount=-10))

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Amount must be a positive number"}
    assert client.get("/api/transactions").json()["count"] == 0


def test_post_array(client: TestClient, make_payload):
    response = client.post("/api/transactions", json=[make_payload("a"), make_payload("b")])

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully processed 2 transactions"
    assert response.json()["transactionCount"] == 2


def test_post_array_with_invalid_element_changes_nothing(client: TestClient, make_payload):
    client.post("/api/transactions", json=make_payload("existing"))

    response = client.post(
        "/api/transactions",
        json=[make_payload("a"), make_payload("b", type="refund"), make_payload("existing", amount=999)],
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == 'Transaction type must be either "transfer" or "received"'
    assert body["details"] == [{"index": 1, "error": body["error"]}]

    transactions = client.get("/api/transactions").json()["transactions"]
    assert [t["id"] for t in transactions] == ["existing"]
    assert transactions[0]["amount"] == 50


@pytest.mark.parametrize("raw_body", ['"just text"', "42", "null"])
def test_post_non_object_body(client: TestClient, raw_body):
    response = client.post("/api/transactions", content=raw_body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid request body"}


def test_post_malformed_json_is_internal_error(client: TestClient):
    response = client.post(
        "/api/transactions",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to process transaction"}


def test_retention_keeps_latest_thousand(client: TestClient, make_payload):
    for i in range(1001):
        assert client.post("/api/transactions", json=make_payload(f"t{i}")).status_code == 200

    listing = client.get("/api/transactions").json()

    assert listing["count"] == 1000
    ids = [t["id"] for t in listing["transactions"]]
    assert ids[0] == "t1000"
    assert "t0" not in ids


def test_clear_transactions(client: TestClient, make_payload):
    client.post("/api/transactions", json=[make_payload("a"), make_payload("b")])

    response = client.delete("/api/transactions")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "All transactions cleared"}
    listing = client.get("/api/transactions").json()
    assert listing["count"] == 0
    assert listing["transactions"] == []


def test_clear_empty_store_succeeds(client: TestClient):
    assert client.delete("/api/transactions").json()["success"] is True


def test_bulk_upload(client: TestClient, make_payload):
    client.post("/api/transactions", json=make_payload("a"))

    response = client.post("/api/transactions/bulk", json=[make_payload("a", amount=5), make_payload("b")])

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Bulk upload completed successfully",
        "summary": {"totalProcessed": 2, "added": 1, "updated": 1, "totalTransactions": 2},
    }


def test_bulk_upload_reports_every_failing_index(client: TestClient, make_payload):
    response = client.post(
        "/api/transactions/bulk",
        json=[make_payload("a", id=""), make_payload("b"), make_payload("c", date="yesterday"), "oops"],
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Validation failed",
        "details": [
            {"index": 0, "error": "Transaction ID is required and must be a string"},
            {"index": 2, "error": "Invalid date format"},
            {"index": 3, "error": "Transaction must be an object"},
        ],
    }
    assert client.get("/api/transactions").json()["count"] == 0


def test_bulk_upload_requires_array(client: TestClient, make_payload):
    response = client.post("/api/transactions/bulk", json=make_payload())

    assert response.status_code == 400
    assert response.json()["error"] == "Bulk upload requires an array of transactions"


def test_bulk_upload_rejects_empty_array(client: TestClient):
    response = client.post("/api/transactions/bulk", json=[])

    assert response.status_code == 400
    assert response.json()["error"] == "No transactions provided"


def test_sms_upload(client: TestClient):
    message = (
        "EGP 100 has been transferred to number 01098765432. Service fees are 0.50 EGP. "
        "Your current Vodafone Cash account balance is 399.50 EGP."
    )

    response = client.post("/api/transactions/sms", json={"message": message, "id": "sms-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["transaction"]["id"] == "sms-1"
    assert body["transaction"]["balanceBefore"] == 500
    assert body["transactionCount"] == 1


def test_sms_upload_unrecognised(client: TestClient):
    response = client.post("/api/transactions/sms", json={"message": "Happy birthday!"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Not a VF-Cash message"}


def test_sms_upload_missing_message(client: TestClient):
    response = client.post("/api/transactions/sms", json={})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unknown_route_uses_error_envelope(client: TestClient):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_sql_backend_end_to_end(make_payload):
    """The SQL backend serves the same API contract"""
    app = create_app(app_settings=Settings(storage_backend="sql", database_url="sqlite:///:memory:"))
    sql_client = TestClient(app)

    sql_client.post("/api/transactions", json=[make_payload("a"), make_payload("b")])
    sql_client.post("/api/transactions", json=make_payload("a", amount=70))

    listing = sql_client.get("/api/transactions").json()
    assert listing["count"] == 2
    assert [t["id"] for t in listing["transactions"]] == ["b", "a"]
    assert listing["transactions"][1]["amount"] == 70

    sql_client.put("/api/limits", json={
        "dailyTransferLimit": 1,
        "monthlyTransferLimit": 2,
        "dailyReceiveLimit": 3,
        "monthlyReceiveLimit": 4,
    })
    assert sql_client.get("/api/limits").json()["limits"]["monthlyReceiveLimit"] == 4


def test_bulk_update_of_evicted_record_on_sql_backend(session_factory, limits_store, make_payload):
    """An update late in a batch to a record that is then evicted still succeeds"""
    store = SqlTransactionStore(session_factory, capacity=2)
    sql_client = TestClient(create_app(transaction_store=store, limits_store=limits_store))
    sql_client.post("/api/transactions", json=make_payload("old"))
    sql_client.post("/api/transactions", json=make_payload("mid"))

    response = sql_client.post("/api/transactions/bulk", json=[make_payload("new"), make_payload("old", amount=7)])

    assert response.status_code == 200
    assert response.json()["summary"] == {"totalProcessed": 2, "added": 1, "updated": 1, "totalTransactions": 2}
    ids = [t["id"] for t in sql_client.get("/api/transactions").json()["transactions"]]
    assert ids == ["new", "mid"]


def test_bulk_upload_oversized_number_is_validation_error(client: TestClient, make_payload):
    response = client.post("/api/transactions/bulk", json=[make_payload("a", amount=10**400)])

    assert response.status_code == 400
    assert response.json()["details"] == [{"index": 0, "error": "Amount must be a positive number"}]


def test_integer_amounts_are_echoed_as_integers(client: TestClient, make_payload):
    client.post("/api/transactions", json=make_payload("t1", amount=50, serviceFees=2))

    stored = client.get("/api/transactions").json()["transactions"][0]

    assert isinstance(stored["amount"], int)
    assert isinstance(stored["balanceBefore"], int)
    assert isinstance(stored["serviceFees"], int)
    assert stored["amount"] == 50
