from fastapi.testclient import TestClient

from src.main import app


def test_request_id_header_present_on_response():
    client = TestClient(app)
    resp = client.get("/feeds/sources")

    assert resp.status_code == 200
    assert "X-Request-ID" in resp.headers
    assert len(resp.headers["X-Request-ID"]) == 32


def test_well_formed_incoming_request_id_is_reused():
    client = TestClient(app)
    resp = client.get("/feeds/sources", headers={"X-Request-ID": "upstream-1234abcd"})

    assert resp.headers["X-Request-ID"] == "upstream-1234abcd"


def test_malformed_incoming_request_id_is_replaced():
    client = TestClient(app)
    resp = client.get("/feeds/sources", headers={"X-Request-ID": "bad id; drop table"})

    assert resp.headers["X-Request-ID"] != "bad id; drop table"
    assert len(resp.headers["X-Request-ID"]) == 32


def test_validation_error_carries_request_id():
    client = TestClient(app)
    resp = client.get("/feeds")  # missing ?url=

    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == "validation_error"
    assert body["request_id"] == resp.headers["X-Request-ID"]
    assert "url" in body["message"]
