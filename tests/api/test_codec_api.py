"""Tests for codec API endpoints."""

from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# GET /api/v1/codec/encode
# ---------------------------------------------------------------------------


def test_encode(client: TestClient) -> None:
    response = client.get("/api/v1/codec/encode", params={"height": 216, "index": 2})
    assert response.status_code == 200
    assert response.json() == {"name": "biri-ko", "height": 216, "index": 2}


def test_encode_negative_height(client: TestClient) -> None:
    """Negative coordinates fail query validation."""
    response = client.get("/api/v1/codec/encode", params={"height": -1, "index": 0})
    assert response.status_code == 422


def test_encode_index_out_of_range(client: TestClient) -> None:
    """Indices wider than 32 bits are rejected."""
    response = client.get(
        "/api/v1/codec/encode", params={"height": 0, "index": 2**32}
    )
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# GET /api/v1/codec/decode/{name}
# ---------------------------------------------------------------------------


def test_decode(client: TestClient) -> None:
    response = client.get("/api/v1/codec/decode/biri-ko")
    assert response.status_code == 200
    assert response.json() == {"name": "biri-ko", "height": 216, "index": 2}


def test_decode_invalid(client: TestClient) -> None:
    response = client.get("/api/v1/codec/decode/bi-ri-ko")
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_IDENTIFIER"
