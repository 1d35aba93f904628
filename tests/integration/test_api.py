"""Integration tests for API endpoints"""

import uuid
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from proposal_gateway.infrastructure.database.repositories import ProposalRepository, SettingsRepository
from proposal_gateway.services.auth import AuthService

STORE_DOWN = OperationalError("SELECT 1", {}, Exception("database is locked"))


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "proposal_documents_rendered_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/v1/proposals"),
        ("get", "/v1/proposals/defaults"),
        ("post", "/v1/documents/render"),
        ("post", "/v1/fees/quote"),
    ],
)
def test_endpoints_require_login(client: TestClient, method: str, path: str):
    response = getattr(client, method)(path)
    assert response.status_code == 401


def test_defaults(client: TestClient, auth_headers: dict):
    response = client.get("/v1/proposals/defaults", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["company"]["name"] == "Transfer Global Inc."
    assert data["company"]["logo"] == "/linx-logo.png"
    assert [f["card_type"] for f in data["card_fees"] if f["enabled"]] == ["VISA", "MasterCard"]
    reserve = data["additional_fees"][-1]
    assert reserve["charge"] == {"kind": "reserveHold", "percentage_fee": 10.0, "days": 180, "currency": "USD"}


def test_save_update_list_get_delete(client: TestClient, auth_headers: dict, proposal_payload: dict):
    created = client.post(
        "/v1/proposals", json={"name": "Acme Q1", "data": proposal_payload}, headers=auth_headers
    )
    assert created.status_code == 201
    proposal_id = created.json()["id"]

    proposal_payload["client"]["company"] = "Acme Holdings"
    updated = client.post(
        "/v1/proposals",
        json={"id": proposal_id, "name": "Acme Q1 revised", "data": proposal_payload},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["id"] == proposal_id
    assert updated.json()["created_at"] == created.json()["created_at"]

    listing = client.get("/v1/proposals", headers=auth_headers).json()["proposals"]
    assert len(listing) == 1
    assert listing[0]["name"] == "Acme Q1 revised"

    fetched = client.get(f"/v1/proposals/{proposal_id}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["client"]["company"] == "Acme Holdings"

    assert client.delete(f"/v1/proposals/{proposal_id}", headers=auth_headers).status_code == 204
    assert client.delete(f"/v1/proposals/{proposal_id}", headers=auth_headers).status_code == 404
    assert client.get(f"/v1/proposals/{proposal_id}", headers=auth_headers).status_code == 404


def test_save_with_unknown_id_is_not_found(client: TestClient, auth_headers: dict, proposal_payload: dict):
    response = client.post(
        "/v1/proposals",
        json={"id": str(uuid.uuid4()), "name": "Ghost", "data": proposal_payload},
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert client.get("/v1/proposals", headers=auth_headers).json()["proposals"] == []


def test_save_rejects_duplicate_card_types(client: TestClient, auth_headers: dict, proposal_payload: dict):
    proposal_payload["card_fees"].append(dict(proposal_payload["card_fees"][0]))

    response = client.post(
        "/v1/proposals", json={"name": "Dupes", "data": proposal_payload}, headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["detail"][0]["field"] == "card_fees[3]"


def test_saved_proposal_document(client: TestClient, auth_headers: dict, proposal_payload: dict):
    proposal_id = client.post(
        "/v1/proposals", json={"name": "Acme Q1", "data": proposal_payload}, headers=auth_headers
    ).json()["id"]

    response = client.get(f"/v1/proposals/{proposal_id}/document?print_on_load=true", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<tr><td>VISA</td><td>2.9%</td><td>0.30</td><td>USD</td></tr>" in response.text
    assert "window.print()" in response.text


def test_render_document(client: TestClient, auth_headers: dict, proposal_payload: dict):
    response = client.post("/v1/documents/render", json=proposal_payload, headers=auth_headers)

    assert response.status_code == 200
    html = response.text
    assert "Schedule A - Card Processing Fees" in html
    assert "<tr><td>Amex</td><td>3.5%</td><td>0.00</td><td>USD</td></tr>" in html
    assert "<tr><td>Reserve</td><td>10%</td><td>180 days</td><td>USD</td></tr>" in html
    assert "MasterCard" not in html
    assert "window.print()" not in html


def test_render_rejects_invalid_proposal(client: TestClient, auth_headers: dict, proposal_payload: dict):
    proposal_payload["valid_until"] = "2023-12-01"

    response = client.post("/v1/documents/render", json=proposal_payload, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["detail"][0]["field"] == "valid_until"


def test_assemble_document(client: TestClient, auth_headers: dict, proposal_payload: dict):
    response = client.post("/v1/documents/assemble", json=proposal_payload, headers=auth_headers)

    assert response.status_code == 200
    document = response.json()
    assert [row["label"] for row in document["card_fee_table"]["rows"]] == ["VISA", "Amex"]
    assert [row["fixed"] for row in document["additional_fee_table"]["rows"]] == ["25.00", "180 days"]
    assert document["footer"]["contact_email"] == "finance@linx.fi"


def test_quote_fees(client: TestClient, auth_headers: dict, proposal_payload: dict):
    response = client.post(
        "/v1/fees/quote",
        json={
            "amount": 100,
            "card_fees": proposal_payload["card_fees"],
            "additional_fees": proposal_payload["additional_fees"],
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert [q["label"] for q in body["quotes"]] == ["VISA", "Amex", "Dispute Fee", "Reserve"]
    reserve = body["quotes"][-1]
    assert reserve["charged"] == 0
    assert reserve["held"] == 10
    assert reserve["hold_days"] == 180
    assert body["totals"]["USD"] == {"charged": 31.7, "held": 10.0}


def test_quote_rejects_negative_amount(client: TestClient, auth_headers: dict):
    response = client.post("/v1/fees/quote", json={"amount": -5}, headers=auth_headers)

    assert response.status_code == 422


def test_custom_fee(client: TestClient, auth_headers: dict, proposal_payload: dict):
    fees = proposal_payload["additional_fees"]

    response = client.post(
        "/v1/fees/custom",
        json={"additional_fees": fees, "name": "PCI Compliance", "fixed_fee": 9.95},
        headers=auth_headers,
    )
    assert response.status_code == 200
    custom = response.json()["additional_fees"][-1]
    assert custom["fee_type"] == "PCI Compliance"
    assert custom["enabled"] is True
    assert custom["is_custom"] is True

    duplicate = client.post(
        "/v1/fees/custom",
        json={"additional_fees": fees, "name": "chargeback fee"},
        headers=auth_headers,
    )
    assert duplicate.status_code == 422


def test_save_rejects_blank_name(client: TestClient, auth_headers: dict, proposal_payload: dict):
    response = client.post("/v1/proposals", json={"name": "   ", "data": proposal_payload}, headers=auth_headers)

    assert response.status_code == 422
    assert client.get("/v1/proposals", headers=auth_headers).json()["proposals"] == []


def test_save_trims_name(client: TestClient, auth_headers: dict, proposal_payload: dict):
    response = client.post(
        "/v1/proposals", json={"name": "  Acme Q1  ", "data": proposal_payload}, headers=auth_headers
    )

    assert response.status_code == 201
    assert response.json()["name"] == "Acme Q1"


@pytest.mark.parametrize("method", ["list_for_user", "get"])
def test_proposal_reads_return_503_when_store_fails(client: TestClient, auth_headers: dict, method: str):
    path = "/v1/proposals" if method == "list_for_user" else f"/v1/proposals/{uuid.uuid4()}"

    with patch.object(ProposalRepository, method, side_effect=STORE_DOWN):
        response = client.get(path, headers=auth_headers)

    assert response.status_code == 503


def test_defaults_return_503_when_store_fails(client: TestClient, auth_headers: dict):
    with patch.object(SettingsRepository, "get_default_proposal", side_effect=STORE_DOWN):
        response = client.get("/v1/proposals/defaults", headers=auth_headers)

    assert response.status_code == 503


def test_saved_document_returns_503_when_store_fails(client: TestClient, auth_headers: dict):
    with patch.object(ProposalRepository, "get", side_effect=STORE_DOWN):
        response = client.get(f"/v1/proposals/{uuid.uuid4()}/document", headers=auth_headers)

    assert response.status_code == 503


def test_session_lookup_returns_503_when_store_fails(client: TestClient, auth_headers: dict):
    with patch.object(AuthService, "refresh", side_effect=STORE_DOWN):
        me = client.get("/v1/auth/me", headers=auth_headers)
        logout = client.post("/v1/auth/logout", headers=auth_headers)

    assert me.status_code == 503
    assert logout.status_code == 503


def test_logout_returns_503_when_store_fails(client: TestClient, auth_headers: dict):
    with patch.object(AuthService, "logout", side_effect=STORE_DOWN):
        response = client.post("/v1/auth/logout", headers=auth_headers)

    assert response.status_code == 503
    assert client.get("/v1/auth/me", headers=auth_headers).status_code == 200


def test_remove_custom_fee(client: TestClient, auth_headers: dict, proposal_payload: dict):
    fees = client.post(
        "/v1/fees/custom",
        json={"additional_fees": proposal_payload["additional_fees"], "name": "PCI Compliance"},
        headers=auth_headers,
    ).json()["additional_fees"]

    response = client.post(
        "/v1/fees/custom/remove",
        json={"additional_fees": fees, "name": "pci compliance"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert [f["fee_type"] for f in response.json()["additional_fees"]] == [
        "Chargeback Fee",
        "Dispute Fee",
        "Reserve",
    ]

    builtin = client.post(
        "/v1/fees/custom/remove",
        json={"additional_fees": fees, "name": "Reserve"},
        headers=auth_headers,
    )
    assert builtin.status_code == 422
