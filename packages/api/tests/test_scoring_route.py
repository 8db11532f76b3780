# This project was developed with assistance from AI tools.
"""Tests for the stateless scoring endpoints and health check."""

from factories import make_lender, make_loan_request


def test_health(client):
    resp = client.get("/health/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["reminders_running"] is False


def test_risk_assessment(client):
    body = {
        "loan_request": make_loan_request(amount=1000).model_dump(mode="json"),
        "borrower_history": {"defaulted_loans": 1, "late_payments": 0},
    }
    resp = client.post("/api/risk/assess", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["score"] == 75
    assert data["level"] == "high"
    assert "Previous loan defaults" in data["factors"]


def test_matches_ranked(client):
    body = {
        "loan_request": make_loan_request().model_dump(mode="json"),
        "lenders": [
            make_lender(id="narrow", max_amount=1000).model_dump(mode="json"),
            make_lender(id="ok").model_dump(mode="json"),
        ],
    }
    resp = client.post("/api/matches", json=body)
    assert resp.status_code == 200
    assert [m["lender_id"] for m in resp.json()["data"]] == ["ok"]


def test_lender_without_terms_is_422(client):
    lender = make_lender().model_dump(mode="json")
    lender["preferred_terms"] = []
    body = {"loan_request": make_loan_request().model_dump(mode="json"), "lenders": [lender]}
    assert client.post("/api/matches", json=body).status_code == 422
