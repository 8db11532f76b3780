# This project was developed with assistance from AI tools.
"""Tests for admin review REST endpoints."""

import asyncio

import pytest
from factories import make_loan_request, make_review


def _submission(**request_overrides):
    return {
        "loan_request": make_loan_request(**request_overrides).model_dump(mode="json"),
        "admin_id": "admin-1",
    }


@pytest.fixture
def review_id(client):
    resp = client.post("/api/reviews", json=_submission())
    assert resp.status_code == 201
    return resp.json()["data"]["id"]


class TestSubmitReview:
    """POST /api/reviews"""

    def test_returns_assessed_review(self, client):
        resp = client.post("/api/reviews", json=_submission())
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["status"] == "pending"
        assert data["risk_assessment"]["score"] == 60
        assert data["risk_assessment"]["level"] == "medium"

    def test_duplicate_returns_409(self, client, review_id):
        resp = client.post("/api/reviews", json=_submission())
        assert resp.status_code == 409
        body = resp.json()
        assert body["title"] == "Conflict"
        assert "already has review" in body["detail"]

    def test_invalid_body_returns_422_problem(self, client):
        body = _submission()
        body["loan_request"]["amount"] = -5
        resp = client.post("/api/reviews", json=body)
        assert resp.status_code == 422
        problem = resp.json()
        assert problem["status"] == 422
        assert problem["errors"][0]["loc"][-1] == "amount"


class TestReviewQueries:
    def test_list_has_pagination(self, client, review_id):
        resp = client.get("/api/reviews")
        assert resp.status_code == 200
        body = resp.json()
        assert [r["id"] for r in body["data"]] == [review_id]
        assert body["pagination"] == {"total": 1, "offset": 0, "limit": 20, "has_more": False}

    def test_filter_by_status(self, client, review_id):
        resp = client.get("/api/reviews", params={"filter_status": "approved"})
        assert resp.json()["data"] == []

    def test_queue_and_stats(self, client, review_id):
        assert [r["id"] for r in client.get("/api/reviews/queue").json()["data"]] == [review_id]
        stats = client.get("/api/reviews/stats").json()
        assert stats["pending_reviews"] == 1
        assert stats["risk_distribution"]["medium"] == 1

    def test_get_unknown_returns_404(self, client):
        resp = client.get("/api/reviews/nope")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Review nope not found"


class TestDecisions:
    def test_approve_opens_loan(self, client, review_id):
        resp = client.post(
            f"/api/reviews/{review_id}/approve",
            json={"approved_amount": 2000, "approved_term_months": 6, "interest_rate": 10},
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "approved"

        loan = client.get("/api/loans/req-1").json()["data"]
        assert loan["status"] == "active"
        assert loan["monthly_payment"] == pytest.approx(343.12, abs=0.01)

    def test_approve_twice_returns_409(self, client, review_id):
        terms = {"approved_amount": 2000, "approved_term_months": 6, "interest_rate": 10}
        client.post(f"/api/reviews/{review_id}/approve", json=terms)
        resp = client.post(f"/api/reviews/{review_id}/approve", json=terms)
        assert resp.status_code == 409

    def test_reject(self, client, review_id):
        resp = client.post(f"/api/reviews/{review_id}/reject", json={"reason": "Income too low"})
        assert resp.status_code == 200
        assert resp.json()["data"]["rejection_reason"] == "Income too low"

    def test_request_data(self, client, review_id):
        resp = client.post(
            f"/api/reviews/{review_id}/request-data",
            json={"data_types": ["Bank statements"]},
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["status"] == "requires_additional_data"
        assert data["data_deadline"] is not None

    def test_adjust_terms_on_pending_returns_409(self, client, review_id):
        resp = client.post(
            f"/api/reviews/{review_id}/adjust-terms",
            json={"approved_amount": 1000, "approved_term_months": 3, "interest_rate": 5},
        )
        assert resp.status_code == 409

    def test_decision_on_unknown_review_returns_404(self, client):
        resp = client.post("/api/reviews/nope/reject", json={"reason": "x"})
        assert resp.status_code == 404

    def test_empty_reason_is_422(self, client, review_id):
        resp = client.post(f"/api/reviews/{review_id}/reject", json={"reason": ""})
        assert resp.status_code == 422

    def test_approve_without_loan_request_is_422(self, client, stores):
        asyncio.run(stores.reviews.put(make_review()))
        resp = client.post(
            "/api/reviews/review-1/approve",
            json={"approved_amount": 1000, "approved_term_months": 6, "interest_rate": 5},
        )
        assert resp.status_code == 422
        assert "req-1" in resp.json()["detail"]
