# This project was developed with assistance from AI tools.
"""Tests for active loan REST endpoints."""

import asyncio
from datetime import timedelta

import pytest
from db.enums import LoanStatus
from factories import NOW, RecordingNotifier, make_active_loan


@pytest.fixture
def seeded(stores):
    async def _seed():
        await stores.loans.put(make_active_loan())
        await stores.loans.put(
            make_active_loan(
                id="loan-2",
                status=LoanStatus.OVERDUE,
                due_date=NOW - timedelta(days=2),
                created_at=NOW - timedelta(days=400),
            )
        )

    asyncio.run(_seed())
    return stores


class TestListLoans:
    def test_list_sorted_by_creation(self, client, seeded):
        body = client.get("/api/loans").json()
        assert [loan["id"] for loan in body["data"]] == ["loan-2", "loan-1"]
        assert body["pagination"]["total"] == 2

    def test_filter_and_page(self, client, seeded):
        body = client.get("/api/loans", params={"filter_status": "overdue"}).json()
        assert [loan["id"] for loan in body["data"]] == ["loan-2"]
        body = client.get("/api/loans", params={"limit": 1}).json()
        assert len(body["data"]) == 1
        assert body["pagination"]["has_more"] is True

    def test_attention(self, client, seeded):
        body = client.get("/api/loans/attention").json()
        assert [loan["id"] for loan in body["data"]] == ["loan-2"]

    def test_empty_attention_list_reports_default_page(self, client):
        body = client.get("/api/loans/attention").json()
        assert body["data"] == []
        assert body["pagination"] == {"total": 0, "offset": 0, "limit": 20, "has_more": False}

    def test_unknown_loan_returns_404(self, client):
        resp = client.get("/api/loans/missing")
        assert resp.status_code == 404
        assert resp.json()["title"] == "Not Found"


class TestPayments:
    def test_payment_applied(self, client, seeded):
        resp = client.post("/api/loans/loan-1/payments", json={"id": "pay-1", "amount": 200})
        assert resp.status_code == 201
        body = resp.json()
        assert body["data"]["loan_id"] == "loan-1"
        assert body["data"]["payment_date"].startswith("2026-01-15")
        assert body["loan"]["remaining_amount"] == 1000

        history = client.get("/api/loans/loan-1/payments").json()
        assert [p["id"] for p in history["data"]] == ["pay-1"]

    def test_duplicate_payment_returns_409(self, client, seeded):
        client.post("/api/loans/loan-1/payments", json={"id": "pay-1", "amount": 200})
        resp = client.post("/api/loans/loan-1/payments", json={"id": "pay-1", "amount": 200})
        assert resp.status_code == 409

    def test_payment_to_unknown_loan_returns_404(self, client):
        resp = client.post("/api/loans/missing/payments", json={"id": "p", "amount": 1})
        assert resp.status_code == 404

    def test_non_positive_amount_is_422(self, client, seeded):
        resp = client.post("/api/loans/loan-1/payments", json={"id": "p", "amount": 0})
        assert resp.status_code == 422


class TestManualReminderAndDelete:
    def test_manual_reminder(self, client, seeded, notifier: RecordingNotifier):
        resp = client.post("/api/loans/loan-2/reminders", json={"reminder_type": "overdue"})
        assert resp.status_code == 200
        assert resp.json() == {"loan_id": "loan-2", "reminder_type": "overdue", "sent": True}
        assert notifier.sent[0][1].days_overdue == 2

    def test_manual_reminder_unknown_type_is_422(self, client, seeded):
        resp = client.post("/api/loans/loan-1/reminders", json={"reminder_type": "nag"})
        assert resp.status_code == 422

    def test_delete(self, client, seeded):
        assert client.delete("/api/loans/loan-1").status_code == 204
        assert client.get("/api/loans/loan-1").status_code == 404
        assert client.delete("/api/loans/loan-1").status_code == 404
