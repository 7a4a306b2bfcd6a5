"""Tests for the Flask API."""

import pytest

from main import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


class TestFlaskApi:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "healthy"}

    def test_api_info(self, client):
        response = client.get("/api")
        assert response.status_code == 200
        assert "allocate_retained" in response.get_json()["endpoints"]

    def test_calculate_payouts(self, client):
        payload = {
            "show": {"title": "Private Party", "total_amount": 80000, "expenses": [{"description": "Cab", "amount": 10000}]},
            "members": [
                {
                    "name": "Zain Shahid",
                    "config": {
                        "payment_type": "percentage",
                        "normal_rate": 15,
                        "referral_rate": 33,
                        "has_min_logic": True,
                        "min_threshold": 100000,
                        "min_flat_rate": 15000,
                    },
                }
            ],
        }
        response = client.post("/calculate_payouts", json=payload)

        assert response.status_code == 200
        body = response.get_json()
        assert body["members"][0]["calculated_amount"] == 13500
        assert body["reconciliation"]["admin_residual"]["value"] == 56500

    def test_allocate_retained(self, client):
        payload = {
            "show": {
                "title": "Cancelled Wedding",
                "total_amount": 100000,
                "show_date": "2026-05-01",
                "status": "cancelled",
                "advance_payment": 50000,
                "refund_type": "non_refundable",
            },
            "strategy": "weighted",
            "members": [
                {"band_member_id": "bm1", "member_name": "Zain Shahid", "normal_rate": 15},
                {"band_member_id": "bm2", "member_name": "Hassan", "normal_rate": 10},
            ],
        }
        response = client.post("/allocate_retained", json=payload)

        assert response.status_code == 200
        body = response.get_json()
        assert [a["amount"] for a in body["allocations"]] == [30000, 20000]

    def test_policy(self, client):
        response = client.post("/policy", json={"config": {"payment_type": "fixed", "normal_rate": 3000}})
        assert response.status_code == 200
        assert response.get_json()["policy"][0] == "You receive a fixed payment of Rs 3,000 per show."

    def test_empty_body(self, client):
        response = client.post("/calculate_payouts", data="")
        assert response.status_code == 400
        assert response.get_json()["status"] == "failed"

    def test_validation_error(self, client):
        payload = {"show": {"title": "Gala", "total_amount": 100000, "show_date": "2026-05-01"}, "refund_type": "half"}
        response = client.post("/cancel_show", json=payload)

        assert response.status_code == 400
        assert response.get_json()["status"] == "validation_failed"
