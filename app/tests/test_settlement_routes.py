"""
API tests for the settlement route using FastAPI's TestClient.
"""
from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)


class TestSettlementRoutes:
    """Test POST /settlements/trips/{trip_id}."""

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_settlement_report(self):
        response = client.post("/settlements/trips/t1", json={
            "expenses": [
                {"id": "e1", "tripId": "t1", "paidBy": "u1", "amount": 100, "participants": ["u1", "u2"]},
            ],
            "participant_names": {"u1": "alice", "u2": "bob"},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["trip_total"] == 100.0
        assert body["expense_count"] == 1
        assert body["balances"][1] == {"id": "u2", "name": "bob", "paid": 0.0, "share": 50.0, "net": -50.0}
        assert body["transfers"] == [{
            "from_user_id": "u2", "to_user_id": "u1",
            "from_name": "bob", "to_name": "alice", "amount": 50.0,
        }]
        assert body["residuals"] == []

    def test_names_from_trip_participants(self):
        response = client.post("/settlements/trips/t1", json={
            "expenses": [
                {"id": "e1", "paidBy": "u1", "amount": 10, "participants": ["u1", "u2"]},
            ],
            "trip_participants": {"participants": ["u1", "u2"], "participantUsernames": ["alice", "bob"]},
        })
        assert response.status_code == 200
        assert response.json()["transfers"][0]["from_name"] == "bob"

    def test_empty_body(self):
        response = client.post("/settlements/trips/t1", json={})
        assert response.status_code == 200
        assert response.json()["transfers"] == []
        assert response.json()["trip_total"] == 0.0

    def test_negative_amount_rejected(self):
        response = client.post("/settlements/trips/t1", json={
            "expenses": [{"id": "e1", "paidBy": "u1", "amount": -10, "participants": ["u1"]}],
        })
        assert response.status_code == 422

    def test_expense_from_other_trip_rejected(self):
        response = client.post("/settlements/trips/t2", json={
            "expenses": [{"id": "e1", "tripId": "t1", "paidBy": "u1", "amount": 10, "participants": ["u1"]}],
        })
        assert response.status_code == 422
        assert response.json()["detail"]["index"] == 0
