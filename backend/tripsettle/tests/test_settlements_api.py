"""
Tests for settlement endpoints.
"""
from fastapi.testclient import TestClient
from tripsettle.main import app

client = TestClient(app)


def expense_payload(payer, amount, splits, currency="USD", timestamp="2025-08-10T12:00:00Z"):
    return {
        "payer_id": payer,
        "amount": amount,
        "currency": currency,
        "timestamp": timestamp,
        "splits": [{"participant_id": pid, "ratio": ratio} for pid, ratio in splits],
    }


def test_health():
    """Test health check endpoints."""
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200


def test_calculate_settlement():
    """Test the three-way split through the API."""
    response = client.post(
        "/api/settlement/calculate",
        json={
            "settlement_currency": "usd",
            "expenses": [expense_payload("A", 9000, [("A", 1), ("B", 1), ("C", 1)])],
        }
    )
    assert response.status_code == 200
    data = response.json()
    assert data["settlement_currency"] == "USD"
    assert data["total_expenses"] == 9000
    assert data["participant_count"] == 3
    assert data["balances"] == [
        {"participant_id": "A", "amount": 6000},
        {"participant_id": "B", "amount": -3000},
        {"participant_id": "C", "amount": -3000},
    ]
    assert data["transfers"] == [
        {"from_participant_id": "B", "to_participant_id": "A", "amount": 3000},
        {"from_participant_id": "C", "to_participant_id": "A", "amount": 3000},
    ]


def test_calculate_settlement_with_rates():
    """Test foreign expenses are converted with the submitted rates."""
    response = client.post(
        "/api/settlement/calculate",
        json={
            "settlement_currency": "USD",
            "expenses": [expense_payload("alice", 10000, [("alice", 0.0), ("bob", 1.0)], currency="EUR")],
            "rates": [
                {"base_currency": "EUR", "quote_currency": "USD", "rate": "1.1", "as_of": "2025-08-10"}
            ],
        }
    )
    assert response.status_code == 200
    balances = {b["participant_id"]: b["amount"] for b in response.json()["balances"]}
    assert balances == {"alice": 11000, "bob": -11000}


def test_include_settled():
    """Test zero balances are listed only on request."""
    payload = {
        "settlement_currency": "USD",
        "expenses": [expense_payload("A", 500, [("A", 1)])],
    }
    response = client.post("/api/settlement/calculate", json=payload)
    assert response.json()["balances"] == []

    payload["include_settled"] = True
    response = client.post("/api/settlement/calculate", json=payload)
    assert response.json()["balances"] == [{"participant_id": "A", "amount": 0}]
    assert response.json()["transfers"] == []


def test_missing_rate_rejected():
    """Test an unconvertible expense is reported as a bad request."""
    response = client.post(
        "/api/settlement/calculate",
        json={
            "settlement_currency": "USD",
            "expenses": [expense_payload("A", 100, [("B", 1)], currency="GBP")],
        }
    )
    assert response.status_code == 400
    assert "GBP/USD" in response.json()["detail"]


def test_negative_ratio_rejected():
    """Test a negative share ratio is reported as a bad request."""
    response = client.post(
        "/api/settlement/calculate",
        json={
            "settlement_currency": "USD",
            "expenses": [expense_payload("A", 100, [("A", 1), ("B", -1)])],
        }
    )
    assert response.status_code == 400
    assert "'B'" in response.json()["detail"]


def test_malformed_request_rejected():
    """Test schema violations fail validation."""
    response = client.post(
        "/api/settlement/calculate",
        json={
            "settlement_currency": "USD",
            "expenses": [expense_payload("A", 100, [("B", 1)])],
            "rates": [{"base_currency": "EUR", "quote_currency": "USD", "rate": "-1"}],
        }
    )
    assert response.status_code == 422

    response = client.post("/api/settlement/calculate", json={"expenses": []})
    assert response.status_code == 422
