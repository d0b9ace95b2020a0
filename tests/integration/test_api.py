"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "finplan-gateway"}


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/allocation", json={"monthly_income": 5000})
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finplan_allocation" in response.text
    assert "http_request_duration_seconds" in response.text


def test_metrics_label_requests_by_route(client: TestClient):
    """Latency is labelled by matched route; unknown paths share one label"""
    client.post("/v1/debt-payoff", json={"total_debt": 1000, "monthly_payment": 100})
    client.get("/v1/no-such-route-5c1e")

    text = client.get("/metrics").text
    assert 'endpoint="/v1/debt-payoff"' in text
    assert 'endpoint="unmatched"' in text
    assert "no-such-route-5c1e" not in text


def test_request_id_header(client: TestClient):
    """Test X-Request-ID is generated, or echoed when the caller sends one"""
    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]

    echoed = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert echoed.headers["X-Request-ID"] == "trace-123"


def test_categorize_endpoint(client: TestClient, sample_transaction_payloads):
    """Test POST /v1/categorize over the sample history"""
    response = client.post("/v1/categorize", json={"transactions": sample_transaction_payloads})

    assert response.status_code == 200
    results = {t["transaction_id"]: t for t in response.json()["transactions"]}
    assert len(results) == len(sample_transaction_payloads)

    assert results["pay_1"]["bucket"] == "income"
    assert results["pay_1"]["expense_category"] is None
    assert results["rent_1"]["expense_category"] == "housing"
    assert results["netflix_1"]["expense_category"] == "subscriptions"
    assert results["brokerage_1"]["bucket"] == "invested"
    assert results["card_payment_1"]["bucket"] == "debt"
    assert results["corner_store"]["needs_validation"] is True
    assert results["rent_1"]["needs_validation"] is False


def test_categorize_endpoint_user_override(client: TestClient):
    """User corrections take precedence over the bank category"""
    payload = {
        "transactions": [
            {
                "transaction_id": "side_gig",
                "account_id": "checking",
                "amount": -400.0,
                "date": "2024-05-02",
                "name": "Venmo",
                "personal_finance_category": {
                    "primary": "TRANSFER_IN",
                    "detailed": "TRANSFER_IN_ACCOUNT_TRANSFER",
                    "confidence_level": "VERY_HIGH",
                },
                "user_corrected_category": "income",
            }
        ]
    }
    response = client.post("/v1/categorize", json=payload)

    assert response.status_code == 200
    assert response.json()["transactions"][0]["bucket"] == "income"


def test_analysis_endpoint(client: TestClient, sample_transaction_payloads, sample_account_payloads):
    """Test POST /v1/analysis with a fixed as_of date"""
    response = client.post(
        "/v1/analysis",
        json={
            "transactions": sample_transaction_payloads,
            "accounts": sample_account_payloads,
            "as_of": "2024-06-30",
        },
    )

    assert response.status_code == 200
    data = response.json()

    assert data["summary"]["months_analyzed"] == 5
    assert data["summary"]["avg_monthly_income"] == pytest.approx(6000.0)
    assert data["summary"]["net_monthly_income"] == pytest.approx(2856.0)
    assert data["summary"]["total_debt"] == 35000.0
    assert data["expense_breakdown"]["housing"] == pytest.approx(1800.0)
    assert data["expense_breakdown"]["total"] == pytest.approx(2304.0)
    assert data["monthly_flow"]["debt_minimums"] == pytest.approx(425.0)
    assert data["monthly_flow"]["discretionary_income"] == pytest.approx(3271.0)
    assert data["position"]["emergency_cash"] == 12000.0
    assert data["metadata"]["transactions_needing_validation"] == 1
    # (0.24 x 5,000 + 0.05 x 30,000) / 35,000
    assert data["average_debt_apr"] == pytest.approx(2700.0 / 35000.0)
    assert data["is_ready_for_plan"] is True


def test_analysis_endpoint_default_apr_without_reported_rates(client: TestClient):
    response = client.post(
        "/v1/analysis",
        json={
            "transactions": [],
            "accounts": [{"account_id": "card", "name": "Card", "type": "credit", "current_balance": 900}],
            "as_of": "2024-06-30",
        },
    )

    assert response.status_code == 200
    assert response.json()["average_debt_apr"] == pytest.approx(0.18)


def test_analysis_endpoint_rejects_bad_window(client: TestClient):
    response = client.post("/v1/analysis", json={"transactions": [], "window_months": 0})
    assert response.status_code == 422


def test_allocation_endpoint(client: TestClient):
    """Test POST /v1/allocation without debt"""
    response = client.post(
        "/v1/allocation",
        json={"monthly_income": 5000, "monthly_expenses": 3000},
    )

    assert response.status_code == 200
    data = response.json()
    buckets = {b["type"]: b for b in data["buckets"]}

    assert set(buckets) == {"essential_spending", "emergency_fund", "discretionary_spending", "investments"}
    assert sum(b["amount"] for b in data["buckets"]) == 5000
    assert data["total_allocated"] == 5000
    assert data["rounding_adjustment"] == -600
    assert buckets["emergency_fund"]["amount"] == 750
    assert len(buckets["emergency_fund"]["duration_options"]) == 3
    assert set(buckets["investments"]["projection"]["recommended"]["values"]) == {"10", "20", "30"}
    assert data["emergency_fund"]["savings_period_months"] == 12
    assert data["includes_debt_paydown"] is False


def test_allocation_endpoint_with_debt(client: TestClient):
    """Test debt paydown bucket and payoff timeline"""
    response = client.post(
        "/v1/allocation",
        json={
            "monthly_income": 5000,
            "monthly_expenses": 3000,
            "total_debt": 5000,
            "debt_apr": 0.18,
            "account_balances": {"investments": 10000},
            "health_metrics": {
                "health_score": 65,
                "emergency_fund_months_covered": 1.5,
                "income_stability": "stable",
            },
        },
    )

    assert response.status_code == 200
    data = response.json()
    debt = next(b for b in data["buckets"] if b["type"] == "debt_paydown")

    assert data["includes_debt_paydown"] is True
    assert debt["amount"] == 750
    assert debt["average_apr"] == pytest.approx(18.0)
    assert debt["payoff_timeline"]["low"]["months"] == 11
    assert debt["payoff_timeline"]["recommended"]["capped"] is False
    assert data["total_allocated"] == 5000


def test_allocation_endpoint_validation(client: TestClient):
    """Non-positive income fails request validation; sub-dollar income fails in the domain"""
    assert client.post("/v1/allocation", json={"monthly_income": 0}).status_code == 422
    assert client.post("/v1/allocation", json={"monthly_income": 5000, "total_debt": -1}).status_code == 422

    response = client.post("/v1/allocation", json={"monthly_income": 0.4})
    assert response.status_code == 422
    assert "whole dollar" in response.json()["detail"]


def test_emergency_fund_endpoint(client: TestClient):
    response = client.post(
        "/v1/emergency-fund",
        json={
            "essential_monthly_spend": 3000,
            "current_balance": 0,
            "income_stability": "stable",
            "monthly_income": 6000,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["target_amount"] == 18000
    assert data["monthly_contribution"] == 1500
    assert data["months_to_target"] == 12
    assert [o["months"] for o in data["duration_options"]] == [3, 6, 12]
    assert [o["is_recommended"] for o in data["duration_options"]] == [False, True, False]


def test_investment_projection_endpoint(client: TestClient):
    response = client.post(
        "/v1/investment-projection",
        json={
            "current_balance": 1000,
            "monthly_contributions": {"low": 100, "recommended": 300, "high": 500},
            "horizons": [5, 10],
            "annual_return": 0,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["low"]["values"] == {"5": 7000, "10": 13000}
    assert data["high"]["values"]["10"] == 61000


def test_investment_projection_rejects_negative_horizon(client: TestClient):
    response = client.post(
        "/v1/investment-projection",
        json={"monthly_contributions": {"low": 1, "recommended": 2, "high": 3}, "horizons": [-5]},
    )
    assert response.status_code == 422


def test_debt_payoff_endpoint(client: TestClient):
    """Default APR is applied when none is sent"""
    response = client.post("/v1/debt-payoff", json={"total_debt": 5000, "monthly_payment": 500})

    assert response.status_code == 200
    data = response.json()
    assert data["months"] == 11
    assert data["capped"] is False


def test_debt_payoff_endpoint_capped(client: TestClient):
    response = client.post(
        "/v1/debt-payoff",
        json={"total_debt": 10000, "monthly_payment": 100, "apr": 0.24},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["capped"] is True
    assert data["months"] == 600
    assert data["interest_saved"] == 0
