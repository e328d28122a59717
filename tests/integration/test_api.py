"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "daily_budget_daily_log_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_period_endpoint_custom_start_day(client: TestClient):
    """Test GET /v1/periods/{year}/{month}"""
    response = client.get("/v1/periods/2026/1", params={"start_day": 28})

    assert response.status_code == 200
    data = response.json()
    assert data["period"]["start_date"] == "2026-01-28"
    assert data["period"]["end_date"] == "2026-02-27"
    assert data["period"]["days_in_period"] == 31
    assert data["display"] == "Jan 28 - Feb 27, 2026"
    assert data["previous"]["start_date"] == "2025-12-28"
    assert data["next"]["start_date"] == "2026-02-28"


def test_period_endpoint_rejects_start_day_above_28(client: TestClient):
    response = client.get("/v1/periods/2026/2", params={"start_day": 30})
    assert response.status_code == 422


def test_dashboard_requires_user_header(client: TestClient):
    response = client.get("/v1/dashboard")
    assert response.status_code == 422


def test_dashboard_unknown_user(client: TestClient):
    response = client.get("/v1/dashboard", headers={"X-User-ID": "999"})
    assert response.status_code == 404


def test_set_budget_then_dashboard(client: TestClient, user_headers: dict):
    """Test PUT /v1/budget followed by GET /v1/dashboard"""
    response = client.put(
        "/v1/budget",
        json={"monthly_amount": "3100", "month": 1, "year": 2026},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert float(response.json()["monthly_amount"]) == 3100

    dashboard = client.get("/v1/dashboard", headers=user_headers)

    assert dashboard.status_code == 200
    data = dashboard.json()
    assert data["is_current_period"] is True
    assert data["today"] == "2026-01-15"
    assert data["display"] == "January 2026"
    assert float(data["daily_budget"]) == pytest.approx(100)
    assert float(data["today_log"]["remaining"]) == pytest.approx(100)
    assert float(data["today_log"]["carryover"]) == 0


def test_set_budget_rejects_non_positive_amount(client: TestClient, user_headers: dict):
    response = client.put(
        "/v1/budget",
        json={"monthly_amount": "0", "month": 1, "year": 2026},
        headers=user_headers,
    )
    assert response.status_code == 422


def test_expense_round_trip(client: TestClient, user_headers: dict):
    """Test POST then DELETE /v1/expenses restores today's log"""
    client.put(
        "/v1/budget",
        json={"monthly_amount": "3100", "month": 1, "year": 2026},
        headers=user_headers,
    )

    created = client.post(
        "/v1/expenses",
        json={"amount": "12.50", "description": "Lunch", "category": "food"},
        headers=user_headers,
    )
    assert created.status_code == 201
    data = created.json()
    assert data["expense"]["date"] == "2026-01-15"
    assert data["expense"]["category"] == "food"
    assert float(data["daily_log"]["total_spent"]) == pytest.approx(12.5)
    assert float(data["daily_log"]["remaining"]) == pytest.approx(87.5)

    deleted = client.delete(f"/v1/expenses/{data['expense']['id']}", headers=user_headers)
    assert deleted.status_code == 200
    assert float(deleted.json()["daily_log"]["total_spent"]) == pytest.approx(0)
    assert float(deleted.json()["daily_log"]["remaining"]) == pytest.approx(100)


def test_expense_without_daily_log(client: TestClient, user_headers: dict):
    response = client.post(
        "/v1/expenses",
        json={"amount": "20", "date": "2025-11-03"},
        headers=user_headers,
    )

    assert response.status_code == 201
    assert response.json()["daily_log"] is None
    assert response.json()["expense"]["category"] == "other"


def test_expense_rejects_unknown_category(client: TestClient, user_headers: dict):
    response = client.post(
        "/v1/expenses",
        json={"amount": "20", "category": "travel"},
        headers=user_headers,
    )
    assert response.status_code == 422


def test_delete_unknown_expense(client: TestClient, user_headers: dict):
    response = client.delete("/v1/expenses/12345", headers=user_headers)
    assert response.status_code == 404


def test_income_and_fixed_expense_adjust_allowance(client: TestClient, user_headers: dict):
    client.put(
        "/v1/budget",
        json={"monthly_amount": "3100", "month": 1, "year": 2026},
        headers=user_headers,
    )

    income = client.post("/v1/incomes", json={"amount": "620", "description": "Bonus"}, headers=user_headers)
    assert income.status_code == 201
    assert (income.json()["month"], income.json()["year"]) == (1, 2026)

    fixed = client.post("/v1/fixed-expenses", json={"name": "Rent", "amount": "1240"}, headers=user_headers)
    assert fixed.status_code == 201

    data = client.get("/v1/dashboard", headers=user_headers).json()
    assert float(data["total_incomes"]) == 620
    assert float(data["total_fixed_expenses"]) == 1240
    assert float(data["available_for_period"]) == 2480
    assert float(data["daily_budget"]) == pytest.approx(80)
    assert float(data["today_log"]["daily_budget"]) == pytest.approx(80)

    removed = client.delete(f"/v1/fixed-expenses/{fixed.json()['id']}", headers=user_headers)
    assert removed.json() == {"deleted": True}

    removed = client.delete(f"/v1/incomes/{income.json()['id']}", headers=user_headers)
    assert removed.json() == {"deleted": True}

    data = client.get("/v1/dashboard", headers=user_headers).json()
    assert float(data["today_log"]["daily_budget"]) == pytest.approx(100)


def test_dashboard_copies_previous_budget(client: TestClient, user_headers: dict):
    client.put(
        "/v1/budget",
        json={"monthly_amount": "930", "month": 12, "year": 2025},
        headers=user_headers,
    )

    data = client.get("/v1/dashboard", headers=user_headers).json()

    assert data["budget_copied_from_previous"] is True
    assert data["budget"]["month"] == 1
    assert float(data["budget"]["monthly_amount"]) == 930
    assert float(data["daily_budget"]) == pytest.approx(30)


def test_update_settings_changes_current_period(client: TestClient, user_headers: dict):
    response = client.patch("/v1/settings", json={"month_start_day": 28, "currency": "usd"}, headers=user_headers)

    assert response.status_code == 200
    assert response.json()["month_start_day"] == 28
    assert response.json()["currency"] == "USD"

    data = client.get("/v1/dashboard", headers=user_headers).json()
    assert (data["period"]["month"], data["period"]["year"]) == (12, 2025)
    assert data["display"] == "Dec 28, 2025 - Jan 27, 2026"


def test_writes_for_unknown_user_are_rejected(client: TestClient):
    headers = {"X-User-ID": "4242"}

    budget = client.put("/v1/budget", json={"monthly_amount": "1000", "month": 1, "year": 2026}, headers=headers)
    expense = client.post("/v1/expenses", json={"amount": "5"}, headers=headers)
    fixed = client.post("/v1/fixed-expenses", json={"name": "Rent", "amount": "700"}, headers=headers)

    assert budget.status_code == 404
    assert expense.status_code == 404
    assert fixed.status_code == 404
    assert client.get("/v1/dashboard", headers=headers).status_code == 404


def test_dashboard_reports_today_spending(client: TestClient, user_headers: dict):
    client.put(
        "/v1/budget",
        json={"monthly_amount": "3100", "month": 1, "year": 2026},
        headers=user_headers,
    )
    client.post("/v1/expenses", json={"amount": "120"}, headers=user_headers)

    data = client.get("/v1/dashboard", headers=user_headers).json()

    assert float(data["today_spent_percent"]) == pytest.approx(120)
    assert data["today_overspent"] is True
    assert data["user"]["currency"] == "EUR"


def test_current_period_endpoint(client: TestClient):
    """Test GET /v1/periods/current uses the injected today"""
    response = client.get("/v1/periods/current", params={"start_day": 28})

    assert response.status_code == 200
    data = response.json()
    assert (data["period"]["month"], data["period"]["year"]) == (12, 2025)
    assert data["period"]["start_date"] == "2025-12-28"
    assert data["display"] == "Dec 28, 2025 - Jan 27, 2026"
