from fastapi.testclient import TestClient

from fintrack.main import app
from fintrack.services import dashboard


def register(client, email="user1@example.com", password="password123"):
    return client.post("/api/auth/register", json={"email": email, "password": password})


def catalog_id(client, headers, path, name):
    response = client.get(path, headers=headers)
    assert response.status_code == 200
    return next(item["id"] for item in response.json() if item["name"] == name)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_protected_routes_require_token(client):
    response = client.get("/api/dashboard/summary")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"].startswith("Bearer")

    response = client.get("/api/income", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_register_login_and_current_user(client):
    registered = register(client, email="pat@example.com")
    assert registered.status_code == 200
    assert registered.json()["token_type"] == "bearer"

    response = register(client, email="pat@example.com")
    assert response.status_code == 400
    assert response.json() == {"error": "User already exists"}

    login = client.post("/api/auth/login", json={"email": "pat@example.com", "password": "password123"})
    assert login.status_code == 200
    token = login.json()["token"]

    me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "pat@example.com"

    bad = client.post("/api/auth/login", json={"email": "pat@example.com", "password": "wrong-password"})
    assert bad.status_code == 401


def test_record_expense_and_read_dashboard(client, auth_headers):
    food = catalog_id(client, auth_headers, "/api/expense-categories", "Food & Dining")
    housing = catalog_id(client, auth_headers, "/api/expense-categories", "Housing")
    cash = catalog_id(client, auth_headers, "/api/payment-methods", "Cash")
    salary = catalog_id(client, auth_headers, "/api/income-categories", "Salary")

    income = client.post("/api/income", headers=auth_headers, json={
        "category_id": salary, "amount": 3000, "date": "2025-03-01", "payment_method_id": cash,
    })
    assert income.status_code == 200
    assert income.json()["financial_year"] == "2024"
    assert income.json()["month"] == "March"

    for category, amount in ((food, 100), (housing, 100), (food, 50)):
        response = client.post("/api/expenses", headers=auth_headers, json={
            "category_id": category, "amount": amount, "date": "2025-03-15", "payment_method_id": cash,
        })
        assert response.status_code == 200

    summary = client.get(
        "/api/dashboard/summary", headers=auth_headers, params={"month": "March", "year": "2024-2025"}
    ).json()
    assert summary["total_income"] == 3000.0
    assert summary["total_expenses"] == 250.0
    assert summary["net_savings"] == 2750.0
    assert summary["top_expense_categories"] == [
        {"category_name": "Food & Dining", "amount": 150.0, "percentage": 60},
        {"category_name": "Housing", "amount": 100.0, "percentage": 40},
    ]

    expenses = client.get("/api/expenses", headers=auth_headers, params={"limit": 2}).json()
    assert len(expenses) == 2
    assert expenses[0]["category"]["name"] in {"Food & Dining", "Housing"}


def test_invalid_reference_is_a_bad_request(client, auth_headers):
    cash = catalog_id(client, auth_headers, "/api/payment-methods", "Cash")
    response = client.post("/api/expenses", headers=auth_headers, json={
        "category_id": 9999, "amount": 10, "date": "2024-05-01", "payment_method_id": cash,
    })
    assert response.status_code == 400
    assert "does not exist" in response.json()["error"]


def test_non_positive_amount_is_unprocessable(client, auth_headers):
    response = client.post("/api/income", headers=auth_headers, json={
        "category_id": 1, "amount": -5, "date": "2024-05-01", "payment_method_id": 1,
    })
    assert response.status_code == 422


def test_reports_require_both_dates(client, auth_headers):
    response = client.get("/api/reports/income", headers=auth_headers, params={"start_date": "2024-04-01"})
    assert response.status_code == 400
    assert response.json() == {"error": "Start date and end date are required"}

    response = client.get(
        "/api/reports/expenses",
        headers=auth_headers,
        params={"start_date": "2024-04-01", "end_date": "2025-03-31"},
    )
    assert response.status_code == 200
    assert response.json() == []


def test_unknown_subcategory_parent_is_not_found(client, auth_headers):
    response = client.get("/api/expense-subcategories", headers=auth_headers, params={"category_id": 9999})
    assert response.status_code == 404


def test_user_settings_roundtrip(client, auth_headers):
    current = client.get("/api/user-settings", headers=auth_headers).json()
    assert current["financial_year_start"] == "04-01"

    response = client.put("/api/user-settings", headers=auth_headers, json={"currency": "gbp"})
    assert response.status_code == 200
    assert response.json()["currency"] == "GBP"

    response = client.put("/api/user-settings", headers=auth_headers, json={"financial_year_end": "3/31"})
    assert response.status_code == 400


def test_financial_year_report(client, auth_headers):
    response = client.get("/api/reports/financial-year", headers=auth_headers, params={"year": "2024"})
    assert response.status_code == 200
    body = response.json()
    assert body["start_date"] == "2024-04-01"
    assert body["end_date"] == "2025-03-31"
    assert body["total_income"] == 0.0


def test_unexpected_errors_become_server_errors(db, auth_headers, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(dashboard, "get_dashboard_summary", explode)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/dashboard/summary", headers=auth_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "kaboom"}


def test_identity_provider_token_without_provider_is_rejected(client, rs256_token):
    response = client.get("/api/income", headers={"Authorization": f"Bearer {rs256_token}"})
    assert response.status_code == 401
