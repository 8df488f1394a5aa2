"""Integration tests for API endpoints"""

from fastapi.testclient import TestClient


def create_customer(client: TestClient, email: str = "ada@example.com") -> dict:
    response = client.post(
        "/v1/customers",
        json={"first_name": "Ada", "last_name": "Lovelace", "email": email},
    )
    assert response.status_code == 201
    return response.json()


def create_account(client: TestClient, customer_id: str, name: str = "Checking", currency: str = "USD") -> dict:
    response = client.post(
        "/v1/accounts",
        json={"customer_id": customer_id, "type": "checking", "name": name, "currency_code": currency},
    )
    assert response.status_code == 201
    return response.json()


def create_taxpayer(client: TestClient) -> dict:
    response = client.post(
        "/v1/taxpayers",
        json={"type": "business", "name": "Acme Widgets LLC", "tax_identifier": "12-3456789"},
    )
    assert response.status_code == 201
    return response.json()


def create_filing(client: TestClient, taxpayer_id: str) -> dict:
    response = client.post(
        "/v1/tax-filings",
        json={
            "taxpayer_id": taxpayer_id,
            "tax_year": 2025,
            "period": "annual",
            "period_start": "2025-01-01",
            "period_end": "2025-12-31",
            "filing_type": "income",
            "due_date": "2026-04-15",
        },
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "treasury-gateway"}


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "treasury_money_movement_total" in response.text


def test_request_id_header(client: TestClient):
    """Test request IDs are echoed back"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_deposit_withdraw_and_transfer(client: TestClient):
    """Test money movement through the HTTP surface"""
    customer = create_customer(client)
    source = create_account(client, customer["id"], "A")
    target = create_account(client, customer["id"], "B")

    response = client.post(f"/v1/accounts/{source['id']}/deposit", json={"amount": 100})
    assert response.status_code == 201
    assert response.json()["type"] == "deposit"
    assert response.json()["status"] == "completed"

    response = client.post(
        "/v1/transfers",
        json={"source_account_id": source["id"], "target_account_id": target["id"], "amount": 40},
    )
    assert response.status_code == 201
    transfer = response.json()
    assert transfer["source_account_id"] == source["id"]
    assert transfer["target_account_id"] == target["id"]

    assert client.get(f"/v1/accounts/{source['id']}").json()["balance"] == 60
    assert client.get(f"/v1/accounts/{target['id']}").json()["balance"] == 40

    response = client.get(f"/v1/transactions/reference/{transfer['reference']}")
    assert response.json()["id"] == transfer["id"]

    history = client.get(f"/v1/accounts/{target['id']}/transactions").json()
    assert [t["id"] for t in history] == [transfer["id"]]


def test_insufficient_funds_maps_to_422(client: TestClient):
    """Test overdrawing is an unprocessable request"""
    customer = create_customer(client)
    account = create_account(client, customer["id"])

    response = client.post(f"/v1/accounts/{account['id']}/withdraw", json={"amount": 10})

    assert response.status_code == 422
    assert response.json()["kind"] == "insufficient_resource"
    assert response.json()["error"] == "InsufficientFundsError"


def test_non_positive_amount_rejected(client: TestClient):
    """Test request validation rejects zero amounts"""
    customer = create_customer(client)
    account = create_account(client, customer["id"])
    response = client.post(f"/v1/accounts/{account['id']}/deposit", json={"amount": 0})
    assert response.status_code == 422


def test_close_twice_is_conflict(client: TestClient):
    """Test invalid state maps to 409"""
    customer = create_customer(client)
    account = create_account(client, customer["id"])

    assert client.post(f"/v1/accounts/{account['id']}/close").json()["status"] == "closed"
    response = client.post(f"/v1/accounts/{account['id']}/close")
    assert response.status_code == 409
    assert response.json()["kind"] == "invalid_state"


def test_not_found_and_duplicates(client: TestClient):
    """Test not_found maps to 404 and already_exists to 409"""
    assert client.get("/v1/accounts/does-not-exist").status_code == 404
    create_customer(client)
    response = client.post(
        "/v1/customers",
        json={"first_name": "Ada", "last_name": "L", "email": "ada@example.com"},
    )
    assert response.status_code == 409
    assert response.json()["kind"] == "already_exists"


def test_invalid_input_maps_to_400(client: TestClient):
    """Test transfers to the same account are a bad request"""
    customer = create_customer(client)
    account = create_account(client, customer["id"])
    response = client.post(
        "/v1/transfers",
        json={"source_account_id": account["id"], "target_account_id": account["id"], "amount": 5},
    )
    assert response.status_code == 400
    assert response.json()["kind"] == "invalid_input"


def test_transaction_reversal(client: TestClient):
    """Test posting and reversing a fee"""
    customer = create_customer(client)
    account = create_account(client, customer["id"])
    client.post(f"/v1/accounts/{account['id']}/deposit", json={"amount": 100})

    fee = client.post("/v1/transactions", json={"type": "fee", "account_id": account["id"], "amount": 15}).json()
    assert client.get(f"/v1/accounts/{account['id']}").json()["balance"] == 85

    response = client.post(f"/v1/transactions/{fee['id']}/reverse", json={"reason": "waived"})
    assert response.json()["status"] == "reversed"
    assert client.get(f"/v1/accounts/{account['id']}").json()["balance"] == 100


def test_filing_and_payment_lifecycle(client: TestClient):
    """Test a filing is paid, processed, accepted and the refund reconciles"""
    taxpayer = create_taxpayer(client)
    filing = create_filing(client, taxpayer["id"])

    response = client.post(
        f"/v1/tax-filings/{filing['id']}/deductions",
        json={"code": "D1", "description": "Home office", "amount": 1200},
    )
    assert response.json()["total_deductions"] == 1200

    assert client.post(f"/v1/tax-filings/{filing['id']}/submit").json()["status"] == "submitted"
    assert client.post(f"/v1/tax-filings/{filing['id']}/submit").status_code == 409
    response = client.post(f"/v1/tax-filings/{filing['id']}/process", json={"tax_calculated": 5000})
    assert response.json()["status"] == "processing"

    payment = client.post(
        "/v1/tax-payments",
        json={
            "taxpayer_id": taxpayer["id"],
            "tax_type": "income",
            "amount": 500,
            "payment_method": "electronic",
            "filing_id": filing["id"],
        },
    ).json()
    assert payment["confirmation_code"].startswith("PAY-")

    assert client.post(f"/v1/tax-payments/{payment['id']}/process").json()["status"] == "completed"
    stored = client.get(f"/v1/tax-filings/{filing['id']}").json()
    assert stored["tax_paid"] == 500
    assert stored["balance_due"] == 4500

    client.post(f"/v1/tax-payments/{payment['id']}/refund", json={"reason": "duplicate"})
    assert client.get(f"/v1/tax-filings/{filing['id']}").json()["tax_paid"] == 0

    assert client.post(f"/v1/tax-filings/{filing['id']}/accept").json()["status"] == "accepted"

    amended = client.post(f"/v1/tax-filings/{filing['id']}/amend")
    assert amended.status_code == 201
    assert amended.json()["status"] == "amended"
    assert amended.json()["deductions"] == [{"code": "D1", "description": "Home office", "amount": 1200}]


def test_tax_rate_calculators(client: TestClient):
    """Test creating, activating and applying a progressive income rate"""
    response = client.post(
        "/v1/tax-rates",
        json={
            "type": "income",
            "name": "Bracket 2",
            "rate": 0.10,
            "bracket_type": "progressive",
            "jurisdiction_code": "CA",
            "effective_date": "2020-01-01",
            "min_amount": 1000,
            "max_amount": 5000,
        },
    )
    assert response.status_code == 201
    rate = response.json()
    assert rate["status"] == "proposed"

    client.post(f"/v1/tax-rates/{rate['id']}/activate")
    response = client.get("/v1/tax-rates/calculate/income", params={"amount": 10000, "jurisdiction": "CA"})
    assert response.json()["tax"] == 400

    response = client.get("/v1/tax-rates/calculate/sales", params={"amount": 1000, "jurisdiction": "CA"})
    assert response.json()["tax"] == 0


def test_reports(client: TestClient):
    """Test report endpoints render"""
    taxpayer = create_taxpayer(client)
    create_filing(client, taxpayer["id"])

    response = client.get("/v1/reports/revenue", params={"start_date": "2025-01-01", "end_date": "2025-03-31"})
    assert response.status_code == 200
    assert len(response.json()["monthly_revenue"]) == 3

    response = client.get("/v1/reports/filings", params={"tax_year": 2025})
    assert response.json()["total_filings"] == 1

    response = client.get("/v1/reports/compliance")
    assert response.json()["total_taxpayers"] == 1

    response = client.get("/v1/reports/tax-types", params={"start_date": "2025-01-01", "end_date": "2025-12-31"})
    assert set(response.json()["breakdown_by_type"]) == {"income", "sales", "property", "business", "excise"}
