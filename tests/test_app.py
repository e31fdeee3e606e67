import pytest
from fastapi.testclient import TestClient

from app import app

from conftest import chart_payload, worldbank_payload


@pytest.fixture
def client(service, upstream):
    upstream.quotes["SPY"] = chart_payload(510.0, prev_close=500.0)
    upstream.quotes["^TNX"] = chart_payload(4.2)
    upstream.quotes["^IRX"] = chart_payload(5.3)
    upstream.worldbank["US"] = worldbank_payload(3.0)
    app.state.service = service
    with TestClient(app) as c:
        yield c
    app.state.service = None


class TestMarketRoutes:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_quote(self, client):
        r = client.get("/api/quote/spy")
        assert r.status_code == 200
        body = r.json()
        assert body["symbol"] == "SPY"
        assert body["price"] == 510.0
        assert body["status"] == "live"

    def test_quote_unavailable(self, client):
        assert client.get("/api/quote/ZZZZ").status_code == 404

    def test_quote_invalid_symbol(self, client):
        assert client.get("/api/quote/NOT_A_SYMBOL").status_code == 400

    def test_quotes_partial(self, client):
        r = client.get("/api/quotes", params={"symbols": "SPY,ZZZZ"})
        body = r.json()
        assert body["requested"] == 2
        assert list(body["data"]) == ["SPY"]

    def test_quotes_empty(self, client):
        assert client.get("/api/quotes", params={"symbols": " , "}).status_code == 400

    def test_forex_same_currency(self, client):
        assert client.get("/api/forex/usd/usd").json()["rate"] == 1.0

    def test_inflation(self, client):
        body = client.get("/api/inflation/US").json()
        assert body["rate"] == 3.0
        assert body["status"] == "live"

    def test_inflation_fallback(self, client):
        body = client.get("/api/inflation/TR").json()
        assert body["rate"] == 64.8
        assert body["status"] == "fallback"

    def test_market_context(self, client):
        body = client.get("/api/market-context/US").json()
        assert body["country"] == "US"
        assert "SPY" in body["benchmarks"]
        assert body["sentiment"]["value"] == 50

    def test_market_narrative(self, client):
        body = client.get("/api/market-narrative/us").json()
        assert body["country"] == "US"
        assert "MACRO INDICATORS:" in body["narrative"]

    def test_benchmarks(self, client):
        body = client.get("/api/benchmarks").json()
        assert "savings_rate_by_age" in body
        assert "emergency_fund_months_by_income" in body


class TestProjectionRoutes:
    def test_future_value(self, client):
        r = client.get("/api/projections/future-value",
                       params={"principal": 1000, "monthly_contribution": 100,
                               "annual_rate": 0, "years": 5})
        assert r.json()["future_value"] == 7000

    def test_future_value_bad_years(self, client):
        r = client.get("/api/projections/future-value",
                       params={"principal": 1000, "annual_rate": 0.05, "years": -1})
        assert r.status_code == 400

    def test_required_payment(self, client):
        r = client.get("/api/projections/required-payment",
                       params={"target": 12000, "annual_rate": 0, "years": 1})
        assert r.json()["monthly_payment"] == pytest.approx(1000)

    def test_plans(self, client):
        body = client.get("/api/projections/plans", params={
            "target": 50000, "current_savings": 5000,
            "monthly_income": 4000, "monthly_expenses": 3000, "years": 10,
        }).json()
        assert body["max_monthly_capacity"] == 1000
        assert body["balanced"]["annual_return"] == 0.075

    def test_market_aware_plans(self, client):
        body = client.get("/api/projections/plans", params={
            "target": 50000, "current_savings": 5000, "monthly_income": 4000,
            "monthly_expenses": 3000, "years": 10, "country": "US",
        }).json()
        assert body["inflation"]["rate"] == 3.0
        assert body["target_adjusted"] == pytest.approx(50000 * 1.03 ** 10)
        assert body["plans"]["target_amount"] == pytest.approx(body["target_adjusted"])

    def test_timeline(self, client):
        body = client.get("/api/projections/timeline", params={
            "target": 50000, "current_savings": 5000, "max_monthly_capacity": 1000,
        }).json()
        assert body["is_realistic"] is True
        assert body["years_needed"] == 5

    def test_timeline_zero_capacity(self, client):
        body = client.get("/api/projections/timeline", params={
            "target": 50000, "max_monthly_capacity": 0,
        }).json()
        assert body["years_needed"] is None
        assert body["is_realistic"] is False
