"""
Tests for the calculation API endpoints.
"""

import math

import pytest


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCreditCardAPI:
    """Test credit card payoff endpoints."""

    def test_payoff_defaults(self, client):
        response = client.post(
            "/api/calculate/credit-card/payoff", json={"start_date": "2025-01-15"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["months_to_payoff"] == 48
        assert data["payoff_date"] == "2029-01-15"
        assert len(data["schedule"]) == 48

    def test_unpayable_is_bad_request(self, client):
        response = client.post(
            "/api/calculate/credit-card/payoff",
            json={"balance": 5000, "annual_rate": 18.5, "monthly_payment": 50},
        )
        assert response.status_code == 400
        assert "interest" in response.json()["detail"]

    def test_payment_below_minimum_is_bad_request(self, client):
        # Minimum on $5,000 at 18.5% is $50 plus $77.08 interest
        response = client.post(
            "/api/calculate/credit-card/payoff",
            json={"balance": 5000, "annual_rate": 18.5, "monthly_payment": 120},
        )
        assert response.status_code == 400
        assert "minimum" in response.json()["detail"]

    def test_required_payment(self, client):
        response = client.post(
            "/api/calculate/credit-card/required-payment",
            json={"balance": 1200, "annual_rate": 0, "payoff_years": 1},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["monthly_payment"] == pytest.approx(100)
        assert data["months_to_payoff"] == 12

    def test_required_payment_zero_term(self, client):
        response = client.post(
            "/api/calculate/credit-card/required-payment",
            json={"payoff_years": 0, "payoff_months": 0},
        )
        assert response.status_code == 400


class TestConsolidationAPI:
    def test_consolidation(self, client):
        response = client.post(
            "/api/calculate/debt-consolidation",
            json={
                "debts": [
                    {"name": "Card A", "balance": 5000, "monthly_payment": 200, "interest_rate": 22},
                    {"name": "Card B", "balance": 3000, "monthly_payment": 150, "interest_rate": 19},
                ],
                "loan_amount": 8000,
                "loan_interest_rate": 10,
                "loan_term_years": 3,
                "loan_fee": 0,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["current_weighted_apr"] == pytest.approx(20.875)
        assert data["is_worthwhile"] is True

    def test_defaults(self, client):
        response = client.post("/api/calculate/debt-consolidation", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["current_total_debt"] == pytest.approx(25000)
        assert data["loan_fee"] == pytest.approx(750)


class TestGrowthAPI:
    """Test compound interest and investment endpoints."""

    def test_compound_interest_defaults(self, client):
        response = client.post("/api/calculate/compound-interest", json={})
        assert response.status_code == 200
        data = response.json()
        assert len(data["yearly_schedule"]) == 10
        assert data["total_contributions"] == pytest.approx(24000)
        assert data["future_value"] > 10000 + 24000
        assert data["rule_of_72"] == pytest.approx(14.4)

    def test_compound_interest_continuous(self, client):
        response = client.post(
            "/api/calculate/compound-interest",
            json={"principal": 1000, "monthly_contribution": 0, "annual_rate": 5,
                  "years": 10, "compounding": "continuously"},
        )
        assert response.status_code == 200
        assert response.json()["future_value"] == pytest.approx(1648.72, abs=0.01)

    def test_continuous_uses_closed_form(self, client):
        response = client.post(
            "/api/calculate/compound-interest", json={"compounding": "continuously"}
        )
        assert response.status_code == 200
        data = response.json()
        growth = math.exp(0.05 * 10)
        expected = 10000 * growth + 2400 * (growth - 1) / 0.05
        assert data["future_value"] == pytest.approx(expected)
        assert data["total_contributions"] == pytest.approx(24000)
        assert data["total_interest"] == pytest.approx(expected - 34000)
        assert data["doubling_time"] == pytest.approx(math.log(2) / 0.05)
        assert len(data["yearly_schedule"]) == 10

    def test_long_horizon_is_bad_request(self, client):
        response = client.post(
            "/api/calculate/compound-interest",
            json={"years": 2000, "compounding": "daily"},
        )
        assert response.status_code == 400

    def test_overflowing_rate_is_bad_request(self, client):
        response = client.post(
            "/api/calculate/investment",
            json={"return_rate": 1000000, "years": 100},
        )
        assert response.status_code == 400

    def test_unknown_compounding_rejected(self, client):
        response = client.post(
            "/api/calculate/compound-interest", json={"compounding": "hourly"}
        )
        assert response.status_code == 422

    def test_zero_years_is_bad_request(self, client):
        response = client.post("/api/calculate/compound-interest", json={"years": 0})
        assert response.status_code == 400

    def test_investment(self, client):
        response = client.post(
            "/api/calculate/investment",
            json={"starting_amount": 1000, "contribution": 0, "years": 2,
                  "return_rate": 10, "compounding": "annually"},
        )
        assert response.status_code == 200
        assert response.json()["future_value"] == pytest.approx(1210)


class TestSavingsAPI:
    def test_cd(self, client):
        response = client.post(
            "/api/calculate/cd",
            json={"initial_deposit": 10000, "interest_rate": 5, "deposit_years": 1,
                  "compounding": "annually"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["end_balance"] == pytest.approx(10500)
        assert len(data["schedule"]) == 12

    def test_roth_ira(self, client):
        response = client.post(
            "/api/calculate/roth-ira",
            json={"current_age": 55, "retirement_age": 65, "maximize_contributions": True},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["annual_contribution"] == 8000
        assert data["years"] == 10
        assert data["advantage"] > 0

    def test_roth_ira_bad_ages(self, client):
        response = client.post(
            "/api/calculate/roth-ira", json={"current_age": 65, "retirement_age": 60}
        )
        assert response.status_code == 400


class TestTVMAPI:
    def test_solve_payment(self, client):
        response = client.post(
            "/api/calculate/tvm",
            json={"target": "PMT", "n": 360, "iy": 6, "pv": 100000, "fv": 0},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["value"] == pytest.approx(-599.55, abs=0.01)
        assert data["converged"] is True

    def test_overflow_is_bad_request(self, client):
        response = client.post(
            "/api/calculate/tvm",
            json={"target": "FV", "n": 2000, "iy": 100, "pv": -1, "pmt": 0,
                  "payments_per_year": 1, "compounds_per_year": 1},
        )
        assert response.status_code == 400

    def test_solve_periods_domain_error(self, client):
        response = client.post(
            "/api/calculate/tvm",
            json={"target": "N", "iy": 12, "pv": 1000, "pmt": -5, "fv": 0},
        )
        assert response.status_code == 400


class TestCommissionAPI:
    def test_tiered(self, client):
        response = client.post(
            "/api/calculate/commission",
            json={
                "sales": 60000,
                "tiers": [{"rate": 3, "max": 25000}, {"rate": 5, "max": 50000}, {"rate": 7}],
            },
        )
        assert response.status_code == 200
        assert response.json()["commission"] == pytest.approx(2700)

    def test_base_salary_only_when_enabled(self, client):
        without = client.post("/api/calculate/commission", json={}).json()
        assert without["commission"] == pytest.approx(2500)
        assert without["total_compensation"] == pytest.approx(2500)

        with_base = client.post(
            "/api/calculate/commission", json={"has_base_salary": True}
        ).json()
        assert with_base["total_compensation"] == pytest.approx(32500)

    def test_bad_tiers(self, client):
        response = client.post(
            "/api/calculate/commission",
            json={"sales": 60000, "tiers": [{"rate": 3, "max": 50000}, {"rate": 5, "max": 25000}, {"rate": 7}]},
        )
        assert response.status_code == 400


class TestKellyAPI:
    def test_defaults(self, client):
        response = client.post("/api/calculate/kelly", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["fraction"] == pytest.approx(0.25)
        assert data["full_bet"] == pytest.approx(2500)


class TestSalesTaxAPI:
    @pytest.mark.parametrize(
        "payload,field,expected",
        [
            ({"mode": "add_tax", "before_tax": 100, "tax_rate": 8}, "after_tax", 108),
            ({"mode": "remove_tax", "after_tax": 108, "tax_rate": 8}, "before_tax", 100),
            ({"mode": "find_rate", "before_tax": 100, "after_tax": 108}, "tax_rate", 8),
        ],
    )
    def test_modes(self, client, payload, field, expected):
        response = client.post("/api/calculate/sales-tax", json=payload)
        assert response.status_code == 200
        assert response.json()[field] == pytest.approx(expected)

    def test_defaults(self, client):
        response = client.post("/api/calculate/sales-tax", json={})
        assert response.status_code == 200
        assert response.json()["after_tax"] == pytest.approx(107.5)

    def test_find_rate_zero_before(self, client):
        response = client.post(
            "/api/calculate/sales-tax",
            json={"mode": "find_rate", "before_tax": 0, "after_tax": 10},
        )
        assert response.status_code == 400
