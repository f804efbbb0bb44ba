"""
Tests for the calculator API endpoints.
"""

import logging

import pytest


class TestAppEndpoints:
    """Test index and health endpoints."""

    def test_health(self, client):
        """Health endpoint reports healthy."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_home_lists_calculators(self, client):
        """Index lists the three calculators."""
        response = client.get("/")
        assert response.status_code == 200
        names = [c["name"] for c in response.json()["calculators"]]
        assert names == ["loan", "tax", "salary"]


class TestLoanEndpoint:
    """Test /api/calculate/loan."""

    def test_calculate_loan(self, client):
        """Loan endpoint returns EMI and a full schedule."""
        response = client.post(
            "/api/calculate/loan",
            json={"principal": 100000, "interest_rate": 8.5, "tenure": 20},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["tenure_months"] == 240
        assert abs(data["emi"] - 867.82) <= 0.02
        assert len(data["schedule"]) == 240
        assert data["schedule"][-1]["balance"] == 0
        assert data["formatted"]["emi"].startswith("$867.8")

    def test_tenure_in_months_with_dates(self, client):
        """Month tenure with a start date yields dated rows."""
        response = client.post(
            "/api/calculate/loan",
            json={
                "principal": 6000,
                "interest_rate": 0,
                "tenure": 6,
                "tenure_unit": "months",
                "start_date": "2025-01-15",
                "currency": "GBP",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["emi"] == 1000
        assert data["total_interest"] == 0
        assert data["schedule"][1]["payment_date"] == "2025-02-15"
        assert data["formatted"]["total_payable"] == "£6,000.00"

    @pytest.mark.parametrize(
        "payload",
        [
            {"principal": 0, "interest_rate": 5, "tenure": 10},
            {"principal": -100, "interest_rate": 5, "tenure": 10},
            {"principal": 1000, "interest_rate": -1, "tenure": 10},
            {"principal": 1000, "interest_rate": 5, "tenure": 0},
            {"principal": 1000, "interest_rate": 5, "tenure": 10, "tenure_unit": "weeks"},
            {"principal": "abc", "interest_rate": 5, "tenure": 10},
        ],
    )
    def test_invalid_input_rejected(self, client, payload):
        """Malformed or out-of-sign loan inputs return 422."""
        response = client.post("/api/calculate/loan", json=payload)
        assert response.status_code == 422

    def test_rate_above_limit(self, client):
        """Rates above the configured maximum return 400."""
        response = client.post(
            "/api/calculate/loan",
            json={"principal": 1000, "interest_rate": 75, "tenure": 1},
        )
        assert response.status_code == 400
        assert "Interest rate" in response.json()["detail"]

    def test_tenure_above_limit(self, client):
        """Tenures above the configured maximum return 400."""
        response = client.post(
            "/api/calculate/loan",
            json={"principal": 1000, "interest_rate": 5, "tenure": 80},
        )
        assert response.status_code == 400
        assert "Tenure" in response.json()["detail"]

    @pytest.mark.parametrize(
        "tenure,unit", [(601, "months"), (51, "years"), (1e300, "years")]
    )
    def test_tenure_limit_same_status_for_both_units(self, client, tenure, unit):
        """The month limit is enforced once, whichever unit is used."""
        response = client.post(
            "/api/calculate/loan",
            json={
                "principal": 1000,
                "interest_rate": 5,
                "tenure": tenure,
                "tenure_unit": unit,
            },
        )
        assert response.status_code == 400

    def test_principal_above_limit(self, client):
        """Amounts beyond the configured maximum are rejected, not computed."""
        response = client.post(
            "/api/calculate/loan",
            json={"principal": 1e27, "interest_rate": 5, "tenure": 10},
        )
        assert response.status_code == 422


class TestTaxEndpoint:
    """Test /api/calculate/tax."""

    def test_builtin_config(self, client):
        """Built-in US table gives the expected estimate."""
        response = client.post(
            "/api/calculate/tax",
            json={"annual_income": 60000, "config_key": "us"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["config_name"] == "United States (2024)"
        assert data["taxable_income"] == 45400
        assert data["tax_amount"] == 5216
        assert data["effective_rate"] == 11.49
        assert len(data["breakdown"]) == 2
        assert data["formatted"]["effective_rate"] == "11.49%"

    def test_default_config(self, client):
        """Omitting config_key uses the default table."""
        response = client.post("/api/calculate/tax", json={"annual_income": 60000})
        assert response.status_code == 200
        assert response.json()["currency"] == "USD"

    def test_unknown_config_falls_back(self, client, caplog):
        """Unknown config keys fall back and log a warning."""
        with caplog.at_level(logging.WARNING, logger="app.api.calculations"):
            response = client.post(
                "/api/calculate/tax",
                json={"annual_income": 60000, "config_key": "atlantis"},
            )
        assert response.status_code == 200
        assert response.json()["config_name"] == "United States (2024)"
        assert "atlantis" in caplog.text

    def test_custom_config(self, client):
        """Caller-supplied bracket tables are applied."""
        response = client.post(
            "/api/calculate/tax",
            json={
                "annual_income": 30000,
                "deductions": 5000,
                "config": {
                    "name": "Two Band",
                    "currency": "eur",
                    "brackets": [
                        {"lower": 0, "upper": 10000, "rate": 0},
                        {"lower": 10000, "rate": 25},
                    ],
                },
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["currency"] == "EUR"
        assert data["taxable_income"] == 25000
        assert data["tax_amount"] == 3750
        assert data["net_income"] == 26250
        assert data["breakdown"][1]["label"] == "Above €10,000"

    def test_invalid_custom_config(self, client):
        """Non-contiguous custom brackets return 400."""
        response = client.post(
            "/api/calculate/tax",
            json={
                "annual_income": 30000,
                "config": {
                    "brackets": [
                        {"lower": 0, "upper": 10000, "rate": 10},
                        {"lower": 12000, "rate": 20},
                    ],
                },
            },
        )
        assert response.status_code == 400
        assert "must start where" in response.json()["detail"]

    def test_negative_income_rejected(self, client):
        """Negative income returns 422."""
        response = client.post("/api/calculate/tax", json={"annual_income": -5})
        assert response.status_code == 422

    @pytest.mark.parametrize(
        "payload",
        [
            {"annual_income": 1e27},
            {"annual_income": 50000, "deductions": 1e27},
            {
                "annual_income": 50000,
                "config": {"brackets": [{"lower": 0, "upper": 1e27, "rate": 10}]},
            },
        ],
    )
    def test_amounts_above_limit_rejected(self, client, payload):
        """Oversized income, deductions or bracket bounds return 422."""
        response = client.post("/api/calculate/tax", json=payload)
        assert response.status_code == 422

    def test_list_configs(self, client):
        """Built-in tax tables are listed with their brackets."""
        response = client.get("/api/calculate/tax/configs")
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"us", "uk", "india", "custom"}
        assert data["us"]["standard_deduction"] == 14600
        assert data["uk"]["brackets"][-1]["upper"] is None


class TestSalaryEndpoint:
    """Test /api/calculate/salary."""

    def test_calculate_salary(self, client):
        """Salary endpoint applies deductions after allowances."""
        response = client.post(
            "/api/calculate/salary",
            json={
                "gross_salary": 5000,
                "allowances": [{"name": "Transport", "value": 500}],
                "deductions": [
                    {"name": "Provident Fund", "value": 15, "kind": "percentage"}
                ],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_deductions"] == 825
        assert data["monthly_net"] == 4675
        assert data["deductions"][0]["percentage"] == 15
        assert data["formatted"]["yearly_net"] == "$56,100.00"

    def test_yearly_period(self, client):
        """Yearly gross is reported per month."""
        response = client.post(
            "/api/calculate/salary",
            json={"gross_salary": 120000, "period": "yearly", "currency": "INR"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["gross_salary"] == 10000
        assert data["formatted"]["monthly_net"] == "₹10,000.00"

    def test_invalid_component_kind(self, client):
        """Unknown component kinds return 422."""
        response = client.post(
            "/api/calculate/salary",
            json={
                "gross_salary": 5000,
                "allowances": [{"name": "Odd", "value": 5, "kind": "ratio"}],
            },
        )
        assert response.status_code == 422

    @pytest.mark.parametrize(
        "payload",
        [
            {"gross_salary": 1e27},
            {
                "gross_salary": 5000,
                "allowances": [{"name": "Huge", "value": 1e308, "kind": "percentage"}],
            },
        ],
    )
    def test_amounts_above_limit_rejected(self, client, payload):
        """Oversized gross or component values return 422."""
        response = client.post("/api/calculate/salary", json=payload)
        assert response.status_code == 422

    def test_largest_allowed_amounts(self, client):
        """Values at the configured maximum still produce a result."""
        response = client.post(
            "/api/calculate/salary",
            json={
                "gross_salary": 1e12,
                "allowances": [{"name": "Max", "value": 1e12, "kind": "percentage"}],
            },
        )
        assert response.status_code == 200
        assert response.json()["total_allowances"] == pytest.approx(1e22)

    def test_defaults(self, client):
        """Default salary templates are returned."""
        response = client.get("/api/calculate/salary/defaults")
        assert response.status_code == 200
        data = response.json()
        assert len(data["allowances"]) == 4
        assert data["deductions"][0] == {
            "name": "Provident Fund",
            "value": 12,
            "kind": "percentage",
        }
