import math

import pytest

from projection_engine import projections
from projection_engine.errors import ProjectionDomainError
from projection_engine.projections import (
    build_investment_plans, future_value, inflation_adjusted_target,
    required_monthly_payment, solve_realistic_timeline,
)


class TestFutureValue:
    @pytest.mark.parametrize("rate", [0.01, 0.045, 0.075, 0.11, -0.02])
    @pytest.mark.parametrize("years", [1, 10, 25])
    def test_principal_only_growth(self, rate, years):
        expected = 10_000 * (1 + rate / 12) ** (12 * years)
        assert future_value(10_000, 0, rate, years) == pytest.approx(expected)

    def test_zero_rate_is_linear(self):
        assert future_value(1_000, 100, 0.0, 5) == 1_000 + 100 * 60

    def test_zero_years_returns_principal(self):
        assert future_value(1_000, 500, 0.075, 0) == pytest.approx(1_000)

    def test_contributions_only(self):
        r = 0.06 / 12
        expected = 200 * (((1 + r) ** 120 - 1) / r)
        assert future_value(0, 200, 0.06, 10) == pytest.approx(expected)

    def test_negative_years_rejected(self):
        with pytest.raises(ProjectionDomainError):
            future_value(1_000, 0, 0.05, -1)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(ProjectionDomainError):
            future_value(bad, 0, 0.05, 1)
        with pytest.raises(ProjectionDomainError):
            future_value(0, 0, bad, 1)

    def test_rate_that_wipes_balance_rejected(self):
        with pytest.raises(ProjectionDomainError):
            future_value(1_000, 0, -12.0, 1)


class TestRequiredMonthlyPayment:
    @pytest.mark.parametrize("principal,rate,years", [
        (0, 0.075, 10), (5_000, 0.045, 10), (5_000, 0.11, 10), (1_000, 0.0, 3), (20_000, 0.03, 30),
    ])
    def test_payment_reaches_target(self, principal, rate, years):
        pmt = required_monthly_payment(100_000, principal, rate, years)
        assert future_value(principal, pmt, rate, years) == pytest.approx(100_000)

    def test_zero_when_principal_is_enough(self):
        assert required_monthly_payment(10_000, 10_000, 0.05, 5) == 0.0
        assert required_monthly_payment(10_000, 50_000, 0.0, 5) == 0.0

    def test_zero_rate(self):
        assert required_monthly_payment(12_000, 0, 0.0, 1) == pytest.approx(1_000)

    def test_zero_years_with_gap_rejected(self):
        with pytest.raises(ProjectionDomainError):
            required_monthly_payment(10_000, 0, 0.05, 0)

    def test_zero_years_without_gap(self):
        assert required_monthly_payment(10_000, 10_000, 0.05, 0) == 0.0

    @pytest.mark.parametrize("target", [0, -100])
    def test_non_positive_target_rejected(self, target):
        with pytest.raises(ProjectionDomainError):
            required_monthly_payment(target, 0, 0.05, 10)

    def test_negative_years_rejected(self):
        with pytest.raises(ProjectionDomainError):
            required_monthly_payment(10_000, 0, 0.05, -2)

    def test_domain_error_is_value_error(self):
        with pytest.raises(ValueError):
            required_monthly_payment(math.nan, 0, 0.05, 10)


class TestInflationAdjustedTarget:
    def test_compounds_yearly(self):
        assert inflation_adjusted_target(100, 3.0, 2) == pytest.approx(106.09)

    def test_zero_years(self):
        assert inflation_adjusted_target(100, 10.0, 0) == 100

    def test_deflation(self):
        assert inflation_adjusted_target(100, -2.0, 1) == pytest.approx(98)

    def test_meaningless_inflation_rejected(self):
        with pytest.raises(ProjectionDomainError):
            inflation_adjusted_target(100, -100, 1)


class TestInvestmentPlans:
    def setup_method(self):
        self.plans = build_investment_plans(
            target_amount=50_000, current_savings=5_000,
            monthly_income=4_000, monthly_expenses=3_000, years=10,
        )

    def test_capacity(self):
        assert self.plans.max_monthly_capacity == 1_000

    def test_three_scenarios(self):
        names = [p.name for p in self.plans.plans]
        assert names == ["Conservative Plan", "Balanced Plan", "Aggressive Plan"]
        assert [p.risk_level for p in self.plans.plans] == ["Low", "Medium", "High"]
        assert [p.annual_return for p in self.plans.plans] == [0.045, 0.075, 0.11]

    def test_each_plan_reaches_target(self):
        for plan in self.plans.plans:
            assert plan.future_value == pytest.approx(50_000)
            assert plan.total_gains == pytest.approx(plan.future_value - plan.total_contributed)
            assert plan.total_contributed == pytest.approx(5_000 + plan.monthly_payment * 120)

    def test_riskier_plans_need_less(self):
        c, b, a = (p.monthly_payment for p in self.plans.plans)
        assert c > b > a > 0

    def test_fits_capacity(self):
        for plan in self.plans.plans:
            assert plan.fits_capacity == (plan.monthly_payment <= 1_000)
        assert all(p.fits_capacity for p in self.plans.plans)

    def test_capacity_floored_at_zero(self):
        plans = build_investment_plans(50_000, 0, 2_000, 3_000, 10)
        assert plans.max_monthly_capacity == 0
        assert not any(p.fits_capacity for p in plans.plans)

    def test_to_dict(self):
        d = self.plans.to_dict()
        assert d["balanced"]["name"] == "Balanced Plan"
        assert isinstance(d["balanced"]["recommendations"], list)


class TestRealisticTimeline:
    def test_zero_capacity_short_circuits(self, monkeypatch):
        def must_not_run(*args, **kwargs):
            raise AssertionError("search ran")

        monkeypatch.setattr(projections, "future_value", must_not_run)
        for capacity in (0, -500):
            result = solve_realistic_timeline(50_000, 0, capacity)
            assert result.years_needed is None
            assert result.is_unbounded
            assert not result.is_realistic

    def test_zero_utilization_short_circuits(self):
        assert solve_realistic_timeline(50_000, 0, 1_000, utilization_rate=0).is_unbounded

    def test_reachable_goal(self):
        result = solve_realistic_timeline(50_000, 5_000, 1_000)
        assert result.monthly_contribution == pytest.approx(700)
        assert result.annual_return == 0.075
        assert 1 <= result.years_needed <= 30
        assert result.is_realistic
        assert future_value(5_000, 700, 0.075, result.years_needed) >= 50_000
        assert future_value(5_000, 700, 0.075, result.years_needed - 1) < 50_000

    def test_beyond_thirty_years_unrealistic(self):
        result = solve_realistic_timeline(1_000_000, 0, 500)
        assert 30 < result.years_needed <= 100
        assert not result.is_realistic

    def test_unreachable_within_ceiling(self):
        result = solve_realistic_timeline(1e12, 0, 10)
        assert result.years_needed is None
        assert not result.is_realistic

    def test_already_met(self):
        assert solve_realistic_timeline(1_000, 5_000, 100).years_needed == 1

    def test_custom_rate(self):
        result = solve_realistic_timeline(12_000, 0, 1_000, utilization_rate=1.0, annual_rate=0.0)
        assert result.years_needed == 1
        assert result.annual_return == 0.0

    def test_result_always_in_range(self):
        for target in (1, 10_000, 250_000, 5_000_000, 1e9):
            result = solve_realistic_timeline(target, 0, 2_000)
            assert result.years_needed is None or 1 <= result.years_needed <= 100
            if result.years_needed and result.years_needed > 30:
                assert not result.is_realistic

    @pytest.mark.parametrize("utilization", [-0.1, 1.5])
    def test_bad_utilization_rejected(self, utilization):
        with pytest.raises(ProjectionDomainError):
            solve_realistic_timeline(50_000, 0, 1_000, utilization_rate=utilization)

    def test_negative_target_rejected(self):
        with pytest.raises(ProjectionDomainError):
            solve_realistic_timeline(-1, 0, 1_000)
