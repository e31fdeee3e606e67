"""
Projection Engine — Compound-Interest Projections
───────────────────────────────────────────────────
Pure functions, no I/O. Monthly compounding throughout:

  r  = annual_rate / 12
  n  = years * 12
  FV = P·(1+r)^n + C·((1+r)^n − 1) / r        (r ≠ 0)
  FV = P + C·n                                 (r = 0)

Inputs outside the valid domain raise ProjectionDomainError instead of
producing NaN or infinity.
"""

import math
from typing import Optional

from projection_engine.errors import ProjectionDomainError
from projection_engine.models.plans import (
    InvestmentPlan, InvestmentPlanSet, RealisticTimelineResult,
)
from projection_engine.reference_data import INVESTMENT_SCENARIOS, TIMELINE_ANNUAL_RETURN

MONTHS_PER_YEAR      = 12
TIMELINE_MAX_YEARS   = 100
REALISTIC_MAX_YEARS  = 30
DEFAULT_UTILIZATION  = 0.7


def _check_finite(**values: float) -> None:
    for name, value in values.items():
        if value is None or not math.isfinite(value):
            raise ProjectionDomainError(f"{name} must be a finite number, got {value!r}")


def _check_years(years: float) -> None:
    if years < 0:
        raise ProjectionDomainError(f"years must not be negative, got {years}")


def _growth_factor(annual_rate: float, years: float) -> float:
    r = annual_rate / MONTHS_PER_YEAR
    if r <= -1:
        raise ProjectionDomainError(f"annual_rate {annual_rate} wipes out the balance")
    return (1 + r) ** (years * MONTHS_PER_YEAR)


def future_value(principal: float, monthly_contribution: float,
                 annual_rate: float, years: float) -> float:
    """Balance after `years` of monthly compounding plus end-of-month contributions."""
    _check_finite(principal=principal, monthly_contribution=monthly_contribution,
                  annual_rate=annual_rate, years=years)
    _check_years(years)

    months = years * MONTHS_PER_YEAR
    if annual_rate == 0:
        return principal + monthly_contribution * months

    r = annual_rate / MONTHS_PER_YEAR
    growth = _growth_factor(annual_rate, years)
    return principal * growth + monthly_contribution * ((growth - 1) / r)


def required_monthly_payment(target_future_value: float, principal: float,
                             annual_rate: float, years: float) -> float:
    """
    Monthly contribution that closes the gap between the target and what
    the principal grows to on its own. Zero when the principal is enough.
    """
    _check_finite(target_future_value=target_future_value, principal=principal,
                  annual_rate=annual_rate, years=years)
    _check_years(years)
    if target_future_value <= 0:
        raise ProjectionDomainError(
            f"target must be positive to solve for a contribution, got {target_future_value}")

    months = years * MONTHS_PER_YEAR
    growth = 1.0 if annual_rate == 0 else _growth_factor(annual_rate, years)
    gap = target_future_value - principal * growth
    if gap <= 0:
        return 0.0
    if months == 0:
        raise ProjectionDomainError("years must be positive when the principal falls short of the target")

    if annual_rate == 0:
        return gap / months
    r = annual_rate / MONTHS_PER_YEAR
    return gap * (r / (growth - 1))


def inflation_adjusted_target(target_amount: float, annual_inflation_pct: float,
                              years: float) -> float:
    """Grow a target expressed in today's money into money of `years` from now."""
    _check_finite(target_amount=target_amount, annual_inflation_pct=annual_inflation_pct,
                  years=years)
    _check_years(years)
    if annual_inflation_pct <= -100:
        raise ProjectionDomainError(f"inflation {annual_inflation_pct}% is not meaningful")
    return target_amount * (1 + annual_inflation_pct / 100) ** years


def _plan(key: str, target_amount: float, current_savings: float, years: float,
          max_monthly_capacity: float) -> InvestmentPlan:
    scenario = INVESTMENT_SCENARIOS[key]
    rate = scenario["annual_return"]
    payment = required_monthly_payment(target_amount, current_savings, rate, years)
    fv = future_value(current_savings, payment, rate, years)
    contributed = current_savings + payment * years * MONTHS_PER_YEAR
    return InvestmentPlan(
        name=scenario["name"],
        risk_level=scenario["risk_level"],
        annual_return=rate,
        monthly_payment=payment,
        future_value=fv,
        total_contributed=contributed,
        total_gains=fv - contributed,
        description=scenario["description"],
        recommendations=tuple(scenario["recommendations"]),
        fits_capacity=payment <= max_monthly_capacity,
    )


def build_investment_plans(target_amount: float, current_savings: float,
                           monthly_income: float, monthly_expenses: float,
                           years: float) -> InvestmentPlanSet:
    """Conservative / Balanced / Aggressive plans for reaching target_amount."""
    _check_finite(monthly_income=monthly_income, monthly_expenses=monthly_expenses)
    max_capacity = max(0.0, monthly_income - monthly_expenses)
    return InvestmentPlanSet(
        target_amount=target_amount,
        max_monthly_capacity=max_capacity,
        conservative=_plan("conservative", target_amount, current_savings, years, max_capacity),
        balanced=_plan("balanced", target_amount, current_savings, years, max_capacity),
        aggressive=_plan("aggressive", target_amount, current_savings, years, max_capacity),
    )


def solve_realistic_timeline(target_amount: float, current_savings: float,
                             max_monthly_capacity: float,
                             utilization_rate: float = DEFAULT_UTILIZATION,
                             annual_rate: Optional[float] = None) -> RealisticTimelineResult:
    """
    First whole year (1..100) in which saving utilization_rate of capacity
    reaches the target. years_needed is None when capacity is nil or the
    ceiling is hit; anything beyond 30 years is flagged unrealistic.
    """
    rate = TIMELINE_ANNUAL_RETURN if annual_rate is None else annual_rate
    _check_finite(target_amount=target_amount, current_savings=current_savings,
                  max_monthly_capacity=max_monthly_capacity,
                  utilization_rate=utilization_rate, annual_rate=rate)
    if target_amount < 0:
        raise ProjectionDomainError(f"target must not be negative, got {target_amount}")
    if not 0 <= utilization_rate <= 1:
        raise ProjectionDomainError(f"utilization_rate must be within [0, 1], got {utilization_rate}")

    safe_monthly = max_monthly_capacity * utilization_rate
    if safe_monthly <= 0:
        return RealisticTimelineResult(
            years_needed=None,
            monthly_contribution=0.0,
            annual_return=rate,
            is_realistic=False,
        )

    for years in range(1, TIMELINE_MAX_YEARS + 1):
        if future_value(current_savings, safe_monthly, rate, years) >= target_amount:
            return RealisticTimelineResult(
                years_needed=years,
                monthly_contribution=safe_monthly,
                annual_return=rate,
                is_realistic=years <= REALISTIC_MAX_YEARS,
            )

    return RealisticTimelineResult(
        years_needed=None,
        monthly_contribution=safe_monthly,
        annual_return=rate,
        is_realistic=False,
    )
