"""
Projection Engine — Plan Models
─────────────────────────────────
Request-scoped results of the projection functions.
"""

from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class InvestmentPlan:
    name:              str
    risk_level:        str          # "Low" | "Medium" | "High"
    annual_return:     float
    monthly_payment:   float
    future_value:      float
    total_contributed: float
    total_gains:       float
    description:       str
    recommendations:   Tuple[str, ...]
    fits_capacity:     bool

    def to_dict(self) -> dict:
        d = asdict(self)
        d["recommendations"] = list(self.recommendations)
        return d


@dataclass(frozen=True)
class InvestmentPlanSet:
    target_amount:        float
    max_monthly_capacity: float
    conservative:         InvestmentPlan
    balanced:             InvestmentPlan
    aggressive:           InvestmentPlan

    @property
    def plans(self) -> List[InvestmentPlan]:
        return [self.conservative, self.balanced, self.aggressive]

    def to_dict(self) -> dict:
        return {
            "target_amount":        self.target_amount,
            "max_monthly_capacity": self.max_monthly_capacity,
            "conservative":         self.conservative.to_dict(),
            "balanced":             self.balanced.to_dict(),
            "aggressive":           self.aggressive.to_dict(),
        }


@dataclass(frozen=True)
class RealisticTimelineResult:
    years_needed:         Optional[int]   # None = unbounded, not reachable
    monthly_contribution: float
    annual_return:        float
    is_realistic:         bool

    @property
    def is_unbounded(self) -> bool:
        return self.years_needed is None

    def to_dict(self) -> dict:
        return asdict(self)
