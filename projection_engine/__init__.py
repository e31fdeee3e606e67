"""
Projection Engine
─────────────────
Market-aware financial projections: cached, fault-tolerant market data
plus compound-interest planning.

    from projection_engine import MarketDataService
    async with MarketDataService() as svc:
        text = await svc.get_market_narrative("US")
"""

from .errors import (
    InvalidIdentifier, MarketDataError, ProjectionDomainError, RateLimited, UpstreamUnavailable,
)
from .projections import (
    build_investment_plans, future_value, inflation_adjusted_target,
    required_monthly_payment, solve_realistic_timeline,
)
from .service import MarketDataService

__version__ = "0.1.0"

__all__ = [
    "MarketDataService",
    "future_value", "required_monthly_payment", "build_investment_plans",
    "solve_realistic_timeline", "inflation_adjusted_target",
    "MarketDataError", "UpstreamUnavailable", "RateLimited",
    "InvalidIdentifier", "ProjectionDomainError",
]
