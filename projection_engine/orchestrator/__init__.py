from .aggregator import MarketDataAggregator, render_narrative
from .rate_limiter import TokenBucket, get_bucket

__all__ = ["MarketDataAggregator", "render_narrative", "TokenBucket", "get_bucket"]
