from .base import UpstreamAccessor
from .forex import ForexAccessor
from .indicators import IndicatorAccessor
from .inflation import InflationAccessor
from .quotes import QuoteAccessor
from .sentiment import SentimentAccessor

__all__ = [
    "UpstreamAccessor", "ForexAccessor", "IndicatorAccessor",
    "InflationAccessor", "QuoteAccessor", "SentimentAccessor",
]
