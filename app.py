import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from projection_engine import MarketDataService, __version__
from projection_engine.errors import InvalidIdentifier, ProjectionDomainError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "service", None) is None:
        app.state.service = MarketDataService()
    yield
    await app.state.service.aclose()


app = FastAPI(
    title="Market-Aware Projection Engine",
    description="Market context and compound-interest projections. No API keys needed.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service(request: Request) -> MarketDataService:
    return request.app.state.service


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(400, str(e))


@app.get("/")
async def root():
    return {"status": "ok", "docs": "/docs", "api": "/api/market-context/US"}


@app.get("/health")
async def health(svc: MarketDataService = Depends(get_service)):
    return {
        "status": "healthy",
        "cache_entries": len(svc.cache),
        "timestamp": int(time.time()),
    }


# ── Market data ───────────────────────────────────────────────

@app.get("/api/quote/{symbol}", tags=["Market"])
async def get_quote(symbol: str, svc: MarketDataService = Depends(get_service)):
    try:
        quote = await svc.get_stock_quote(symbol)
    except InvalidIdentifier as e:
        raise _bad_request(e)
    if quote is None:
        raise HTTPException(404, f"Quote for {symbol.upper()} temporarily unavailable")
    return quote.to_dict()


@app.get("/api/quotes", tags=["Market"])
async def get_quotes(
    symbols: str = Query(..., description="Comma-separated symbols e.g. SPY,QQQ,DIA"),
    svc: MarketDataService = Depends(get_service),
):
    raw = [s.strip() for s in symbols.split(",") if s.strip()]
    if not raw:
        raise HTTPException(400, "No symbols provided")
    if len(raw) > 50:
        raise HTTPException(400, "Maximum 50 symbols per request")
    quotes = await svc.get_multiple_stocks(raw)
    return {
        "requested": len(raw),
        "count": len(quotes),
        "timestamp": int(time.time()),
        "data": {s: q.to_dict() for s, q in quotes.items()},
    }


@app.get("/api/forex/{from_currency}/{to_currency}", tags=["Market"])
async def get_forex(from_currency: str, to_currency: str,
                    svc: MarketDataService = Depends(get_service)):
    try:
        rate = await svc.get_forex_rate(from_currency, to_currency)
    except InvalidIdentifier as e:
        raise _bad_request(e)
    if rate is None:
        raise HTTPException(404, f"No rate for {from_currency.upper()}/{to_currency.upper()}")
    return rate.to_dict()


@app.get("/api/inflation/{country}", tags=["Market"])
async def get_inflation(country: str, svc: MarketDataService = Depends(get_service)):
    try:
        return (await svc.get_inflation_rate(country)).to_dict()
    except InvalidIdentifier as e:
        raise _bad_request(e)


@app.get("/api/indicators/{country}", tags=["Market"])
async def get_indicators(country: str, svc: MarketDataService = Depends(get_service)):
    try:
        return (await svc.get_economic_indicators(country)).to_dict()
    except InvalidIdentifier as e:
        raise _bad_request(e)


@app.get("/api/sentiment", tags=["Market"])
async def get_sentiment(svc: MarketDataService = Depends(get_service)):
    return (await svc.get_crypto_sentiment_index()).to_dict()


@app.get("/api/market-context/{country}", tags=["Market"])
async def get_market_context(country: str, svc: MarketDataService = Depends(get_service)):
    return (await svc.get_market_context(country)).to_dict()


@app.get("/api/market-narrative/{country}", tags=["Market"])
async def get_market_narrative(country: str, svc: MarketDataService = Depends(get_service)):
    return {"country": country.upper(), "narrative": await svc.get_market_narrative(country)}


@app.get("/api/benchmarks", tags=["Market"])
async def get_benchmarks(svc: MarketDataService = Depends(get_service)):
    return svc.get_financial_benchmarks()


# ── Projections ───────────────────────────────────────────────

@app.get("/api/projections/future-value", tags=["Projections"])
async def get_future_value(
    principal: float = Query(0.0),
    monthly_contribution: float = Query(0.0),
    annual_rate: float = Query(..., description="e.g. 0.075 for 7.5%"),
    years: float = Query(...),
    svc: MarketDataService = Depends(get_service),
):
    try:
        fv = svc.future_value(principal, monthly_contribution, annual_rate, years)
    except ProjectionDomainError as e:
        raise _bad_request(e)
    return {"future_value": fv}


@app.get("/api/projections/required-payment", tags=["Projections"])
async def get_required_payment(
    target: float = Query(...),
    principal: float = Query(0.0),
    annual_rate: float = Query(...),
    years: float = Query(...),
    svc: MarketDataService = Depends(get_service),
):
    try:
        pmt = svc.required_monthly_payment(target, principal, annual_rate, years)
    except ProjectionDomainError as e:
        raise _bad_request(e)
    return {"monthly_payment": pmt}


@app.get("/api/projections/plans", tags=["Projections"])
async def get_plans(
    target: float = Query(...),
    current_savings: float = Query(0.0),
    monthly_income: float = Query(...),
    monthly_expenses: float = Query(...),
    years: float = Query(...),
    country: Optional[str] = Query(None, description="Adjust the target for this country's inflation"),
    svc: MarketDataService = Depends(get_service),
):
    try:
        if country:
            return await svc.build_market_aware_plans(
                target, current_savings, monthly_income, monthly_expenses, years, country)
        return svc.build_investment_plans(
            target, current_savings, monthly_income, monthly_expenses, years).to_dict()
    except (ProjectionDomainError, InvalidIdentifier) as e:
        raise _bad_request(e)


@app.get("/api/projections/timeline", tags=["Projections"])
async def get_timeline(
    target: float = Query(...),
    current_savings: float = Query(0.0),
    max_monthly_capacity: float = Query(...),
    utilization_rate: float = Query(0.7),
    svc: MarketDataService = Depends(get_service),
):
    try:
        result = svc.solve_realistic_timeline(
            target, current_savings, max_monthly_capacity, utilization_rate)
    except ProjectionDomainError as e:
        raise _bad_request(e)
    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("app:app", host="0.0.0.0", port=port, reload=False, log_level="info")
