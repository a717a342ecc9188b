"""Stock quote endpoints, proxied from the quote provider."""

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from app.api.deps import get_current_user, get_quote_service
from app.core.rate_limit import limiter, RATE_LIMITS
from app.models.user import User
from app.schemas.stock import OverviewResponse, QuoteResponse, TimeSeriesResponse
from app.services.quote_service import QuoteService

router = APIRouter()

SYMBOL_PATH = Path(..., min_length=1, max_length=20, pattern=r"^[A-Za-z0-9.\-]+$")


def _unavailable(what: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Unable to fetch {what}",
    )


@router.get("/quote/{symbol}", response_model=QuoteResponse)
@limiter.limit(RATE_LIMITS["price_fetch"])
async def get_stock_quote(
    request: Request,
    symbol: str = SYMBOL_PATH,
    current_user: User = Depends(get_current_user),
    quotes: QuoteService = Depends(get_quote_service),
) -> QuoteResponse:
    """Latest quote for a symbol."""
    quote = await quotes.get_quote(symbol)
    if quote is None:
        raise _unavailable("stock quote")
    return QuoteResponse(**quote)


@router.get("/overview/{symbol}", response_model=OverviewResponse)
@limiter.limit(RATE_LIMITS["price_fetch"])
async def get_stock_overview(
    request: Request,
    symbol: str = SYMBOL_PATH,
    current_user: User = Depends(get_current_user),
    quotes: QuoteService = Depends(get_quote_service),
) -> OverviewResponse:
    """Company overview (sector, industry, valuation ratios)."""
    overview = await quotes.get_overview(symbol)
    if overview is None:
        raise _unavailable("stock overview")
    return OverviewResponse(**overview)


@router.get("/timeseries/{symbol}", response_model=TimeSeriesResponse)
@limiter.limit(RATE_LIMITS["price_fetch"])
async def get_time_series(
    request: Request,
    symbol: str = SYMBOL_PATH,
    current_user: User = Depends(get_current_user),
    quotes: QuoteService = Depends(get_quote_service),
) -> TimeSeriesResponse:
    """Raw daily time series as returned by the provider."""
    series = await quotes.get_time_series_daily(symbol)
    if series is None:
        raise _unavailable("time series data")
    return TimeSeriesResponse(**series)
