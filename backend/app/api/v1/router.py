"""API v1 router."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    portfolios,
    assets,
    insights,
    stocks,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(portfolios.router, prefix="/portfolios", tags=["Portfolios"])
api_router.include_router(
    assets.router, prefix="/portfolios/{portfolio_id}/assets", tags=["Assets"]
)
api_router.include_router(insights.router, prefix="/insights", tags=["Insights"])
api_router.include_router(stocks.router, prefix="/stocks", tags=["Stocks"])
