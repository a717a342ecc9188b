"""Pydantic schemas."""

from app.schemas.user import UserResponse
from app.schemas.auth import (
    Token,
    LoginRequest,
    RegisterRequest,
    RefreshTokenRequest,
)
from app.schemas.portfolio import (
    PortfolioCreate,
    PortfolioUpdate,
    PortfolioResponse,
    PortfolioSummaryResponse,
    PortfolioWithAssets,
)
from app.schemas.asset import (
    AssetCreate,
    AssetResponse,
    AssetWithMetrics,
    PriceRefreshResponse,
)
from app.schemas.insights import (
    DiversificationResponse,
    RecommendationResponse,
    SimulationResponse,
)
from app.schemas.stock import (
    QuoteResponse,
    OverviewResponse,
    TimeSeriesResponse,
)

__all__ = [
    "UserResponse",
    "Token",
    "LoginRequest",
    "RegisterRequest",
    "RefreshTokenRequest",
    "PortfolioCreate",
    "PortfolioUpdate",
    "PortfolioResponse",
    "PortfolioSummaryResponse",
    "PortfolioWithAssets",
    "AssetCreate",
    "AssetResponse",
    "AssetWithMetrics",
    "PriceRefreshResponse",
    "DiversificationResponse",
    "RecommendationResponse",
    "SimulationResponse",
    "QuoteResponse",
    "OverviewResponse",
    "TimeSeriesResponse",
]
