"""Portfolio endpoints."""

import logging
from dataclasses import asdict
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_owned_portfolio, get_quote_service
from app.core.database import get_db
from app.core.rate_limit import limiter, RATE_LIMITS
from app.models.asset import Asset
from app.models.portfolio import Portfolio
from app.models.user import User
from app.schemas.asset import AssetWithMetrics, PriceRefreshResponse
from app.schemas.portfolio import (
    PortfolioCreate,
    PortfolioResponse,
    PortfolioSummaryResponse,
    PortfolioUpdate,
    PortfolioWithAssets,
)
from app.services.asset_service import asset_service
from app.services.quote_service import QuoteService
from app.services.valuation import HoldingSnapshot, summarize, value_holdings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[PortfolioResponse])
async def list_portfolios(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[PortfolioResponse]:
    """List all portfolios for the current user."""
    result = await db.execute(
        select(Portfolio)
        .where(Portfolio.user_id == current_user.id)
        .order_by(Portfolio.created_at.desc())
    )
    portfolios = result.scalars().all()
    return portfolios


@router.post("/", response_model=PortfolioResponse, status_code=status.HTTP_201_CREATED)
async def create_portfolio(
    portfolio_in: PortfolioCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioResponse:
    """Create a new portfolio."""
    portfolio = Portfolio(
        user_id=current_user.id,
        name=portfolio_in.name,
        description=portfolio_in.description,
    )

    db.add(portfolio)
    await db.commit()
    await db.refresh(portfolio)

    return portfolio


@router.get("/{portfolio_id}", response_model=PortfolioWithAssets)
async def get_portfolio(
    portfolio_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioWithAssets:
    """Get a portfolio with its valued assets and totals.

    Uses stored prices; call ``/refresh-prices`` to update them.
    """
    portfolio = await get_owned_portfolio(db, portfolio_id, current_user)
    assets = await asset_service.list_assets(db, portfolio_id)
    summary = summarize(value_holdings(HoldingSnapshot.from_asset(a) for a in assets))

    return PortfolioWithAssets(
        **PortfolioResponse.model_validate(portfolio).model_dump(),
        assets=[AssetWithMetrics.from_asset(a) for a in assets],
        summary=PortfolioSummaryResponse(**asdict(summary)),
    )


@router.patch("/{portfolio_id}", response_model=PortfolioResponse)
async def update_portfolio(
    portfolio_id: UUID,
    portfolio_in: PortfolioUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioResponse:
    """Update a portfolio."""
    portfolio = await get_owned_portfolio(db, portfolio_id, current_user)

    update_data = portfolio_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(portfolio, field, value)

    await db.commit()
    await db.refresh(portfolio)

    return portfolio


@router.delete("/{portfolio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_portfolio(
    portfolio_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a portfolio and its assets."""
    portfolio = await get_owned_portfolio(db, portfolio_id, current_user)

    await db.execute(delete(Asset).where(Asset.portfolio_id == portfolio_id))
    await db.delete(portfolio)
    await db.commit()


@router.post("/{portfolio_id}/refresh-prices", response_model=PriceRefreshResponse)
@limiter.limit(RATE_LIMITS["price_refresh"])
async def refresh_prices(
    request: Request,
    portfolio_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    quotes: QuoteService = Depends(get_quote_service),
) -> PriceRefreshResponse:
    """Fetch current quotes and store them on the portfolio's assets."""
    await get_owned_portfolio(db, portfolio_id, current_user)
    prices = await asset_service.refresh_prices(db, portfolio_id, quotes)
    await db.commit()

    unavailable = sorted(s for s, p in prices.items() if p is None)
    if unavailable:
        logger.warning(
            "Some quotes unavailable during refresh",
            extra={"portfolio_id": str(portfolio_id), "symbols": ",".join(unavailable)},
        )
    return PriceRefreshResponse(
        updated=sorted(s for s, p in prices.items() if p is not None),
        unavailable=unavailable,
        prices=prices,
    )
