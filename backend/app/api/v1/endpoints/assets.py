"""Asset endpoints, nested under a portfolio."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_owned_portfolio, get_quote_service
from app.core.database import get_db
from app.core.exceptions import HoldingNotFound, OwnershipMismatch
from app.models.asset import Asset
from app.models.user import User
from app.schemas.asset import AssetCreate, AssetWithMetrics
from app.services.asset_service import asset_service
from app.services.quote_service import QuoteService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_asset(db: AsyncSession, portfolio_id: UUID, asset_id: UUID) -> Asset:
    try:
        return await asset_service.get_holding(db, portfolio_id, asset_id)
    except HoldingNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Asset not found",
        )
    except OwnershipMismatch as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/", response_model=List[AssetWithMetrics])
async def list_assets(
    portfolio_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[AssetWithMetrics]:
    """List a portfolio's assets with their valuation."""
    await get_owned_portfolio(db, portfolio_id, current_user)
    assets = await asset_service.list_assets(db, portfolio_id)
    return [AssetWithMetrics.from_asset(a) for a in assets]


@router.post("/", response_model=AssetWithMetrics, status_code=status.HTTP_201_CREATED)
async def add_asset(
    portfolio_id: UUID,
    asset_in: AssetCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    quotes: QuoteService = Depends(get_quote_service),
) -> AssetWithMetrics:
    """Add a purchase to a portfolio.

    Buying a symbol the portfolio already holds increases that asset's
    quantity (200); a new symbol creates an asset (201).
    """
    await get_owned_portfolio(db, portfolio_id, current_user)

    try:
        asset, created = await asset_service.upsert_holding(
            db,
            portfolio_id,
            asset_in.ticker_symbol,
            asset_in.quantity,
            asset_in.purchase_price,
            quotes=quotes,
        )
        await db.commit()
    except IntegrityError:
        # Concurrent first purchase of the same symbol won the insert
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Asset was modified concurrently, please retry",
        )
    await db.refresh(asset)

    if not created:
        response.status_code = status.HTTP_200_OK
    return AssetWithMetrics.from_asset(asset)


@router.get("/{asset_id}", response_model=AssetWithMetrics)
async def get_asset(
    portfolio_id: UUID,
    asset_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AssetWithMetrics:
    """Get a specific asset."""
    await get_owned_portfolio(db, portfolio_id, current_user)
    asset = await _get_asset(db, portfolio_id, asset_id)
    return AssetWithMetrics.from_asset(asset)


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_asset(
    portfolio_id: UUID,
    asset_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove an asset from a portfolio."""
    await get_owned_portfolio(db, portfolio_id, current_user)
    try:
        await asset_service.delete_holding(db, portfolio_id, asset_id)
    except HoldingNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Asset not found",
        )
    except OwnershipMismatch as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    await db.commit()
    logger.info(
        "Asset removed",
        extra={"portfolio_id": str(portfolio_id), "asset_id": str(asset_id)},
    )
