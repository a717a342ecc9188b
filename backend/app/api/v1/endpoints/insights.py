"""Insights endpoints: diversification score, recommendation, simulation."""

from dataclasses import asdict
from typing import Optional
from uuid import UUID

import numpy as np
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_owned_portfolio
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import InvalidHorizon
from app.models.user import User
from app.schemas.insights import (
    DiversificationResponse,
    RecommendationResponse,
    SimulationResponse,
)
from app.services.insights_service import insights_service

router = APIRouter()


@router.get("/diversification/{portfolio_id}", response_model=DiversificationResponse)
async def get_diversification_score(
    portfolio_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> DiversificationResponse:
    """Herfindahl-Hirschman based diversification score (0-100)."""
    await get_owned_portfolio(db, portfolio_id, current_user)
    result = await insights_service.get_diversification(db, portfolio_id)
    return DiversificationResponse(**asdict(result))


@router.get("/recommendations/{portfolio_id}", response_model=RecommendationResponse)
async def get_recommendation(
    portfolio_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> RecommendationResponse:
    """Directional recommendation with a curated list of symbols."""
    await get_owned_portfolio(db, portfolio_id, current_user)
    result = await insights_service.get_recommendation(db, portfolio_id)
    return RecommendationResponse(**asdict(result))


@router.get("/simulation/{portfolio_id}", response_model=SimulationResponse)
async def simulate_portfolio_performance(
    portfolio_id: UUID,
    days: int = Query(30, le=settings.SIMULATION_MAX_DAYS, description="Simulation horizon in days"),
    seed: Optional[int] = Query(None, ge=0, description="Seed for a reproducible run"),
    compounded: bool = Query(False, description="Compound daily returns instead of summing them"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SimulationResponse:
    """Random-walk projection of the portfolio's current value."""
    await get_owned_portfolio(db, portfolio_id, current_user)
    try:
        result = await insights_service.run_simulation(
            db,
            portfolio_id,
            days,
            rng=np.random.default_rng(seed),
            compounded=compounded,
        )
    except InvalidHorizon as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return SimulationResponse(**asdict(result))
