"""Portfolio insights: diversification score, recommendation, simulation.

The scoring, recommendation and simulation functions are pure; the
``InsightsService`` facade only loads holdings and feeds them through.
"""

import enum
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID

import numpy as np
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidHorizon
from app.services.asset_service import asset_service
from app.services.valuation import (
    HUNDRED,
    ZERO,
    ValuedHolding,
    percentage_of,
    round2,
    round4,
    summarize,
    value_holdings,
)

logger = logging.getLogger(__name__)

# Holding-count bonus tiers, highest threshold first
COUNT_BONUSES = (
    (10, Decimal("1.1")),
    (5, Decimal("1.05")),
)
RECOMMENDATION_SCORE_THRESHOLD = Decimal("70")
EXPANSION_HOLDING_THRESHOLD = 5
MAX_DAILY_SWING = 0.1  # daily return drawn from [-5%, +5%]

MSG_NO_ASSETS = "No assets in portfolio"
MSG_NO_MARKET_VALUE = "Portfolio has no market value yet"

DIVERSIFICATION_MESSAGES = (
    (Decimal("80"), "Excellent diversification! Your portfolio is well spread across different assets."),
    (Decimal("60"), "Good diversification. Consider adding a few more assets for better risk distribution."),
    (Decimal("40"), "Moderate diversification. Adding more diverse assets would improve your portfolio."),
)
LOW_DIVERSIFICATION_MESSAGE = (
    "Low diversification. Consider adding more assets from different sectors and asset classes."
)


class RecommendationCategory(str, enum.Enum):
    DIVERSIFICATION = "DIVERSIFICATION"
    EXPANSION = "EXPANSION"
    OPTIMIZATION = "OPTIMIZATION"


class RecommendationPriority(str, enum.Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


SUGGESTED_SYMBOLS = {
    RecommendationCategory.DIVERSIFICATION: ("VTI", "VEA", "VWO", "BND", "VNQ", "GLD", "TLT", "IWM"),
    RecommendationCategory.EXPANSION: ("SPY", "QQQ", "IWM", "EFA", "EEM", "AGG", "LQD", "HYG"),
    RecommendationCategory.OPTIMIZATION: ("VTI", "VXUS", "BND", "VNQ", "GLD", "TLT", "IEFA", "IEMG"),
}


@dataclass(frozen=True)
class DiversificationResult:
    score: Decimal
    holding_count: int
    concentration_index: Decimal
    message: str


@dataclass(frozen=True)
class Recommendation:
    category: RecommendationCategory
    priority: RecommendationPriority
    message: str
    suggested_symbols: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SimulationResult:
    horizon_days: int
    current_value: Decimal
    simulated_value: Decimal
    total_return: Decimal
    return_percentage: Decimal
    daily_returns: List[Decimal]
    compounded: bool = False


def diversification_message(score: Decimal) -> str:
    for threshold, message in DIVERSIFICATION_MESSAGES:
        if score >= threshold:
            return message
    return LOW_DIVERSIFICATION_MESSAGE


def score_diversification(valued: Sequence[ValuedHolding]) -> DiversificationResult:
    """Herfindahl-Hirschman based diversification score in [0, 100]."""
    holding_count = len(valued)
    if holding_count == 0:
        return DiversificationResult(
            score=ZERO, holding_count=0, concentration_index=ZERO, message=MSG_NO_ASSETS
        )

    total_value = sum((v.total_value for v in valued), ZERO)
    if total_value <= 0:
        return DiversificationResult(
            score=ZERO,
            holding_count=holding_count,
            concentration_index=ZERO,
            message=MSG_NO_MARKET_VALUE,
        )

    hhi = ZERO
    for v in valued:
        weight = round4(v.total_value / total_value)
        hhi += weight * weight

    score = HUNDRED - hhi * HUNDRED
    for min_count, multiplier in COUNT_BONUSES:
        if holding_count >= min_count:
            score *= multiplier
            break
    # Rounded weights can push HHI a hair above 1
    score = max(min(score, HUNDRED), ZERO)

    return DiversificationResult(
        score=round2(score),
        holding_count=holding_count,
        concentration_index=round4(hhi),
        message=diversification_message(score),
    )


def recommend(score: Decimal, holding_count: int) -> Recommendation:
    """Map a diversification score and holding count to a recommendation."""
    if score < RECOMMENDATION_SCORE_THRESHOLD:
        category = RecommendationCategory.DIVERSIFICATION
        priority = RecommendationPriority.HIGH
        message = (
            "Your portfolio has low diversification. "
            "Consider adding more assets from different sectors."
        )
    elif holding_count < EXPANSION_HOLDING_THRESHOLD:
        category = RecommendationCategory.EXPANSION
        priority = RecommendationPriority.MEDIUM
        message = "Consider adding more assets to improve portfolio stability."
    else:
        category = RecommendationCategory.OPTIMIZATION
        priority = RecommendationPriority.LOW
        message = (
            "Your portfolio is well diversified. "
            "Consider rebalancing based on market conditions."
        )
    return Recommendation(
        category=category,
        priority=priority,
        message=message,
        suggested_symbols=list(SUGGESTED_SYMBOLS[category]),
    )


def simulate(
    current_total_value: Decimal,
    horizon_days: int,
    rng: Optional[np.random.Generator] = None,
    compounded: bool = False,
) -> SimulationResult:
    """Project a portfolio value forward with uniform daily returns.

    By default daily returns are summed (not compounded), so
    ``simulated_value == current * (1 + sum(daily_returns))``. Pass
    ``compounded=True`` to chain them multiplicatively instead.
    """
    if horizon_days <= 0:
        raise InvalidHorizon(horizon_days)
    if rng is None:
        rng = np.random.default_rng()

    daily_returns = [
        Decimal(str(float((rng.random() - 0.5) * MAX_DAILY_SWING)))
        for _ in range(horizon_days)
    ]

    if compounded:
        growth = Decimal("1")
        for daily in daily_returns:
            growth *= 1 + daily
        simulated_value = current_total_value * growth
    else:
        simulated_value = current_total_value * (1 + sum(daily_returns, ZERO))

    total_return = simulated_value - current_total_value
    return SimulationResult(
        horizon_days=horizon_days,
        current_value=current_total_value,
        simulated_value=simulated_value,
        total_return=total_return,
        return_percentage=percentage_of(total_return, current_total_value),
        daily_returns=daily_returns,
        compounded=compounded,
    )


class InsightsService:
    """Loads a portfolio's holdings and runs the analytics on them."""

    async def _valued_holdings(self, db: AsyncSession, portfolio_id: UUID) -> List[ValuedHolding]:
        holdings = await asset_service.list_holdings(db, portfolio_id)
        return value_holdings(holdings)

    async def get_diversification(
        self, db: AsyncSession, portfolio_id: UUID
    ) -> DiversificationResult:
        result = score_diversification(await self._valued_holdings(db, portfolio_id))
        logger.debug(
            "Diversification computed",
            extra={"portfolio_id": str(portfolio_id), "score": str(result.score)},
        )
        return result

    async def get_recommendation(
        self, db: AsyncSession, portfolio_id: UUID
    ) -> Recommendation:
        diversification = await self.get_diversification(db, portfolio_id)
        return recommend(diversification.score, diversification.holding_count)

    async def run_simulation(
        self,
        db: AsyncSession,
        portfolio_id: UUID,
        days: int,
        rng: Optional[np.random.Generator] = None,
        compounded: bool = False,
    ) -> SimulationResult:
        if days <= 0:
            raise InvalidHorizon(days)
        summary = summarize(await self._valued_holdings(db, portfolio_id))
        return simulate(summary.total_value, days, rng=rng, compounded=compounded)


insights_service = InsightsService()
