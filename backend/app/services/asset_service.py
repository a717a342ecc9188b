"""Holding persistence: lookups, merge-on-add, removal and price refresh."""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import HoldingNotFound, OwnershipMismatch, PortfolioNotFound
from app.models.asset import Asset
from app.models.portfolio import Portfolio
from app.services.quote_service import QuoteService
from app.services.valuation import HoldingSnapshot

logger = logging.getLogger(__name__)


class AssetService:
    """Data access for a portfolio's holdings.

    Methods flush but never commit; the request (or task) owning the
    session decides when to commit.
    """

    async def get_owned_portfolio(
        self, db: AsyncSession, portfolio_id: UUID, user_id: UUID
    ) -> Portfolio:
        """Portfolio by id, scoped to its owner."""
        result = await db.execute(
            select(Portfolio).where(
                Portfolio.id == portfolio_id,
                Portfolio.user_id == user_id,
            )
        )
        portfolio = result.scalar_one_or_none()
        if not portfolio:
            raise PortfolioNotFound(portfolio_id)
        return portfolio

    async def list_assets(self, db: AsyncSession, portfolio_id: UUID) -> List[Asset]:
        result = await db.execute(
            select(Asset)
            .where(Asset.portfolio_id == portfolio_id)
            .order_by(Asset.ticker_symbol)
        )
        return list(result.scalars().all())

    async def list_holdings(self, db: AsyncSession, portfolio_id: UUID) -> List[HoldingSnapshot]:
        return [HoldingSnapshot.from_asset(a) for a in await self.list_assets(db, portfolio_id)]

    async def get_holding(
        self, db: AsyncSession, portfolio_id: UUID, holding_id: UUID
    ) -> Asset:
        """Holding by id; it must belong to ``portfolio_id``."""
        asset = await db.get(Asset, holding_id)
        if asset is None:
            raise HoldingNotFound(holding_id)
        if asset.portfolio_id != portfolio_id:
            raise OwnershipMismatch(portfolio_id, holding_id)
        return asset

    async def upsert_holding(
        self,
        db: AsyncSession,
        portfolio_id: UUID,
        symbol: str,
        quantity_delta: Decimal,
        purchase_price: Decimal,
        quotes: Optional[QuoteService] = None,
    ) -> Tuple[Asset, bool]:
        """Add a purchase to a portfolio.

        An existing holding of the same symbol only has its quantity
        increased; purchase and current price stay as they are (no
        average-cost rebasing). A new symbol gets one quote fetch; the
        holding is created even when no quote is available.

        Returns the holding and whether it was created.
        """
        symbol = symbol.strip().upper()
        result = await db.execute(
            select(Asset)
            .where(
                Asset.portfolio_id == portfolio_id,
                Asset.ticker_symbol == symbol,
            )
            .with_for_update()
        )
        existing = result.scalar_one_or_none()

        if existing is not None:
            existing.quantity = Decimal(str(existing.quantity)) + quantity_delta
            await db.flush()
            logger.info(
                "Merged purchase into existing holding",
                extra={"portfolio_id": str(portfolio_id), "symbol": symbol},
            )
            return existing, False

        asset = Asset(
            portfolio_id=portfolio_id,
            ticker_symbol=symbol,
            quantity=quantity_delta,
            purchase_price=purchase_price,
        )
        if quotes is not None:
            price = await quotes.get_price(symbol)
            if price is not None:
                asset.current_price = price
                asset.last_price_update = datetime.now(timezone.utc)
            else:
                logger.warning("No quote for new holding %s, price left unset", symbol)

        db.add(asset)
        await db.flush()
        return asset, True

    async def delete_holding(
        self, db: AsyncSession, portfolio_id: UUID, holding_id: UUID
    ) -> None:
        asset = await self.get_holding(db, portfolio_id, holding_id)
        await db.delete(asset)
        await db.flush()

    async def _apply_prices(
        self, assets: List[Asset], quotes: QuoteService
    ) -> Dict[str, Optional[Decimal]]:
        """Fetch each distinct symbol once and store the price on every holding."""
        prices: Dict[str, Optional[Decimal]] = {}
        now = datetime.now(timezone.utc)
        for asset in assets:
            symbol = asset.ticker_symbol
            if symbol not in prices:
                prices[symbol] = await quotes.get_price(symbol)
            price = prices[symbol]
            if price is not None:
                asset.current_price = price
                asset.last_price_update = now
        return prices

    async def refresh_prices(
        self, db: AsyncSession, portfolio_id: UUID, quotes: QuoteService
    ) -> Dict[str, Optional[Decimal]]:
        """Store fresh quotes on a portfolio's holdings.

        Holdings whose quote is unavailable keep their previous price.
        """
        prices = await self._apply_prices(await self.list_assets(db, portfolio_id), quotes)
        await db.flush()
        return prices

    async def refresh_all_prices(
        self, db: AsyncSession, quotes: QuoteService
    ) -> Dict[str, Optional[Decimal]]:
        """Refresh every holding in the database (periodic task)."""
        result = await db.execute(select(Asset).order_by(Asset.ticker_symbol))
        prices = await self._apply_prices(list(result.scalars().all()), quotes)
        await db.flush()
        return prices


asset_service = AssetService()
