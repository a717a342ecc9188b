"""Periodic stock price refresh."""

import asyncio
import logging

from app.core.database import AsyncSessionLocal, engine
from app.core.redis_client import close_redis
from app.services.asset_service import asset_service
from app.services.quote_service import QuoteService
from app.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


def run_async(coro):
    """Helper to run async code in sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def refresh_all_holdings(quotes: QuoteService) -> dict:
    """Refresh every stored holding's price and commit."""
    async with AsyncSessionLocal() as db:
        try:
            prices = await asset_service.refresh_all_prices(db, quotes)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    updated = sorted(s for s, p in prices.items() if p is not None)
    unavailable = sorted(s for s, p in prices.items() if p is None)
    return {"updated": len(updated), "symbols": updated[:20], "unavailable": unavailable}


@celery_app.task(name="app.tasks.price_updates.update_stock_prices")
def update_stock_prices():
    """Update stored stock prices from the quote provider."""
    logger.info("Starting stock price update...")

    async def _update():
        # Clients and pooled connections are bound to this run's event loop
        quotes = QuoteService()
        try:
            return await refresh_all_holdings(quotes)
        finally:
            await quotes.close()
            await close_redis()
            await engine.dispose()

    result = run_async(_update())
    logger.info(
        "Stock price update complete",
        extra={"updated": result["updated"], "unavailable": len(result["unavailable"])},
    )
    return result
