"""Periodic price refresh task tests."""

from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.asset import Asset
from app.models.portfolio import Portfolio
from app.models.user import User
from app.tasks import price_updates


@pytest.mark.asyncio
async def test_refresh_all_holdings(monkeypatch, test_engine, db_session, regular_user: User, fake_quotes):
    """Every holding across portfolios gets the latest quote; unknown symbols keep theirs."""
    first = Portfolio(user_id=regular_user.id, name="First")
    second = Portfolio(user_id=regular_user.id, name="Second")
    db_session.add_all([first, second])
    await db_session.flush()
    db_session.add_all(
        [
            Asset(portfolio_id=first.id, ticker_symbol="AAPL", quantity=Decimal("1"), purchase_price=Decimal("100")),
            Asset(portfolio_id=second.id, ticker_symbol="AAPL", quantity=Decimal("2"), purchase_price=Decimal("120")),
            Asset(
                portfolio_id=second.id,
                ticker_symbol="ZZZZ",
                quantity=Decimal("1"),
                purchase_price=Decimal("10"),
                current_price=Decimal("9"),
            ),
        ]
    )
    await db_session.commit()

    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(price_updates, "AsyncSessionLocal", session_factory)

    result = await price_updates.refresh_all_holdings(fake_quotes)

    assert result["updated"] == 1
    assert result["symbols"] == ["AAPL"]
    assert result["unavailable"] == ["ZZZZ"]
    # One quote per distinct symbol
    assert fake_quotes.calls == ["AAPL", "ZZZZ"]

    async with session_factory() as check:
        rows = (await check.execute(select(Asset).order_by(Asset.ticker_symbol, Asset.quantity))).scalars().all()
        prices = [(a.ticker_symbol, a.current_price) for a in rows]
    assert prices == [
        ("AAPL", Decimal("150")),
        ("AAPL", Decimal("150")),
        ("ZZZZ", Decimal("9")),
    ]
