"""Pytest configuration and fixtures.

API tests run against an in-memory SQLite database and a fake quote
source, so neither Postgres, Redis nor Alpha Vantage is needed.
"""

import os
from decimal import Decimal
from typing import AsyncGenerator, Dict, Optional

# Set test env vars before any app import
os.environ.setdefault("SECRET_KEY", "testsecretkey_for_unit_tests_only_1234567890")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_STORAGE_URL", "memory://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_quote_service
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models import Base
from app.models.user import User

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeQuoteService:
    """Quote source backed by a dict of prices; unknown symbols are unavailable."""

    def __init__(self, prices: Optional[Dict[str, Decimal]] = None):
        self.prices: Dict[str, Decimal] = dict(prices or {})
        self.calls: list = []

    async def get_quote(self, symbol: str) -> Optional[dict]:
        symbol = symbol.upper()
        self.calls.append(symbol)
        price = self.prices.get(symbol)
        if price is None:
            return None
        return {
            "symbol": symbol,
            "price": price,
            "open": price,
            "high": price,
            "low": price,
            "previous_close": price,
            "change": Decimal("0"),
            "change_percent": "0.0000%",
            "volume": 1000,
        }

    async def get_price(self, symbol: str) -> Optional[Decimal]:
        quote = await self.get_quote(symbol)
        return quote["price"] if quote else None

    async def get_overview(self, symbol: str) -> Optional[dict]:
        symbol = symbol.upper()
        if symbol not in self.prices:
            return None
        return {"symbol": symbol, "name": f"{symbol} Inc", "sector": "TECHNOLOGY"}

    async def get_time_series_daily(self, symbol: str) -> Optional[dict]:
        symbol = symbol.upper()
        if symbol not in self.prices:
            return None
        return {
            "symbol": symbol,
            "data": {"2024-05-01": {"4. close": str(self.prices[symbol])}},
        }

    async def close(self):
        pass


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session shared by fixtures and the app under test."""
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_quotes() -> FakeQuoteService:
    return FakeQuoteService(
        {
            "AAPL": Decimal("150.00"),
            "MSFT": Decimal("300.00"),
            "GOOGL": Decimal("100.00"),
        }
    )


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Rate limit counters are global; start every test from zero."""
    limiter.reset()
    yield


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, fake_quotes: FakeQuoteService
) -> AsyncGenerator[AsyncClient, None]:
    """Test client with database and quote source overrides."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_quote_service] = lambda: fake_quotes

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, username: str, email: str, password: str) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def regular_user(db_session: AsyncSession) -> User:
    """Create a regular user for testing."""
    return await _create_user(db_session, "regular", "user@test.com", "userpassword")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second user, for ownership checks."""
    return await _create_user(db_session, "other", "other@test.com", "otherpassword")


@pytest.fixture
def auth_headers(regular_user: User) -> Dict[str, str]:
    token = create_access_token(subject=str(regular_user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(other_user: User) -> Dict[str, str]:
    token = create_access_token(subject=str(other_user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def portfolio_id(client: AsyncClient, auth_headers: Dict[str, str]) -> str:
    """A portfolio owned by ``regular_user``."""
    resp = await client.post(
        "/api/v1/portfolios/",
        json={"name": "Test Portfolio"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.json()["id"]
