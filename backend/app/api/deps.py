"""Shared API dependencies."""

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import PortfolioNotFound
from app.core.security import decode_token
from app.models.portfolio import Portfolio
from app.models.user import User
from app.services.asset_service import asset_service
from app.services.quote_service import QuoteService, quote_service

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_user_from_token(db: AsyncSession, token: str, token_type: str) -> User:
    """Resolve an active user from a JWT of the given type."""
    payload = decode_token(token)
    if not payload or payload.get("type") != token_type:
        raise _unauthorized("Could not validate credentials")

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        raise _unauthorized("Could not validate credentials")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise _unauthorized("User not found or inactive")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Authenticated user from the bearer access token."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return await get_user_from_token(db, credentials.credentials, "access")


def get_quote_service() -> QuoteService:
    """Quote source dependency (overridden in tests)."""
    return quote_service


async def get_owned_portfolio(
    db: AsyncSession, portfolio_id: UUID, current_user: User
) -> Portfolio:
    """Portfolio of the current user, 404 otherwise."""
    try:
        return await asset_service.get_owned_portfolio(db, portfolio_id, current_user.id)
    except PortfolioNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Portfolio not found",
        )
