"""Asset (holding) model."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from app.models import Base


class Asset(Base):
    """A single ticker position within a portfolio."""

    __tablename__ = "assets"
    __table_args__ = (
        UniqueConstraint("portfolio_id", "ticker_symbol", name="uq_assets_portfolio_ticker"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    portfolio_id = Column(Uuid(as_uuid=True), ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False, index=True)
    ticker_symbol = Column(String(20), nullable=False, index=True)
    quantity = Column(Numeric(precision=24, scale=8), nullable=False)
    purchase_price = Column(Numeric(precision=18, scale=8), nullable=False)
    current_price = Column(Numeric(precision=18, scale=8), nullable=True)
    last_price_update = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
