"""Asset schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.services.valuation import HoldingSnapshot, value_holding


class AssetCreate(BaseModel):
    """Schema for adding a purchase to a portfolio."""

    ticker_symbol: str = Field(..., min_length=1, max_length=20, pattern=r"^\s*[A-Za-z0-9.\-]+\s*$")
    quantity: Decimal = Field(..., gt=0)
    purchase_price: Decimal = Field(..., gt=0)


class AssetResponse(BaseModel):
    """Schema for asset response."""

    id: UUID
    portfolio_id: UUID
    ticker_symbol: str
    quantity: Decimal
    purchase_price: Decimal
    current_price: Optional[Decimal] = None
    last_price_update: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AssetWithMetrics(AssetResponse):
    """Schema for asset with calculated metrics."""

    total_value: Decimal
    total_cost: Decimal
    gain_loss: Decimal
    gain_loss_percentage: Decimal

    @classmethod
    def from_asset(cls, asset) -> "AssetWithMetrics":
        """Stored asset plus its valuation at the stored price."""
        valued = value_holding(HoldingSnapshot.from_asset(asset))
        return cls(
            **AssetResponse.model_validate(asset).model_dump(),
            total_value=valued.total_value,
            total_cost=valued.total_cost,
            gain_loss=valued.gain_loss,
            gain_loss_percentage=valued.gain_loss_percentage,
        )


class PriceRefreshResponse(BaseModel):
    """Outcome of a price refresh."""

    updated: List[str]
    unavailable: List[str]
    prices: Dict[str, Optional[Decimal]]
