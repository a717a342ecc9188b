"""Portfolio schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.asset import AssetWithMetrics


class PortfolioBase(BaseModel):
    """Base portfolio schema."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class PortfolioCreate(PortfolioBase):
    """Schema for creating a portfolio."""

    pass


class PortfolioUpdate(BaseModel):
    """Schema for updating a portfolio."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class PortfolioResponse(PortfolioBase):
    """Schema for portfolio response."""

    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PortfolioSummaryResponse(BaseModel):
    """Aggregate valuation of a portfolio."""

    total_value: Decimal
    total_cost: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percentage: Decimal
    holding_count: int

    class Config:
        from_attributes = True


class PortfolioWithAssets(PortfolioResponse):
    """Schema for portfolio with valued assets and totals."""

    assets: List[AssetWithMetrics] = []
    summary: PortfolioSummaryResponse
