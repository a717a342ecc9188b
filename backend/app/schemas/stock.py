"""Stock quote schemas."""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel


class QuoteResponse(BaseModel):
    symbol: str
    price: Decimal
    open: Decimal
    high: Decimal
    low: Decimal
    previous_close: Decimal
    change: Decimal
    change_percent: str
    volume: int


class OverviewResponse(BaseModel):
    symbol: str
    name: Optional[str] = None
    description: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    market_cap: Optional[str] = None
    pe_ratio: Optional[str] = None
    dividend_yield: Optional[str] = None


class TimeSeriesResponse(BaseModel):
    symbol: str
    data: Dict[str, Any]
