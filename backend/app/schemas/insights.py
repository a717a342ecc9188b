"""Insights schemas."""

from decimal import Decimal
from typing import List

from pydantic import BaseModel

from app.services.insights_service import RecommendationCategory, RecommendationPriority


class DiversificationResponse(BaseModel):
    score: Decimal
    holding_count: int
    concentration_index: Decimal
    message: str

    class Config:
        from_attributes = True


class RecommendationResponse(BaseModel):
    category: RecommendationCategory
    priority: RecommendationPriority
    message: str
    suggested_symbols: List[str]

    class Config:
        from_attributes = True


class SimulationResponse(BaseModel):
    horizon_days: int
    current_value: Decimal
    simulated_value: Decimal
    total_return: Decimal
    return_percentage: Decimal
    daily_returns: List[Decimal]
    compounded: bool

    class Config:
        from_attributes = True
