"""Portfolio valuation: per-holding value, cost basis and gain/loss.

Everything here is pure and works on immutable ``HoldingSnapshot`` values so
that read paths never touch ORM state.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional
from uuid import UUID

ZERO = Decimal("0")
HUNDRED = Decimal("100")
_FOUR_PLACES = Decimal("0.0001")
_TWO_PLACES = Decimal("0.01")


def round4(value: Decimal) -> Decimal:
    """Round half-up to 4 fractional digits."""
    return value.quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP)


def round2(value: Decimal) -> Decimal:
    """Round half-up to 2 fractional digits."""
    return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def percentage_of(amount: Decimal, base: Decimal) -> Decimal:
    """``round4(amount / base) * 100``, or 0 when ``base`` is zero."""
    if base == 0:
        return ZERO
    return round4(amount / base) * HUNDRED


@dataclass(frozen=True)
class HoldingSnapshot:
    """Valuation inputs of one holding, detached from the database."""

    ticker_symbol: str
    quantity: Decimal
    purchase_price: Decimal
    current_price: Optional[Decimal] = None
    id: Optional[UUID] = None

    @classmethod
    def from_asset(cls, asset) -> "HoldingSnapshot":
        return cls(
            id=asset.id,
            ticker_symbol=asset.ticker_symbol,
            quantity=Decimal(str(asset.quantity)),
            purchase_price=Decimal(str(asset.purchase_price)),
            current_price=(
                Decimal(str(asset.current_price))
                if asset.current_price is not None
                else None
            ),
        )


@dataclass(frozen=True)
class ValuedHolding:
    holding: HoldingSnapshot
    total_value: Decimal
    total_cost: Decimal
    gain_loss: Decimal
    gain_loss_percentage: Decimal

    @property
    def ticker_symbol(self) -> str:
        return self.holding.ticker_symbol


@dataclass(frozen=True)
class PortfolioSummary:
    total_value: Decimal
    total_cost: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percentage: Decimal
    holding_count: int


def value_holding(holding: HoldingSnapshot) -> ValuedHolding:
    """Compute value, cost and gain/loss for one holding.

    A holding without a quote yet is valued at zero.
    """
    price = holding.current_price if holding.current_price is not None else ZERO
    total_value = price * holding.quantity
    total_cost = holding.purchase_price * holding.quantity
    gain_loss = total_value - total_cost
    return ValuedHolding(
        holding=holding,
        total_value=total_value,
        total_cost=total_cost,
        gain_loss=gain_loss,
        gain_loss_percentage=percentage_of(gain_loss, total_cost),
    )


def value_holdings(holdings: Iterable[HoldingSnapshot]) -> List[ValuedHolding]:
    return [value_holding(h) for h in holdings]


def summarize(valued_holdings: Iterable[ValuedHolding]) -> PortfolioSummary:
    """Aggregate valued holdings into portfolio totals."""
    valued = list(valued_holdings)
    total_value = sum((v.total_value for v in valued), ZERO)
    total_cost = sum((v.total_cost for v in valued), ZERO)
    total_gain_loss = total_value - total_cost
    return PortfolioSummary(
        total_value=total_value,
        total_cost=total_cost,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percentage=percentage_of(total_gain_loss, total_cost),
        holding_count=len(valued),
    )
