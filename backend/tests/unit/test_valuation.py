"""Tests for holding valuation and portfolio totals."""

from decimal import Decimal

from app.services.valuation import (
    HoldingSnapshot,
    percentage_of,
    round2,
    round4,
    summarize,
    value_holding,
    value_holdings,
)


def _holding(symbol="AAPL", quantity="10", purchase="100", current="150"):
    return HoldingSnapshot(
        ticker_symbol=symbol,
        quantity=Decimal(quantity),
        purchase_price=Decimal(purchase),
        current_price=Decimal(current) if current is not None else None,
    )


def test_rounding_is_half_up():
    assert round4(Decimal("0.12345")) == Decimal("0.1235")
    assert round4(Decimal("-0.12345")) == Decimal("-0.1235")
    assert round2(Decimal("2.675")) == Decimal("2.68")


def test_percentage_of_zero_base():
    assert percentage_of(Decimal("10"), Decimal("0")) == 0


def test_percentage_rounds_ratio_before_scaling():
    # 1/3 -> 0.3333 -> 33.33
    assert percentage_of(Decimal("1"), Decimal("3")) == Decimal("33.33")


def test_value_holding_gain():
    valued = value_holding(_holding())
    assert valued.total_value == Decimal("1500")
    assert valued.total_cost == Decimal("1000")
    assert valued.gain_loss == Decimal("500")
    assert valued.gain_loss_percentage == Decimal("50")
    assert valued.ticker_symbol == "AAPL"


def test_value_holding_loss():
    valued = value_holding(_holding(quantity="4", purchase="50", current="40"))
    assert valued.gain_loss == Decimal("-40")
    assert valued.gain_loss_percentage == Decimal("-20")


def test_unpriced_holding_is_worth_zero():
    valued = value_holding(_holding(current=None))
    assert valued.total_value == 0
    assert valued.gain_loss == Decimal("-1000")
    assert valued.gain_loss_percentage == Decimal("-100")


def test_summarize_totals():
    summary = summarize(
        value_holdings(
            [
                _holding("AAPL", "10", "100", "150"),
                _holding("MSFT", "2", "350", "300"),
            ]
        )
    )
    assert summary.total_value == Decimal("2100")
    assert summary.total_cost == Decimal("1700")
    assert summary.total_gain_loss == Decimal("400")
    assert summary.total_gain_loss_percentage == Decimal("23.53")
    assert summary.holding_count == 2


def test_summarize_empty():
    summary = summarize([])
    assert summary.total_value == 0
    assert summary.total_cost == 0
    assert summary.total_gain_loss_percentage == 0
    assert summary.holding_count == 0


def test_ten_percent_gain_scenario():
    valued = value_holding(_holding(quantity="10", purchase="100", current="110"))
    assert valued.gain_loss == Decimal("100")
    assert valued.gain_loss_percentage == Decimal("10.0000")
    assert str(valued.gain_loss_percentage) == "10.0000"


def test_summarize_is_order_independent():
    holdings = [
        _holding("AAPL", "10", "100", "150"),
        _holding("MSFT", "2.5", "350.25", "300.10"),
        _holding("GOOGL", "7", "99.99", None),
        _holding("IBM", "0.333", "168.01", "169.50"),
    ]
    baseline = summarize(value_holdings(holdings))
    for shuffled in (holdings[::-1], holdings[1:] + holdings[:1], holdings[2:] + holdings[:2]):
        assert summarize(value_holdings(shuffled)) == baseline
