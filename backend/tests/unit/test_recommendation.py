"""Tests for recommendation selection."""

from decimal import Decimal

from app.services.insights_service import (
    SUGGESTED_SYMBOLS,
    RecommendationCategory,
    RecommendationPriority,
    recommend,
)


def test_low_score_recommends_diversification():
    rec = recommend(Decimal("69.99"), holding_count=12)
    assert rec.category == RecommendationCategory.DIVERSIFICATION
    assert rec.priority == RecommendationPriority.HIGH
    assert rec.suggested_symbols == list(SUGGESTED_SYMBOLS[RecommendationCategory.DIVERSIFICATION])


def test_good_score_with_few_holdings_recommends_expansion():
    rec = recommend(Decimal("70"), holding_count=4)
    assert rec.category == RecommendationCategory.EXPANSION
    assert rec.priority == RecommendationPriority.MEDIUM
    assert "SPY" in rec.suggested_symbols


def test_good_score_with_enough_holdings_recommends_optimization():
    rec = recommend(Decimal("85"), holding_count=5)
    assert rec.category == RecommendationCategory.OPTIMIZATION
    assert rec.priority == RecommendationPriority.LOW
    assert "VXUS" in rec.suggested_symbols


def test_each_category_suggests_eight_symbols():
    for symbols in SUGGESTED_SYMBOLS.values():
        assert len(symbols) == 8
        assert len(set(symbols)) == 8


def test_suggestions_are_not_shared_state():
    rec = recommend(Decimal("0"), holding_count=0)
    rec.suggested_symbols.append("XXX")
    assert "XXX" not in recommend(Decimal("0"), holding_count=0).suggested_symbols


def test_every_score_and_count_maps_to_a_category():
    expected_priority = {
        RecommendationCategory.DIVERSIFICATION: RecommendationPriority.HIGH,
        RecommendationCategory.EXPANSION: RecommendationPriority.MEDIUM,
        RecommendationCategory.OPTIMIZATION: RecommendationPriority.LOW,
    }
    for score in range(0, 101):
        for holding_count in range(0, 13):
            rec = recommend(Decimal(score), holding_count)
            assert rec.category in expected_priority
            assert rec.priority == expected_priority[rec.category]
            assert rec.suggested_symbols == list(SUGGESTED_SYMBOLS[rec.category])
            if score < 70:
                assert rec.category == RecommendationCategory.DIVERSIFICATION
            elif holding_count < 5:
                assert rec.category == RecommendationCategory.EXPANSION
            else:
                assert rec.category == RecommendationCategory.OPTIMIZATION
