"""
test_variation.py
"""
from datetime import date, datetime, timedelta

import pytest

from src.stockcast.core.constants import SECTOR_VOLATILITY
from src.stockcast.core.seeding import daily_seed, seeded_unit_random
from src.stockcast.core.variation import (
    compute_daily_variation,
    daily_variation,
    enhanced_daily_variation,
    intraday_variation,
    is_market_hours,
    market_sentiment,
    sector_correlation,
    trend_persistence,
    volatility_multiplier,
)
from src.stockcast.data.schemas import VariationContext

DAY = date(2024, 1, 15)
SATURDAY_NOON = datetime(2024, 1, 13, 12, 0)
TUESDAY_TEN = datetime(2024, 1, 16, 10, 0)

SYMBOLS = ["AAPL", "MSFT", "TSLA", "JPM", "XOM", "ZZZZ"]
SECTORS = ["Technology", "Energy", "Automotive", "Real Estate", "Unknown", None]


def _days(n: int = 120):
    return [DAY + timedelta(days=i) for i in range(n)]


def _unit(day, discriminator=None):
    return seeded_unit_random(daily_seed(day, discriminator))


# ---------------------------------------------------------------------------
# Determinism & bounds
# ---------------------------------------------------------------------------

def test_daily_variation_is_deterministic():
    first = daily_variation(DAY, "AAPL", "Technology")
    assert all(daily_variation(DAY, "AAPL", "Technology") == first for _ in range(5))


def test_enhanced_variation_is_deterministic_for_fixed_now():
    args = (DAY, "AAPL", "Technology", [0.01, 0.02, -0.005])
    first = enhanced_daily_variation(*args, now=TUESDAY_TEN)
    assert enhanced_daily_variation(*args, now=TUESDAY_TEN) == first


def test_daily_variation_is_bounded():
    for day in _days():
        for symbol in SYMBOLS:
            for sector in SECTORS:
                assert 0.90 <= daily_variation(day, symbol, sector) <= 1.10


def test_sector_correlation_band_and_grouping():
    for day in _days():
        nudge = sector_correlation("Technology", day)
        assert -0.015 <= nudge <= 0.015
        assert sector_correlation("Technology", day) == nudge


def test_sector_peers_share_the_sector_component():
    # Blend with the sector nudge is the only shared term between peers.
    for symbol in ("AAPL", "MSFT"):
        individual = -0.02 + _unit(DAY, symbol) * 0.04
        blended = individual * 0.6 + sector_correlation("Technology", DAY) * 0.4
        expected = blended * volatility_multiplier(symbol, "Technology", DAY) + 0.0002
        assert daily_variation(DAY, symbol, "Technology") == pytest.approx(
            1 + max(-0.10, min(0.10, expected))
        )


def test_market_sentiment_band():
    for day in _days(365):
        assert -0.01 <= market_sentiment(day) <= 0.01


def test_market_sentiment_uses_market_tag():
    assert market_sentiment(DAY) == pytest.approx(-0.01 + _unit(DAY, "MARKET") * 0.02)


# ---------------------------------------------------------------------------
# Trend persistence
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("history", [None, [], [0.05], [0.05, -0.02]])
def test_trend_persistence_needs_three_values(history):
    assert trend_persistence(history) == 0.0


def test_trend_persistence_scales_mean():
    assert trend_persistence([0.001, 0.002, 0.003]) == pytest.approx(0.0006)


def test_trend_persistence_is_clamped():
    assert trend_persistence([0.1, 0.1, 0.1]) == 0.003
    assert trend_persistence([-0.1, -0.1, -0.1, -0.1]) == -0.003


# ---------------------------------------------------------------------------
# Volatility
# ---------------------------------------------------------------------------

def test_technology_uses_base_volatility_1_3():
    assert SECTOR_VOLATILITY["Technology"] == 1.3

    stock_factor = 0.8 + _unit(DAY, "AAPL") * 0.4
    assert volatility_multiplier("AAPL", "Technology", DAY) == pytest.approx(1.3 * stock_factor)


def test_unknown_sector_defaults_to_1_0():
    stock_factor = 0.8 + _unit(DAY, "AAPL") * 0.4
    assert volatility_multiplier("AAPL", "Basket Weaving", DAY) == pytest.approx(stock_factor)


def test_volatility_multiplier_range():
    for day in _days():
        m = volatility_multiplier("NVDA", "Energy", day)
        assert 1.4 * 0.8 <= m <= 1.4 * 1.2


def test_compute_daily_variation_applies_sector_volatility():
    def expected(sector_base):
        individual = -0.02 + _unit(DAY, "AAPL") * 0.04
        blended = individual * 0.6 + sector_correlation(sector, DAY) * 0.4
        stock_factor = 0.8 + _unit(DAY, "AAPL") * 0.4
        variation = blended * sector_base * stock_factor + 0.0002
        variation = max(-0.10, min(0.10, variation))
        return (1 + variation) * (1 + market_sentiment(DAY))

    for sector, base in (("Technology", 1.3), ("Not A Sector", 1.0)):
        ctx = VariationContext(calendar_day=DAY, symbol="AAPL", sector=sector)
        assert compute_daily_variation(ctx, now=SATURDAY_NOON) == pytest.approx(expected(base))


def test_compute_daily_variation_without_sector_is_plain_daily():
    ctx = VariationContext(calendar_day=DAY, symbol="AAPL")
    assert compute_daily_variation(ctx) == daily_variation(DAY, "AAPL")


# ---------------------------------------------------------------------------
# Market hours & intraday
# ---------------------------------------------------------------------------

def test_market_hours_weekend_is_closed():
    for hour in range(24):
        assert not is_market_hours(datetime(2024, 1, 13, hour, 0))
        assert not is_market_hours(datetime(2024, 1, 14, hour, 0))


def test_market_hours_boundaries():
    assert is_market_hours(datetime(2024, 1, 16, 9, 0))
    assert is_market_hours(datetime(2024, 1, 16, 15, 59))
    assert not is_market_hours(datetime(2024, 1, 16, 8, 59))
    assert not is_market_hours(datetime(2024, 1, 16, 16, 0))


@pytest.mark.parametrize("minutes", [0, 569, 961, 1439])
def test_intraday_is_neutral_outside_session(minutes):
    assert intraday_variation(minutes, DAY) == 1.0


def test_intraday_regular_session_band():
    for minutes in range(600, 930):
        assert 0.998 <= intraday_variation(minutes, DAY) <= 1.002


def test_intraday_opening_and_closing_scaling():
    r_open = seeded_unit_random(daily_seed(DAY) + 575)
    r_close = seeded_unit_random(daily_seed(DAY) + 950)

    assert intraday_variation(575, DAY) == pytest.approx(1 + (-0.002 + r_open * 0.004) * 1.5)
    assert intraday_variation(950, DAY) == pytest.approx(1 + (-0.002 + r_close * 0.004) * 1.3)


# ---------------------------------------------------------------------------
# Layering
# ---------------------------------------------------------------------------

def test_enhanced_variation_layers_multiplicatively_outside_hours():
    history = [0.004, 0.006, 0.005]
    expected = (
        daily_variation(DAY, "AAPL", "Technology")
        * (1 + trend_persistence(history))
        * (1 + market_sentiment(DAY))
    )
    got = enhanced_daily_variation(DAY, "AAPL", "Technology", history, now=SATURDAY_NOON)
    assert got == pytest.approx(expected)


def test_enhanced_variation_adds_intraday_during_hours():
    expected = (
        daily_variation(DAY, "AAPL", "Technology")
        * (1 + market_sentiment(DAY))
        * intraday_variation(600, DAY)
    )
    got = enhanced_daily_variation(DAY, "AAPL", "Technology", now=TUESDAY_TEN)
    assert got == pytest.approx(expected)
