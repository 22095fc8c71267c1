
"""
Price path generation.

Two random walks share one idea: compound a per-day factor onto a running
price and emit the rounded value for each calendar day.

  - **Forward path** - starts tomorrow, biased by a caller-chosen trend.
    Used as the headline forecast.
  - **Historical reconstruction** - 31 points ending today, starting from
    90 % of a nominal base price with a slight upward drift.  Cosmetic
    backdrop for a chart.

Neither walk is seeded by default: they only need to look plausible, not
replay.  Pass a seeded ``numpy.random.Generator`` to make them repeatable.
"""
from datetime import date, timedelta
from typing import Optional

import numpy as np

from src.stockcast.core import constants as c
from src.stockcast.data.schemas import PricePath, PricePoint


def _emitted(price: float) -> float:
    """Rounded price for an emitted point, floored at one cent."""
    return max(round(price, c.PRICE_DECIMALS), c.MIN_PRICE)


def select_trend(change_percent: float) -> float:
    """Forecast bias from the current day's change: +2 % on up days, -1 % otherwise."""
    return c.UP_DAY_TREND if change_percent > 0 else c.DOWN_DAY_TREND


def generate_forward_path(
    start_price: float,
    days_ahead: int,
    trend: float,
    rng: Optional[np.random.Generator] = None,
    today: Optional[date] = None,
) -> PricePath:
    """Simulate ``days_ahead`` daily prices starting tomorrow.

    Each step applies ``1 + trend * (1 + U[0, 0.5]) + U[-0.02, 0.02]`` to the
    running (unrounded) price.  Callers must ensure ``days_ahead > 0``.

    Args:
        start_price: Last known price.
        days_ahead: Number of future days to generate.
        trend: Directional bias per step, see ``select_trend``.
        rng: Random source; a fresh unseeded generator when omitted.
        today: Anchor day; defaults to ``date.today()``.

    Returns:
        A ``PricePath`` dated ``today + 1`` through ``today + days_ahead``.
    """
    rng = rng or np.random.default_rng()
    today = today or date.today()

    points = []
    current_price = start_price
    for i in range(1, days_ahead + 1):
        random_factor = (rng.random() - 0.5) * c.FORWARD_NOISE_SPAN
        trend_factor = trend * (1 + rng.random() * c.TREND_BOOST_MAX)
        current_price = current_price * (1 + trend_factor + random_factor)

        points.append(
            PricePoint(
                date=today + timedelta(days=i),
                price=_emitted(current_price),
            )
        )

    return PricePath(points=points)


def generate_price_path(
    start_price: float,
    days: int,
    trend: float,
    rng: Optional[np.random.Generator] = None,
    today: Optional[date] = None,
) -> PricePath:
    """Public entry point shared by the simulation and custom-horizon flows."""
    return generate_forward_path(start_price, days, trend, rng=rng, today=today)


def reconstruct_historical_path(
    base_price: float,
    days: int = c.HISTORY_DAYS,
    rng: Optional[np.random.Generator] = None,
    today: Optional[date] = None,
) -> PricePath:
    """Simulate the trailing ``days + 1`` daily prices ending today.

    The walk starts at 90 % of *base_price* and applies
    ``1 + (U[0, 1) - 0.48) * 0.05`` per day, drifting gently upward.
    """
    rng = rng or np.random.default_rng()
    today = today or date.today()

    points = []
    price = base_price * c.HISTORY_START_RATIO
    for i in range(days, -1, -1):
        price = price * (1 + (rng.random() - c.HISTORY_STEP_CENTER) * c.HISTORY_STEP_SPAN)
        points.append(
            PricePoint(
                date=today - timedelta(days=i),
                price=_emitted(price),
            )
        )

    return PricePath(points=points)
