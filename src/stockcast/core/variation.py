
"""
Seeded variation engine.

Turns a calendar day, symbol and sector (plus optional recent-change
history) into a deterministic multiplicative daily price factor, where
``1.0`` means "no change".  Layers, in order:

  1. **Individual move** - seeded on (day, symbol), in [-2 %, +2 %].
  2. **Sector correlation** - seeded on (day, sector) and shared by every
     symbol in the sector; blended 60/40 with the individual move.
  3. **Volatility** - sector base volatility × per-symbol factor.
  4. **Long-term bias and clamp** - +0.02 %, then clamped to ±10 %.
  5. **Trend persistence, market sentiment, intraday noise** - applied
     multiplicatively by ``enhanced_daily_variation``.

Every function is pure given its explicit arguments; the only implicit
input is the wall clock when ``now`` / ``calendar_day`` are omitted.
"""
from datetime import date, datetime
from typing import Optional, Sequence

from src.stockcast.core import constants as c
from src.stockcast.core.seeding import DayLike, daily_seed, seeded_unit_random
from src.stockcast.data.schemas import VariationContext


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


def _unit(calendar_day: DayLike, discriminator: Optional[str] = None) -> float:
    return seeded_unit_random(daily_seed(calendar_day, discriminator))


def sector_correlation(sector: str, calendar_day: DayLike) -> float:
    """Shared daily nudge for a sector, in [-0.015, 0.015]."""
    return c.SECTOR_MOVE_MIN + _unit(calendar_day, sector) * c.SECTOR_MOVE_SPAN


def volatility_multiplier(symbol: str, sector: str, calendar_day: DayLike) -> float:
    """Sector base volatility scaled by a per-symbol factor in [0.8, 1.2]."""
    base = c.SECTOR_VOLATILITY.get(sector, c.DEFAULT_VOLATILITY)
    stock_variation = (
        c.SYMBOL_VOLATILITY_MIN + _unit(calendar_day, symbol) * c.SYMBOL_VOLATILITY_SPAN
    )
    return base * stock_variation


def trend_persistence(recent_changes: Optional[Sequence[float]]) -> float:
    """Small nudge in the direction of the recent trend.

    Args:
        recent_changes: Recent fractional daily changes (e.g. ``0.01`` for
                        +1 %).  Fewer than three values carry no signal.

    Returns:
        ``0.3 × mean(recent_changes)`` clamped to [-0.003, 0.003], or exactly
        ``0.0`` when there is not enough history.
    """
    if not recent_changes or len(recent_changes) < c.TREND_MIN_HISTORY:
        return 0.0

    avg_change = sum(recent_changes) / len(recent_changes)
    return _clamp(avg_change * c.TREND_SCALE, c.TREND_LIMIT)


def market_sentiment(calendar_day: DayLike) -> float:
    """Market-wide nudge shared by all symbols, in [-0.01, 0.01]."""
    return c.SENTIMENT_MIN + _unit(calendar_day, c.MARKET_DISCRIMINATOR) * c.SENTIMENT_SPAN


def intraday_variation(minutes_of_day: int, calendar_day: Optional[DayLike] = None) -> float:
    """Intraday multiplier for a given minute of the trading day.

    Outside 09:30-16:00 the multiplier is exactly ``1.0``.  Inside, a seeded
    change in [-0.2 %, +0.2 %] is scaled up during the first and last half
    hour of the session.

    Args:
        minutes_of_day: Minutes past local midnight.
        calendar_day: Day used for seeding; defaults to today.
    """
    if minutes_of_day < c.MARKET_OPEN_MINUTES or minutes_of_day > c.MARKET_CLOSE_MINUTES:
        return 1.0

    minutes_since_open = minutes_of_day - c.MARKET_OPEN_MINUTES
    minutes_until_close = c.MARKET_CLOSE_MINUTES - minutes_of_day

    volatility_factor = 1.0
    if minutes_since_open < c.EDGE_WINDOW_MINUTES:
        volatility_factor = c.OPENING_VOLATILITY
    elif minutes_until_close < c.EDGE_WINDOW_MINUTES:
        volatility_factor = c.CLOSING_VOLATILITY

    day = calendar_day if calendar_day is not None else date.today()
    unit = seeded_unit_random(daily_seed(day) + minutes_of_day)
    change = (c.INTRADAY_MIN + unit * c.INTRADAY_SPAN) * volatility_factor

    return 1 + change


def is_market_hours(now: Optional[datetime] = None) -> bool:
    """Coarse weekday 09:00-16:00 gate on the local clock.

    No exchange timezone conversion is done: a caller outside US Eastern
    time gets its own local hours.
    """
    now = now or datetime.now()

    # Saturday (5) / Sunday (6)
    if now.weekday() >= 5:
        return False

    if now.hour < c.MARKET_OPEN_HOUR or now.hour >= c.MARKET_CLOSE_HOUR:
        return False

    return True


def daily_variation(
    calendar_day: DayLike,
    symbol: Optional[str] = None,
    sector: Optional[str] = None,
) -> float:
    """Deterministic daily multiplier in [0.90, 1.10].

    Args:
        calendar_day: Day to simulate.
        symbol: Instrument symbol; seeds the individual move.
        sector: Sector name; enables sector correlation and, together with
                *symbol*, the volatility scaling.

    Returns:
        ``1 + variation`` (e.g. ``0.98`` for a 2 % drop).
    """
    variation = c.BASE_MOVE_MIN + _unit(calendar_day, symbol) * c.BASE_MOVE_SPAN

    if sector:
        sector_move = sector_correlation(sector, calendar_day)
        variation = variation * c.INDIVIDUAL_WEIGHT + sector_move * c.SECTOR_WEIGHT

    if symbol and sector:
        variation *= volatility_multiplier(symbol, sector, calendar_day)

    variation += c.LONG_TERM_BIAS
    variation = _clamp(variation, c.DAILY_LIMIT)

    return 1 + variation


def enhanced_daily_variation(
    calendar_day: DayLike,
    symbol: str,
    sector: str,
    recent_changes: Optional[Sequence[float]] = None,
    now: Optional[datetime] = None,
) -> float:
    """Daily multiplier with trend, sentiment and intraday layers.

    Each layer multiplies the running multiplier, so a neutral layer
    (``0`` delta or ``1.0`` factor) leaves it untouched.

    Args:
        calendar_day: Day to simulate.
        symbol: Instrument symbol.
        sector: Sector name.
        recent_changes: Optional recent fractional changes, oldest first.
        now: Clock reading for the intraday layer; defaults to the current
             local time.
    """
    variation = daily_variation(calendar_day, symbol, sector)

    if recent_changes:
        variation *= 1 + trend_persistence(recent_changes)

    variation *= 1 + market_sentiment(calendar_day)

    now = now or datetime.now()
    if is_market_hours(now):
        variation *= intraday_variation(now.hour * 60 + now.minute, calendar_day)

    return variation


def compute_daily_variation(
    context: VariationContext,
    now: Optional[datetime] = None,
) -> float:
    """Entry point used by simulated-quote generators.

    Uses the full layered model when both symbol and sector are known and
    the plain daily variation otherwise.
    """
    if context.symbol and context.sector:
        return enhanced_daily_variation(
            context.calendar_day,
            context.symbol,
            context.sector,
            recent_changes=context.recent_changes,
            now=now,
        )
    return daily_variation(context.calendar_day, context.symbol, context.sector)
