"""
Deterministic seeding primitives.

A seed is derived from a calendar day plus an optional discriminator
(symbol, sector or a fixed tag such as ``"MARKET"``) with a classic
31-multiplier rolling hash wrapped to signed 32 bits.  The seed feeds a
sine-based transform that maps it into ``[0, 1)``.

The transform is not a statistically rigorous PRNG.  It is kept because
existing consumers rely on its exact numeric sequence; swapping in
splitmix/xorshift would change every simulated price.
"""
import math
from datetime import date, datetime
from typing import Optional, Union

DayLike = Union[date, datetime]

_UINT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _to_day(calendar_day: DayLike) -> date:
    if isinstance(calendar_day, datetime):
        return calendar_day.date()
    return calendar_day


def canonical_seed_string(calendar_day: DayLike, discriminator: Optional[str] = None) -> str:
    """Return ``YYYY-MM-DD`` followed by the discriminator (if any)."""
    return _to_day(calendar_day).isoformat() + (discriminator or "")


def hash32(text: str) -> int:
    """Signed 32-bit rolling hash: ``h = h * 31 + ord(ch)`` with wraparound."""
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & _UINT32_MASK
    if h & _INT32_SIGN:
        h -= 1 << 32
    return h


def daily_seed(calendar_day: DayLike, discriminator: Optional[str] = None) -> int:
    """Build the seed for a (day, discriminator) pair.

    Args:
        calendar_day: Day to seed on.  A ``datetime`` is reduced to its date.
        discriminator: Symbol, sector name or tag.  ``None`` and ``""`` are
                       equivalent.

    Returns:
        The absolute value of the signed 32-bit hash of the canonical string.
    """
    return abs(hash32(canonical_seed_string(calendar_day, discriminator)))


def seeded_unit_random(seed: int) -> float:
    """Map an integer seed to ``[0, 1)`` via ``frac(sin(seed) * 10000)``."""
    x = math.sin(seed) * 10000
    return x - math.floor(x)
