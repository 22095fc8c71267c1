"""
Static tables and tuning constants for the synthetic market-data generator.

Everything here is read-only.  The values are product choices (plausible
looking movement), not calibrated estimates.
"""
from typing import Dict

# Base volatility per sector.  Unknown sectors fall back to DEFAULT_VOLATILITY.
SECTOR_VOLATILITY: Dict[str, float] = {
    "Technology": 1.3,
    "Healthcare": 1.1,
    "Financial Services": 0.9,
    "Consumer Defensive": 0.7,
    "Consumer Cyclical": 1.0,
    "Energy": 1.4,
    "Industrials": 0.9,
    "Communication Services": 1.2,
    "Real Estate": 0.8,
    "Automotive": 1.5,
}
DEFAULT_VOLATILITY = 1.0

# Per-symbol scaling applied on top of the sector base.
SYMBOL_VOLATILITY_MIN = 0.8
SYMBOL_VOLATILITY_SPAN = 0.4

# Individual daily move band: [-2 %, +2 %].
BASE_MOVE_MIN = -0.02
BASE_MOVE_SPAN = 0.04

# Shared sector nudge band: [-1.5 %, +1.5 %].
SECTOR_MOVE_MIN = -0.015
SECTOR_MOVE_SPAN = 0.03
INDIVIDUAL_WEIGHT = 0.6
SECTOR_WEIGHT = 0.4

# Market-wide sentiment band: [-1 %, +1 %].
SENTIMENT_MIN = -0.01
SENTIMENT_SPAN = 0.02
MARKET_DISCRIMINATOR = "MARKET"

# Trend persistence.
TREND_MIN_HISTORY = 3
TREND_SCALE = 0.3
TREND_LIMIT = 0.003

# Long-run upward drift (0.02 % per day) and the hard daily clamp.
LONG_TERM_BIAS = 0.0002
DAILY_LIMIT = 0.10

# Trading window in minutes past midnight (09:30 - 16:00).
MARKET_OPEN_MINUTES = 570
MARKET_CLOSE_MINUTES = 960
EDGE_WINDOW_MINUTES = 30
OPENING_VOLATILITY = 1.5
CLOSING_VOLATILITY = 1.3
INTRADAY_MIN = -0.002
INTRADAY_SPAN = 0.004

# Coarse market-hours gate (hour granularity, local clock).
MARKET_OPEN_HOUR = 9
MARKET_CLOSE_HOUR = 16

# Path generation.
FORWARD_NOISE_SPAN = 0.04
TREND_BOOST_MAX = 0.5
UP_DAY_TREND = 0.02
DOWN_DAY_TREND = -0.01
HISTORY_DAYS = 30
HISTORY_START_RATIO = 0.9
HISTORY_STEP_SPAN = 0.05
HISTORY_STEP_CENTER = 0.48
PRICE_DECIMALS = 2
MIN_PRICE = 10 ** -PRICE_DECIMALS
