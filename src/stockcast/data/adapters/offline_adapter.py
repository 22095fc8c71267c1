"""
Offline market data adapter.

Never reaches the network.  Every live-data call fails, so the stock
service always serves simulated prices.  Useful for demos and for running
the CLI without connectivity.
"""
from typing import List, Optional

from loguru import logger

from src.stockcast.data.base import MarketDataError, MarketDataProvider
from src.stockcast.data.schemas import (
    CompanyProfile,
    HistoricalSeries,
    Quote,
    SearchResult,
)


class OfflineAdapter(MarketDataProvider):
    """Provider that reports no live data for any symbol."""

    def fetch_quote(self, symbol: str) -> Quote:
        logger.debug(f"Offline mode: no quote for {symbol}")
        raise MarketDataError("Offline mode: live quotes disabled")

    def fetch_history(self, symbol: str, days_back: int = 30) -> HistoricalSeries:
        return HistoricalSeries(status="no_data")

    def fetch_profile(self, symbol: str) -> Optional[CompanyProfile]:
        return None

    def search(self, query: str) -> List[SearchResult]:
        return []
