
"""
Abstract base class for market data providers.

Every concrete adapter (Yahoo Finance, an offline stub, a caching wrapper)
implements the interface defined here.  Adapters raise ``MarketDataError``
for anything the caller should treat as "no live data"; the stock service
catches it and falls back to simulated prices.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from loguru import logger

from src.stockcast.data.schemas import (
    CompanyProfile,
    HistoricalSeries,
    Quote,
    SearchResult,
)

PROBE_SYMBOL = "AAPL"


class MarketDataError(Exception):
    """Raised when a provider cannot deliver usable data."""


class MarketDataProvider(ABC):
    """Contract that all market data adapters must satisfy."""

    @abstractmethod
    def fetch_quote(self, symbol: str) -> Quote:
        """Return the current-day quote for *symbol*.

        Raises:
            MarketDataError: On transport failure, an unknown symbol or a
                             non-positive price.
        """

    @abstractmethod
    def fetch_history(self, symbol: str, days_back: int = 30) -> HistoricalSeries:
        """Return up to *days_back* daily bars, oldest first.

        A symbol without data yields ``status="no_data"`` rather than an
        exception; transport failures still raise ``MarketDataError``.
        """

    @abstractmethod
    def fetch_profile(self, symbol: str) -> Optional[CompanyProfile]:
        """Return company metadata, or ``None`` if unavailable."""

    @abstractmethod
    def search(self, query: str) -> List[SearchResult]:
        """Return at most 10 US equities matching *query*."""

    def check_availability(self) -> bool:
        """Probe the provider with a well-known symbol."""
        try:
            quote = self.fetch_quote(PROBE_SYMBOL)
        except MarketDataError as e:
            logger.warning(f"Provider unavailable: {e}")
            return False

        logger.info(
            f"Provider is working - {PROBE_SYMBOL} price: ${quote.current_price:.2f}"
        )
        return True
