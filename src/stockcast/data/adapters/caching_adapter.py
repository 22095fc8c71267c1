"""
Caching decorator for market data providers.

Wraps any ``MarketDataProvider`` and memoises successful responses in an
``ExpiringCache`` keyed by operation name and arguments.  Failures
(exceptions, ``no_data`` history, missing profiles, empty searches) are
never cached so the next call retries the upstream provider.
"""
from typing import List, Optional

from src.stockcast.data.base import MarketDataProvider
from src.stockcast.data.cache import ExpiringCache
from src.stockcast.data.schemas import (
    CompanyProfile,
    HistoricalSeries,
    Quote,
    SearchResult,
)


class CachingMarketDataProvider(MarketDataProvider):
    """Read-through cache in front of another provider."""

    def __init__(self, provider: MarketDataProvider, cache: ExpiringCache):
        self.provider = provider
        self.cache = cache

    def fetch_quote(self, symbol: str) -> Quote:
        key = f"quote_{symbol}"
        cached = self.cache.get(key)
        if cached is not None:
            return Quote.model_validate(cached)

        quote = self.provider.fetch_quote(symbol)
        self.cache.set(key, quote.model_dump(mode="json"))
        return quote

    def fetch_history(self, symbol: str, days_back: int = 30) -> HistoricalSeries:
        key = f"history_{symbol}_{days_back}"
        cached = self.cache.get(key)
        if cached is not None:
            return HistoricalSeries.model_validate(cached)

        series = self.provider.fetch_history(symbol, days_back)
        if series.is_ok:
            self.cache.set(key, series.model_dump(mode="json"))
        return series

    def fetch_profile(self, symbol: str) -> Optional[CompanyProfile]:
        key = f"profile_{symbol}"
        cached = self.cache.get(key)
        if cached is not None:
            return CompanyProfile.model_validate(cached)

        profile = self.provider.fetch_profile(symbol)
        if profile is not None:
            self.cache.set(key, profile.model_dump(mode="json"))
        return profile

    def search(self, query: str) -> List[SearchResult]:
        if not query or not query.strip():
            return []

        key = f"search_{query.lower()}"
        cached = self.cache.get(key)
        if cached is not None:
            return [SearchResult.model_validate(item) for item in cached]

        results = self.provider.search(query)
        if results:
            self.cache.set(key, [r.model_dump(mode="json") for r in results])
        return results
