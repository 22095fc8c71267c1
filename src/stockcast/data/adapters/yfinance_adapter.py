"""
YFinance Market Data Adapter.

Fetches quotes, daily history, company profiles and symbol search results
via the yfinance library and normalises them into the internal schemas.
All yfinance-specific details (``fast_info``, ``info``, ``history()``,
``Search``) are confined here; the rest of the codebase depends only on
``MarketDataProvider``.
"""
from datetime import date, timedelta
from typing import List, Optional

import pandas as pd
import yfinance as yf
from loguru import logger

from src.stockcast.data.base import MarketDataError, MarketDataProvider
from src.stockcast.data.schemas import (
    CompanyProfile,
    HistoricalSeries,
    Quote,
    SearchResult,
)

# Yahoo exchange codes for US listings.
US_EXCHANGES = {"NMS", "NYQ", "NGM", "NCM", "ASE", "PCX", "BTS", "NAS", "NYS"}
MAX_SEARCH_RESULTS = 10


class YFinanceAdapter(MarketDataProvider):
    """Concrete MarketDataProvider backed by Yahoo Finance."""

    def __init__(self, proxy: Optional[str] = None):
        """
        Args:
            proxy: Optional HTTP/SOCKS proxy URL for regions with restricted
                   access to Yahoo Finance.
        """
        self.proxy = proxy
        if proxy:
            yf.set_config(proxy=proxy)

    def fetch_quote(self, symbol: str) -> Quote:
        logger.info(f"Fetching real-time quote for {symbol} | Proxy: {self.proxy}")

        try:
            fast_info = yf.Ticker(symbol).fast_info
            current_price = float(fast_info.last_price)
            previous_close = float(fast_info.previous_close)
            day_high = float(fast_info.day_high)
            day_low = float(fast_info.day_low)
            day_open = float(fast_info.open)
        except Exception as e:
            logger.error(f"YFinance quote failure for {symbol}: {e}")
            raise MarketDataError(f"Quote unavailable for {symbol}") from e

        if pd.isna(current_price) or current_price <= 0:
            logger.error(f"Invalid price data for {symbol} - Price: {current_price}")
            raise MarketDataError(f"Invalid price for {symbol}: {current_price}")

        change = current_price - previous_close
        change_percent = (change / previous_close) * 100 if previous_close else 0.0

        logger.success(f"Fetched quote for {symbol} - Price: ${current_price:.2f}")
        return Quote(
            current_price=current_price,
            previous_close=previous_close,
            change=change,
            change_percent=change_percent,
            day_high=day_high,
            day_low=day_low,
            day_open=day_open,
        )

    def fetch_history(self, symbol: str, days_back: int = 30) -> HistoricalSeries:
        """Download daily bars and keep the most recent *days_back* rows."""
        # Calendar window wide enough to cover weekends and holidays.
        start_date = date.today() - timedelta(days=days_back * 2 + 7)
        logger.info(f"Fetching historical data for {symbol} ({days_back} days)")

        try:
            df = yf.Ticker(symbol).history(
                start=start_date,
                interval="1d",
                auto_adjust=False,
                actions=False,
            )
        except Exception as e:
            logger.error(f"YFinance history failure for {symbol}: {e}")
            raise MarketDataError(f"History unavailable for {symbol}") from e

        if df.empty:
            logger.warning(
                f"No data returned for {symbol}. Possible delisted symbol."
            )
            return HistoricalSeries(status="no_data")

        df = df.dropna(subset=["Close"]).tail(days_back)
        series = self._to_series(df)

        logger.success(f"Fetched {len(series.closes)} historical points for {symbol}")
        return series

    @staticmethod
    def _to_series(df: pd.DataFrame) -> HistoricalSeries:
        """Flatten a yfinance OHLCV frame into parallel lists."""
        return HistoricalSeries(
            status="ok",
            timestamps=[int(ts.timestamp()) for ts in df.index],
            opens=df["Open"].astype(float).tolist(),
            highs=df["High"].astype(float).tolist(),
            lows=df["Low"].astype(float).tolist(),
            closes=df["Close"].astype(float).tolist(),
            volumes=df["Volume"].astype(float).tolist(),
        )

    def fetch_profile(self, symbol: str) -> Optional[CompanyProfile]:
        logger.info(f"Fetching company profile for {symbol}")

        try:
            info = yf.Ticker(symbol).info
        except Exception as e:
            logger.warning(f"YFinance profile failure for {symbol}: {e}")
            return None

        name = info.get("longName") or info.get("shortName")
        if not name:
            logger.warning(f"Invalid profile data for {symbol}")
            return None

        return CompanyProfile(
            name=name,
            ticker=info.get("symbol", symbol),
            country=info.get("country"),
            currency=info.get("currency"),
            exchange=info.get("exchange"),
            industry=info.get("industry"),
        )

    def search(self, query: str) -> List[SearchResult]:
        if not query or not query.strip():
            return []

        logger.info(f"Searching stocks with query: {query}")

        try:
            quotes = yf.Search(query, max_results=MAX_SEARCH_RESULTS * 2).quotes
        except Exception as e:
            logger.error(f"YFinance search failure: {e}")
            raise MarketDataError(f"Search failed for {query!r}") from e

        results = [
            SearchResult(
                symbol=item["symbol"],
                description=item.get("longname") or item.get("shortname") or item["symbol"],
                type="Equity",
            )
            for item in quotes
            if item.get("quoteType") == "EQUITY" and item.get("exchange") in US_EXCHANGES
        ][:MAX_SEARCH_RESULTS]

        logger.success(f"Found {len(results)} US stocks matching: {query}")
        return results
