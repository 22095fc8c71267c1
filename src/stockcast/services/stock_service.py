
"""
Stock service: live data first, simulated fallback.

Composes the market-data provider, the synthetic generator and the stores
into the operations the application exposes:

  - snapshot of a single stock (quote, 31-day history, 7-day forecast),
  - the default universe and a user's watchlist (fanned out concurrently),
  - symbol search,
  - custom-horizon forecasts, persisted in the background.

Provider calls are blocking and run in worker threads via
``asyncio.to_thread``; everything touching the random generator stays on
the event-loop thread.  Any provider failure degrades to simulated data
instead of propagating.
"""
import asyncio
import math
from datetime import date, datetime
from typing import Callable, List, Optional, Union

import numpy as np
from loguru import logger

from src.stockcast.core.paths import (
    generate_price_path,
    reconstruct_historical_path,
    select_trend,
)
from src.stockcast.core.seeding import daily_seed
from src.stockcast.core.variation import compute_daily_variation
from src.stockcast.data.base import MarketDataProvider
from src.stockcast.data.schemas import (
    ApiStatus,
    DynamicPrediction,
    PricePath,
    StockData,
    StockProfile,
    VariationContext,
    WatchlistItem,
)
from src.stockcast.services.persistence import PredictionPersister
from src.stockcast.storage.base import WatchlistStore

FORECAST_DAYS = 7
TREND_WINDOW = 5
SIMULATED_CONFIDENCE = 0.65
REAL_CONFIDENCE = 0.85
PERSISTED_CONFIDENCE = 0.75
WATCHLIST_DEFAULT_SIZE = 5
MAX_SEARCH_RESULTS = 10
UNKNOWN_SECTOR = "Unknown"

# Base price range for symbols outside the local universe: [150, 350).
UNKNOWN_BASE_MIN = 150.0
UNKNOWN_BASE_SPAN = 200.0


class StockService:
    """Application-facing stock operations."""

    def __init__(
        self,
        provider: MarketDataProvider,
        universe: List[StockProfile],
        persister: Optional[PredictionPersister] = None,
        watchlist_store: Optional[WatchlistStore] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            provider: Live data source (usually a caching YFinance adapter).
            universe: Default stocks shown when nothing else is requested.
            persister: Background forecast writer; forecasts are not saved
                       when omitted.
            watchlist_store: Per-user watchlists; every user is treated as
                             having an empty list when omitted.
            rng: Random source for the unseeded walks.
            clock: Local wall clock.
        """
        self.provider = provider
        self.universe = universe
        self.persister = persister
        self.watchlist_store = watchlist_store
        self.rng = rng or np.random.default_rng()
        self._clock = clock

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_profile(self, symbol: str) -> Optional[StockProfile]:
        return next((p for p in self.universe if p.symbol == symbol), None)

    def _profile_for(self, symbol: str, name: Optional[str] = None) -> StockProfile:
        """Universe entry for *symbol*, or a placeholder with a random base price."""
        profile = self._find_profile(symbol)
        if profile is not None:
            return profile

        return StockProfile(
            symbol=symbol,
            name=name or symbol,
            sector=UNKNOWN_SECTOR,
            base_price=UNKNOWN_BASE_MIN + self.rng.random() * UNKNOWN_BASE_SPAN,
        )

    def _persist_final_point(self, symbol: str, path: PricePath) -> None:
        if self.persister is None or not path.points:
            return
        final = path.points[-1]
        self.persister.submit(symbol, final.date, final.price, PERSISTED_CONFIDENCE)

    @staticmethod
    def _recent_changes(path: PricePath) -> List[float]:
        """Fractional day-over-day changes of the last few points."""
        changes = path.to_frame()["price"].pct_change().dropna()
        return changes.tail(TREND_WINDOW).tolist()

    # ------------------------------------------------------------------
    # Single stock
    # ------------------------------------------------------------------

    def generate_simulated_data(self, profile: StockProfile) -> StockData:
        """Build a fully simulated snapshot for *profile*.

        The current price is the base price moved by the seeded daily
        variation, so every caller sees the same simulated price for a
        symbol on a given day (outside market hours; inside, the intraday
        layer also varies by minute).  Only the forecast path differs
        between calls.
        """
        logger.info(f"Generating simulated data for: {profile.symbol}")

        now = self._clock()
        today = now.date()

        # History is seeded per (day, symbol) so the trend input, and with it
        # the current price, is stable for the whole day.
        history_rng = np.random.default_rng(daily_seed(today, profile.symbol))
        historical = reconstruct_historical_path(
            profile.base_price, rng=history_rng, today=today
        )

        context = VariationContext(
            calendar_day=today,
            symbol=profile.symbol,
            sector=profile.sector,
            recent_changes=self._recent_changes(historical),
        )
        multiplier = compute_daily_variation(context, now=now)

        current_price = profile.base_price * multiplier
        change = current_price - profile.base_price
        change_percent = (multiplier - 1) * 100

        predictions = generate_price_path(
            historical.last_price,
            FORECAST_DAYS,
            select_trend(change_percent),
            rng=self.rng,
            today=today,
        )
        predicted_price = predictions.last_price
        predicted_change = predicted_price - current_price

        logger.success(
            f"Generated simulated data for {profile.symbol} - Price: {current_price:.2f}"
        )
        return StockData(
            symbol=profile.symbol,
            name=profile.name,
            current_price=current_price,
            previous_close=profile.base_price,
            change=change,
            change_percent=change_percent,
            predicted_price=predicted_price,
            predicted_change=predicted_change,
            predicted_change_percent=(predicted_change / current_price) * 100,
            confidence=SIMULATED_CONFIDENCE,
            historical_data=historical.points,
            prediction_data=predictions.points,
            is_real_data=False,
        )

    async def fetch_real_stock_data(self, profile: StockProfile) -> Optional[StockData]:
        """Build a snapshot from live data, or ``None`` if any piece is missing."""
        symbol = profile.symbol
        logger.info(f"Attempting to fetch real stock data for: {symbol}")

        try:
            quote = await asyncio.to_thread(self.provider.fetch_quote, symbol)
            history = await asyncio.to_thread(self.provider.fetch_history, symbol)

            if not history.is_ok:
                logger.warning(f"Failed to fetch historical data for {symbol}")
                return None

            company = await asyncio.to_thread(self.provider.fetch_profile, symbol)

            last_price = quote.current_price
            predictions = generate_price_path(
                last_price,
                FORECAST_DAYS,
                select_trend(quote.change_percent),
                rng=self.rng,
                today=self._clock().date(),
            )
        except Exception as e:
            logger.warning(f"Live data unavailable for {symbol}: {e}")
            return None

        self._persist_final_point(symbol, predictions)

        predicted_price = predictions.last_price
        predicted_change = predicted_price - last_price

        logger.success(f"Fetched real data for {symbol} - Price: {last_price:.2f}")
        return StockData(
            symbol=symbol,
            name=company.name if company else profile.name,
            current_price=last_price,
            previous_close=quote.previous_close,
            change=quote.change,
            change_percent=quote.change_percent,
            predicted_price=predicted_price,
            predicted_change=predicted_change,
            predicted_change_percent=(predicted_change / last_price) * 100,
            confidence=REAL_CONFIDENCE,
            historical_data=history.to_price_points(),
            prediction_data=predictions.points,
            is_real_data=True,
        )

    async def generate_stock_data(self, profile: StockProfile) -> StockData:
        """Live snapshot when available, simulated otherwise."""
        real_data = await self.fetch_real_stock_data(profile)
        if real_data is not None:
            return real_data

        logger.info(f"Using simulated data for: {profile.symbol}")
        return self.generate_simulated_data(profile)

    async def get_stock_by_symbol(self, symbol: str) -> Optional[StockData]:
        if not symbol:
            logger.error("No symbol provided to get_stock_by_symbol")
            return None

        profile = self._profile_for(symbol)
        if profile.sector == UNKNOWN_SECTOR:
            logger.warning(f"{symbol} not in universe, generating with defaults")
        return await self.generate_stock_data(profile)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def generate_default_stocks(self) -> List[StockData]:
        logger.info("Generating stock data for the default universe...")
        stocks = await asyncio.gather(
            *(self.generate_stock_data(p) for p in self.universe)
        )
        logger.success(f"Generated {len(stocks)} stocks")
        return list(stocks)

    async def get_watchlist(self, user_id: Optional[str] = None) -> List[WatchlistItem]:
        """Snapshot of the user's watchlist, or of the first default stocks."""
        symbols: List[str] = []
        if self.watchlist_store is not None and user_id:
            symbols = self.watchlist_store.list_symbols(user_id)

        if not symbols:
            logger.warning("Watchlist is empty, using default stocks")
            stocks = await self.generate_default_stocks()
            return [WatchlistItem.from_stock(s) for s in stocks[:WATCHLIST_DEFAULT_SIZE]]

        stocks = await asyncio.gather(
            *(self.generate_stock_data(self._profile_for(s)) for s in symbols)
        )
        return [WatchlistItem.from_stock(s) for s in stocks]

    def add_to_watchlist(self, user_id: Optional[str], symbol: str) -> bool:
        if self.watchlist_store is None or not user_id:
            logger.warning("User not authenticated")
            return False
        return self.watchlist_store.add(user_id, symbol)

    def remove_from_watchlist(self, user_id: Optional[str], symbol: str) -> bool:
        if self.watchlist_store is None or not user_id:
            logger.warning("User not authenticated")
            return False
        return self.watchlist_store.remove(user_id, symbol)

    async def search_stocks(self, query: str) -> List[WatchlistItem]:
        """Provider search first; local universe substring match as fallback."""
        if not query or not query.strip():
            return []

        logger.info(f"Searching stocks: {query}")
        try:
            results = await asyncio.to_thread(self.provider.search, query)
        except Exception as e:
            logger.warning(f"Provider search failed: {e}")
            results = []

        if results:
            profiles = [
                self._profile_for(r.symbol, name=r.description)
                for r in results[:MAX_SEARCH_RESULTS]
            ]
        else:
            logger.info("No provider results, searching local stocks")
            needle = query.lower()
            profiles = [
                p for p in self.universe
                if needle in p.symbol.lower() or needle in p.name.lower()
            ]

        stocks = await asyncio.gather(*(self.generate_stock_data(p) for p in profiles))
        return [WatchlistItem.from_stock(s) for s in stocks]

    # ------------------------------------------------------------------
    # Forecasts
    # ------------------------------------------------------------------

    def days_until(self, target: Union[date, datetime]) -> int:
        """Whole days from now to *target*, rounding partial days up."""
        now = self._clock()
        if isinstance(target, datetime):
            return math.ceil((target - now).total_seconds() / 86400)
        return (target - now.date()).days

    async def generate_dynamic_prediction(
        self,
        symbol: str,
        target: Union[date, datetime],
    ) -> DynamicPrediction:
        """Forecast *symbol* up to *target*.

        Raises:
            ValueError: If *target* is not in the future.
        """
        days_ahead = self.days_until(target)
        if days_ahead <= 0:
            logger.error("Target date must be in the future")
            raise ValueError("Target date must be in the future")

        logger.info(f"Generating prediction for {symbol}, {days_ahead} days ahead")
        stock = await self.get_stock_by_symbol(symbol)
        if stock is None:
            raise ValueError(f"Could not get stock data for {symbol!r}")

        predictions = generate_price_path(
            stock.current_price,
            days_ahead,
            select_trend(stock.change_percent),
            rng=self.rng,
            today=self._clock().date(),
        )
        self._persist_final_point(symbol, predictions)

        logger.success(f"Prediction generated for {symbol}")
        return DynamicPrediction(
            predicted_price=predictions.last_price,
            confidence=PERSISTED_CONFIDENCE,
            prediction_data=predictions.points,
        )

    # ------------------------------------------------------------------
    # Descriptions & status
    # ------------------------------------------------------------------

    async def get_company_description(self, symbol: str) -> str:
        try:
            company = await asyncio.to_thread(self.provider.fetch_profile, symbol)
        except Exception as e:
            logger.warning(f"Error getting company description: {e}")
            company = None

        if company is not None:
            return (
                f"{company.name} is a leading company in the "
                f"{company.industry or 'industry'} sector. The company is "
                f"headquartered in {company.country or 'the United States'} and "
                f"trades on the {company.exchange or 'stock exchange'}."
            )

        profile = self._find_profile(symbol)
        if profile is not None:
            return f"{profile.name} is a leading company in the {profile.sector} sector."

        return f"{symbol} is a publicly traded company."

    async def check_api_status(self) -> bool:
        is_available = await asyncio.to_thread(self.provider.check_availability)
        logger.info(f"API Status: {'Available' if is_available else 'Unavailable'}")
        return is_available

    async def get_detailed_api_status(self) -> ApiStatus:
        if await self.check_api_status():
            return ApiStatus(
                is_available=True,
                message="Market data provider is reachable",
                suggestion="Real-time stock data is available.",
            )

        return ApiStatus(
            is_available=False,
            message="Using simulated stock data",
            suggestion=(
                "Simulated data provides realistic stock movements "
                "for demonstration purposes."
            ),
        )
