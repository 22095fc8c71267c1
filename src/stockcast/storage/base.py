
"""
Abstract interfaces for persisted application state.

Two stores are needed by the stock service: forecasts written back after
they are generated, and per-user watchlists.  Both are kept behind ABCs so
the JSON-file implementations can later be replaced by a hosted database
without touching the service layer.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import List

from src.stockcast.data.schemas import PredictionRecord


class PredictionStore(ABC):
    """Forecast sink with upsert semantics keyed on (symbol, prediction_date)."""

    @abstractmethod
    def save_prediction(
        self,
        symbol: str,
        prediction_date: date,
        predicted_price: float,
        confidence: float,
    ) -> PredictionRecord:
        """Insert or replace the forecast for ``(symbol, prediction_date)``."""

    @abstractmethod
    def get_predictions(self, symbol: str, days: int = 7) -> List[PredictionRecord]:
        """Return up to *days* forecasts for *symbol*, earliest first."""


class WatchlistStore(ABC):
    """Per-user list of followed symbols."""

    @abstractmethod
    def add(self, user_id: str, symbol: str) -> bool:
        """Follow *symbol*.  Returns ``False`` if it was already followed."""

    @abstractmethod
    def remove(self, user_id: str, symbol: str) -> bool:
        """Unfollow *symbol*.  Returns ``False`` if it was not followed."""

    @abstractmethod
    def list_symbols(self, user_id: str) -> List[str]:
        """Return the user's symbols in insertion order."""
