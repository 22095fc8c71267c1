"""
Fire-and-forget persistence of generated forecasts.

Generating a forecast must never wait on, or fail because of, the store.
``PredictionPersister`` hands each write to a background executor and
routes any failure to the logger from a done-callback.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date

from loguru import logger

from src.stockcast.storage.base import PredictionStore


class PredictionPersister:
    """Background writer for ``PredictionStore``."""

    def __init__(self, store: PredictionStore, max_workers: int = 1):
        """
        Args:
            store: Destination store.
            max_workers: Executor threads.  One worker keeps writes in
                         submission order.
        """
        self.store = store
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="prediction-writer",
        )

    def submit(
        self,
        symbol: str,
        prediction_date: date,
        predicted_price: float,
        confidence: float,
    ) -> Future:
        """Queue a write and return immediately."""
        logger.debug(f"Queueing prediction for {symbol} ({prediction_date})")
        future = self._executor.submit(
            self.store.save_prediction,
            symbol,
            prediction_date,
            predicted_price,
            confidence,
        )
        future.add_done_callback(lambda f: self._report(symbol, f))
        return future

    @staticmethod
    def _report(symbol: str, future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.warning(f"Failed to save prediction for {symbol}: {error}")

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting writes; optionally wait for queued ones."""
        self._executor.shutdown(wait=wait)
