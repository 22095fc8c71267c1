
"""
JSON-file implementations of the application stores.

Each store owns one JSON document on disk and rewrites it in full on every
mutation under a lock, so concurrent writers (e.g. the background
prediction persister) cannot interleave partial updates.

Layouts::

    predictions.json   {"AAPL": {"2026-02-15": {"predicted_price": 181.2,
                                                 "confidence": 0.75}}}
    watchlists.json    {"user-1": ["AAPL", "NVDA"]}
"""
import json
import threading
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

from src.stockcast.data.schemas import PredictionRecord
from src.stockcast.storage.base import PredictionStore, WatchlistStore


class _JsonDocument:
    """Lock-guarded JSON object persisted to a single file."""

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)
        self.lock = threading.Lock()

    def load(self) -> Dict[str, Any]:
        if not self.file_path.exists():
            return {}

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.critical(f"Invalid JSON in store file {self.file_path}: {e}")
            raise ValueError(f"Corrupted store file: {self.file_path}") from e

    def save(self, data: Dict[str, Any]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)


class JsonPredictionStore(PredictionStore):
    """Forecasts stored per symbol, keyed by ISO prediction date."""

    def __init__(self, file_path: str = "data/predictions.json"):
        self._doc = _JsonDocument(file_path)

    def save_prediction(
        self,
        symbol: str,
        prediction_date: date,
        predicted_price: float,
        confidence: float,
    ) -> PredictionRecord:
        record = PredictionRecord(
            symbol=symbol,
            prediction_date=prediction_date,
            predicted_price=predicted_price,
            confidence=confidence,
        )

        with self._doc.lock:
            data = self._doc.load()
            data.setdefault(symbol, {})[prediction_date.isoformat()] = {
                "predicted_price": record.predicted_price,
                "confidence": record.confidence,
            }
            self._doc.save(data)

        logger.success(f"Saved prediction for {symbol} ({prediction_date})")
        return record

    def get_predictions(self, symbol: str, days: int = 7) -> List[PredictionRecord]:
        with self._doc.lock:
            entries = self._doc.load().get(symbol, {})

        records = [
            PredictionRecord(
                symbol=symbol,
                prediction_date=date.fromisoformat(day),
                predicted_price=entry["predicted_price"],
                confidence=entry["confidence"],
            )
            for day, entry in sorted(entries.items())
        ]
        logger.info(f"Fetched {len(records[:days])} predictions for {symbol}")
        return records[:days]


class JsonWatchlistStore(WatchlistStore):
    """Watchlists stored as ``{user_id: [symbols...]}``."""

    def __init__(self, file_path: str = "data/watchlists.json"):
        self._doc = _JsonDocument(file_path)

    def add(self, user_id: str, symbol: str) -> bool:
        with self._doc.lock:
            data = self._doc.load()
            symbols = data.setdefault(user_id, [])
            if symbol in symbols:
                logger.warning(f"{symbol} already in watchlist of {user_id}")
                return False
            symbols.append(symbol)
            self._doc.save(data)

        logger.success(f"Added {symbol} to watchlist")
        return True

    def remove(self, user_id: str, symbol: str) -> bool:
        with self._doc.lock:
            data = self._doc.load()
            symbols = data.get(user_id, [])
            if symbol not in symbols:
                return False
            symbols.remove(symbol)
            self._doc.save(data)

        logger.success(f"Removed {symbol} from watchlist")
        return True

    def list_symbols(self, user_id: str) -> List[str]:
        with self._doc.lock:
            return list(self._doc.load().get(user_id, []))
