"""
test_storage.py
"""
from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from src.stockcast.data.cache import InMemoryKeyValueStore
from src.stockcast.services.persistence import PredictionPersister
from src.stockcast.services.update_tracker import (
    LAST_UPDATE_KEY,
    UpdateTracker,
)
from src.stockcast.storage.base import PredictionStore
from src.stockcast.storage.json_store import JsonPredictionStore, JsonWatchlistStore


# ---------------------------------------------------------------------------
# Prediction store
# ---------------------------------------------------------------------------

def test_prediction_upsert_is_idempotent(tmp_path):
    store = JsonPredictionStore(str(tmp_path / "predictions.json"))
    day = date(2024, 1, 22)

    store.save_prediction("AAPL", day, 180.0, 0.75)
    store.save_prediction("AAPL", day, 182.5, 0.75)

    records = store.get_predictions("AAPL")
    assert len(records) == 1
    assert records[0].predicted_price == 182.5


def test_predictions_are_sorted_and_limited(tmp_path):
    store = JsonPredictionStore(str(tmp_path / "predictions.json"))
    for offset in (5, 1, 3, 2, 4):
        store.save_prediction("MSFT", date(2024, 1, 1) + timedelta(days=offset), 400.0, 0.8)

    records = store.get_predictions("MSFT", days=3)
    assert [r.prediction_date.day for r in records] == [2, 3, 4]
    assert store.get_predictions("NVDA") == []


def test_prediction_validation(tmp_path):
    store = JsonPredictionStore(str(tmp_path / "predictions.json"))
    with pytest.raises(ValidationError):
        store.save_prediction("AAPL", date(2024, 1, 22), -1.0, 0.75)


# ---------------------------------------------------------------------------
# Watchlists
# ---------------------------------------------------------------------------

def test_watchlist_add_remove(tmp_path):
    store = JsonWatchlistStore(str(tmp_path / "watchlists.json"))

    assert store.add("u1", "AAPL")
    assert store.add("u1", "NVDA")
    assert not store.add("u1", "AAPL")
    assert store.list_symbols("u1") == ["AAPL", "NVDA"]

    assert store.remove("u1", "AAPL")
    assert not store.remove("u1", "AAPL")
    assert store.list_symbols("u1") == ["NVDA"]
    assert store.list_symbols("someone-else") == []


def test_corrupted_store_file_raises(tmp_path):
    path = tmp_path / "watchlists.json"
    path.write_text("{oops", encoding="utf-8")

    with pytest.raises(ValueError):
        JsonWatchlistStore(str(path)).list_symbols("u1")


# ---------------------------------------------------------------------------
# Background persister
# ---------------------------------------------------------------------------

class ExplodingStore(PredictionStore):
    def save_prediction(self, symbol, prediction_date, predicted_price, confidence):
        raise ConnectionError("database unreachable")

    def get_predictions(self, symbol, days=7):
        return []


def test_persister_writes_in_background(tmp_path):
    store = JsonPredictionStore(str(tmp_path / "predictions.json"))
    persister = PredictionPersister(store)

    future = persister.submit("AAPL", date(2024, 1, 22), 181.0, 0.75)
    persister.shutdown(wait=True)

    assert future.result().predicted_price == 181.0
    assert len(store.get_predictions("AAPL")) == 1


def test_persister_swallows_store_failures():
    persister = PredictionPersister(ExplodingStore())

    future = persister.submit("AAPL", date(2024, 1, 22), 181.0, 0.75)
    persister.shutdown(wait=True)

    assert isinstance(future.exception(), ConnectionError)


# ---------------------------------------------------------------------------
# Update tracker
# ---------------------------------------------------------------------------

class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_tracker_needs_update_when_never_updated():
    tracker = UpdateTracker(InMemoryKeyValueStore())

    status = tracker.check_if_needs_update()
    assert status.needs_update
    assert status.last_update is None
    assert tracker.last_update_label() == "Never"


def test_tracker_same_day_then_next_day():
    clock = MutableClock(datetime(2024, 1, 15, 9, 0))
    tracker = UpdateTracker(InMemoryKeyValueStore(), clock=clock)
    tracker.mark_as_updated()

    clock.now = datetime(2024, 1, 15, 23, 59)
    assert not tracker.check_if_needs_update().needs_update

    clock.now = datetime(2024, 1, 16, 0, 1)
    assert tracker.check_if_needs_update().needs_update


@pytest.mark.parametrize(
    "elapsed, label",
    [
        (timedelta(seconds=30), "Just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=45), "45 minutes ago"),
        (timedelta(hours=1, minutes=5), "1 hour ago"),
        (timedelta(hours=23), "23 hours ago"),
        (timedelta(hours=30), "1 day ago"),
        (timedelta(days=3), "3 days ago"),
    ],
)
def test_tracker_labels(elapsed, label):
    start = datetime(2024, 1, 15, 9, 0)
    clock = MutableClock(start)
    tracker = UpdateTracker(InMemoryKeyValueStore(), clock=clock)
    tracker.mark_as_updated()

    clock.now = start + elapsed
    assert tracker.last_update_label() == label


def test_tracker_clear_removes_last_update():
    store = InMemoryKeyValueStore()
    tracker = UpdateTracker(store)
    tracker.force_refresh()

    assert store.get_item(LAST_UPDATE_KEY) is not None
    tracker.clear()
    assert store.keys() == []
