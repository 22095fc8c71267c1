
"""
Once-per-day refresh bookkeeping.

Records when stock data was last refreshed in an injected
``KeyValueStore`` and answers "does it need refreshing today?" plus a
human-friendly "last updated" label.
"""
from datetime import datetime
from typing import Callable, Optional

from loguru import logger
from pydantic import BaseModel

from src.stockcast.data.cache import KeyValueStore

LAST_UPDATE_KEY = "stock_last_update"


class UpdateStatus(BaseModel):
    last_update: Optional[datetime] = None
    needs_update: bool


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


class UpdateTracker:
    """Tracks the last refresh time of the stock data."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self._clock = clock

    def _last_update(self) -> Optional[datetime]:
        raw = self.store.get_item(LAST_UPDATE_KEY)
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            logger.warning(f"Unreadable last-update value: {raw!r}")
            return None

    def check_if_needs_update(self) -> UpdateStatus:
        """Data needs a refresh when never updated or last updated on another day."""
        last_update = self._last_update()
        if last_update is None:
            logger.info("No previous update found, needs update")
            return UpdateStatus(last_update=None, needs_update=True)

        now = self._clock()
        needs_update = last_update.date() != now.date()
        logger.debug(
            f"Last update: {last_update.date()} Current: {now.date()} "
            f"Needs update: {needs_update}"
        )
        return UpdateStatus(last_update=last_update, needs_update=needs_update)

    def mark_as_updated(self) -> datetime:
        now = self._clock()
        self.store.set_item(LAST_UPDATE_KEY, now.isoformat())
        logger.info(f"Marked stock data as updated at: {now.isoformat()}")
        return now

    def last_update_label(self) -> str:
        """Relative age of the last refresh ("Just now", "3 hours ago", ...)."""
        last_update = self._last_update()
        if last_update is None:
            return "Never"

        diff_seconds = (self._clock() - last_update).total_seconds()
        diff_hours = int(diff_seconds // 3600)
        diff_minutes = int((diff_seconds % 3600) // 60)

        if diff_hours < 1:
            if diff_minutes < 1:
                return "Just now"
            return _plural(diff_minutes, "minute")
        if diff_hours < 24:
            return _plural(diff_hours, "hour")
        return _plural(diff_hours // 24, "day")

    def force_refresh(self) -> datetime:
        logger.info("Forcing stock data refresh...")
        return self.mark_as_updated()

    def clear(self) -> None:
        self.store.remove_item(LAST_UPDATE_KEY)
        logger.info("Update tracker cleared")
