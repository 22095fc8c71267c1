"""
Command-line entry point.

Runs one request against the stock service and archives the result:
  - default: snapshot of every stock in the universe (or ``--symbols``),
  - ``--predict SYMBOL --target-date YYYY-MM-DD``: custom-horizon forecast,
  - ``--watchlist [--user ID]``: watchlist snapshot,
  - ``--search QUERY``: symbol search,
  - ``--status``: provider availability and last refresh time.

Results are written as JSON to a timestamped folder under ``outcomes/``
together with a copy of the day's log.

Usage::

    uv run main.py
    uv run main.py --symbols AAPL NVDA --offline
    uv run main.py --predict TSLA --target-date 2026-03-01
"""
import argparse
import asyncio
import json
import os
import shutil
import sys
from datetime import date, datetime
from typing import Any

from dotenv import load_dotenv
from loguru import logger

from src.stockcast.config import AppConfig, load_config
from src.stockcast.data.adapters.caching_adapter import CachingMarketDataProvider
from src.stockcast.data.adapters.offline_adapter import OfflineAdapter
from src.stockcast.data.adapters.yfinance_adapter import YFinanceAdapter
from src.stockcast.data.cache import ExpiringCache, JsonFileKeyValueStore
from src.stockcast.services.persistence import PredictionPersister
from src.stockcast.services.stock_service import StockService
from src.stockcast.services.update_tracker import UpdateTracker
from src.stockcast.storage.json_store import JsonPredictionStore, JsonWatchlistStore
from src.stockcast.utils.logger import setup_logger
from src.stockcast.utils.universe_loader import UniverseLoader

load_dotenv()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def create_outcome_dir(command: str) -> str:
    """Create and return a timestamped output directory under ``outcomes/``."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    target_dir = os.path.join("outcomes", f"{timestamp}_{command}")
    os.makedirs(target_dir, exist_ok=True)

    logger.info(f"Output directory created: {target_dir}")
    return target_dir


def save_json(data: Any, folder: str, filename: str) -> None:
    """Serialise *data* as pretty-printed JSON into *folder*/*filename*."""
    path = os.path.join(folder, filename)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)
    logger.success(f"Saved {filename}")


def archive_current_log(log_dir: str, target_dir: str) -> None:
    """Copy today's log file into *target_dir* for post-mortem analysis."""
    try:
        today_str = datetime.now().strftime("%Y-%m-%d")
        src_log = os.path.join(log_dir, f"stockcast_{today_str}.log")

        if os.path.exists(src_log):
            dst_log = os.path.join(target_dir, "execution.log")
            shutil.copy2(src_log, dst_log)
            logger.info(f"Archived execution log to {dst_log}")
        else:
            logger.warning("Log file not found for archiving.")
    except OSError as e:
        logger.warning(f"Failed to archive log: {e}")


def build_service(config: AppConfig, offline: bool) -> StockService:
    """Wire provider, cache, stores and persister into a ``StockService``."""
    cache_store = JsonFileKeyValueStore(os.path.join(config.data_dir, "cache.json"))
    cache = ExpiringCache(cache_store, ttl_seconds=config.cache_ttl_seconds)

    if offline:
        logger.warning("Offline mode: serving simulated data only")
        provider = OfflineAdapter()
    else:
        provider = CachingMarketDataProvider(YFinanceAdapter(proxy=config.proxy), cache)

    persister = PredictionPersister(
        JsonPredictionStore(os.path.join(config.data_dir, "predictions.json"))
    )
    watchlists = JsonWatchlistStore(os.path.join(config.data_dir, "watchlists.json"))
    universe = UniverseLoader(config.universe_file).get_profiles("default")

    return StockService(
        provider=provider,
        universe=universe,
        persister=persister,
        watchlist_store=watchlists,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

async def run(args: argparse.Namespace, service: StockService, tracker: UpdateTracker) -> Any:
    if args.status:
        status = await service.get_detailed_api_status()
        return {**status.model_dump(), "last_update": tracker.last_update_label()}

    if args.predict:
        target = date.fromisoformat(args.target_date)
        prediction = await service.generate_dynamic_prediction(args.predict, target)
        return prediction.model_dump(mode="json")

    if args.search:
        items = await service.search_stocks(args.search)
        return [i.model_dump() for i in items]

    if args.watchlist:
        items = await service.get_watchlist(args.user)
        return [i.model_dump() for i in items]

    if args.symbols:
        stocks = await asyncio.gather(
            *(service.get_stock_by_symbol(s.upper()) for s in args.symbols)
        )
    else:
        if not tracker.check_if_needs_update().needs_update:
            logger.info("Stock data already refreshed today.")
        stocks = await service.generate_default_stocks()
        tracker.mark_as_updated()

    return [s.model_dump(mode="json") for s in stocks if s is not None]


def main() -> None:
    parser = argparse.ArgumentParser(description="Stockcast - stock snapshots and forecasts")
    parser.add_argument("--symbols", nargs="+", help="Symbols to snapshot")
    parser.add_argument("--predict", type=str, help="Symbol to forecast")
    parser.add_argument("--target-date", type=str, help="Forecast horizon (YYYY-MM-DD)")
    parser.add_argument("--watchlist", action="store_true", help="Show a watchlist")
    parser.add_argument("--user", type=str, default=None, help="Watchlist owner")
    parser.add_argument("--search", type=str, help="Search symbols")
    parser.add_argument("--status", action="store_true", help="Show provider status")
    parser.add_argument("--offline", action="store_true", help="Use simulated data only")
    args = parser.parse_args()

    if args.predict and not args.target_date:
        parser.error("--predict requires --target-date")

    config = load_config()
    setup_logger(config.log_dir)

    command = (
        "status" if args.status
        else "predict" if args.predict
        else "search" if args.search
        else "watchlist" if args.watchlist
        else "snapshot"
    )
    output_dir = create_outcome_dir(command)

    service = build_service(config, offline=args.offline or config.offline)
    tracker = UpdateTracker(JsonFileKeyValueStore(os.path.join(config.data_dir, "state.json")))

    try:
        result = asyncio.run(run(args, service, tracker))
        save_json(result, output_dir, f"{command}.json")
        logger.success(f"Results archived to: {output_dir}")
    except ValueError as e:
        logger.error(f"Pick a future date: {e}" if args.predict else f"Invalid request: {e}")
        archive_current_log(config.log_dir, output_dir)
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Command failed: {e}")
        archive_current_log(config.log_dir, output_dir)
        sys.exit(1)
    finally:
        if service.persister is not None:
            service.persister.shutdown(wait=True)

    archive_current_log(config.log_dir, output_dir)


if __name__ == "__main__":
    main()
