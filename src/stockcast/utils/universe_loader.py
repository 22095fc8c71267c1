
"""
Stock universe loader.

Reads a JSON file that maps universe names (e.g. ``"default"``) to lists of
stock profiles and caches the result in memory.  The file is loaded
eagerly at construction time so that configuration errors surface
immediately rather than mid-request.

Expected JSON structure::

    {
      "default": [
        {"symbol": "AAPL", "name": "Apple Inc.", "sector": "Technology",
         "base_price": 175}
      ]
    }
"""
import json
import os
from pathlib import Path
from typing import Dict, List

from loguru import logger
from pydantic import ValidationError

from src.stockcast.data.schemas import StockProfile


class UniverseLoader:
    """Loads and caches universe -> stock profile mappings from a JSON file."""

    def __init__(self, universe_file: str = "universe/stocks.json"):
        """
        Args:
            universe_file: Path to the universe definitions file.  Relative
                           paths resolve against the current working
                           directory.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file contains invalid JSON or invalid profiles.
        """
        self.file_path = Path(os.getcwd()) / universe_file
        self._cache: Dict[str, List[StockProfile]] = {}
        self._load_universes()

    def _load_universes(self) -> None:
        if not self.file_path.exists():
            logger.critical(f"Universe file not found at: {self.file_path}")
            raise FileNotFoundError(
                f"Missing universe definition file: {self.file_path}"
            )

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            self._cache = {
                name: [StockProfile(**entry) for entry in entries]
                for name, entries in raw.items()
            }
            logger.info(f"Loaded universe definitions from {self.file_path.name}")
        except json.JSONDecodeError as e:
            logger.critical(f"Invalid JSON in universe file: {e}")
            raise ValueError("Corrupted universe definition file") from e
        except ValidationError as e:
            logger.critical(f"Invalid stock profile in universe file: {e}")
            raise ValueError("Invalid universe definition file") from e

    def get_profiles(self, universe_name: str = "default") -> List[StockProfile]:
        """Return the stock profiles of the given universe.

        Raises:
            KeyError: If *universe_name* is not present in the file.
        """
        if universe_name not in self._cache:
            available = list(self._cache.keys())
            logger.error(
                f"Universe '{universe_name}' not found. Available: {available}"
            )
            raise KeyError(f"Unknown universe: {universe_name}")

        profiles = self._cache[universe_name]
        logger.info(f"Selected universe '{universe_name}': {len(profiles)} stocks")
        return profiles
