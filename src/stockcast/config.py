"""
Runtime configuration.

Values come from environment variables (optionally loaded from a ``.env``
file by the entry point via python-dotenv) and are validated by a
pydantic model so a typo such as ``STOCKCAST_CACHE_TTL=abc`` fails at
startup instead of mid-request.
"""
import os
from typing import Optional

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    """Settings shared by the CLI and the service wiring."""

    data_dir: str = Field("data", description="Directory for JSON stores and the cache file")
    log_dir: str = Field("logs", description="Directory for rotated log files")
    cache_ttl_seconds: float = Field(
        60.0, gt=0,
        description="Freshness window of cached provider responses",
    )
    proxy: Optional[str] = Field(None, description="HTTP/SOCKS proxy for Yahoo Finance")
    universe_file: str = Field("universe/stocks.json", description="Stock universe definitions")
    offline: bool = Field(False, description="Never call the live provider")


def load_config() -> AppConfig:
    """Build an ``AppConfig`` from ``STOCKCAST_*`` environment variables."""
    env = {
        "data_dir": os.getenv("STOCKCAST_DATA_DIR"),
        "log_dir": os.getenv("STOCKCAST_LOG_DIR"),
        "cache_ttl_seconds": os.getenv("STOCKCAST_CACHE_TTL"),
        "proxy": os.getenv("STOCKCAST_PROXY"),
        "universe_file": os.getenv("STOCKCAST_UNIVERSE_FILE"),
        "offline": os.getenv("STOCKCAST_OFFLINE"),
    }
    return AppConfig(**{k: v for k, v in env.items() if v not in (None, "")})
