
"""
Strict data contracts for prices, paths and provider payloads.

Pydantic models defined here are the single source of truth for every
shape that crosses a module boundary: simulated price paths, the input
context of the variation engine, provider responses (quote, history,
profile, search) and the stock snapshots handed to callers.  Validation is
enforced at construction so a malformed path (gaps, duplicate days,
non-positive prices) never reaches a consumer.
"""
import datetime as dt
from typing import List, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PricePoint(BaseModel):
    """One price on one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(..., description="Calendar day (no time component)")
    price: float = Field(..., gt=0, description="Price for the day")


class PricePath(BaseModel):
    """Chronological, gap-free sequence of daily price points."""

    points: List[PricePoint] = Field(default_factory=list)

    @field_validator("points")
    @classmethod
    def points_must_be_contiguous(cls, v: List[PricePoint]) -> List[PricePoint]:
        """Ensure exactly one point per calendar day with no gaps."""
        for prev, cur in zip(v, v[1:]):
            if cur.date != prev.date + dt.timedelta(days=1):
                raise ValueError(
                    f"Path is not contiguous: {prev.date} followed by {cur.date}"
                )
        return v

    def __len__(self) -> int:
        return len(self.points)

    @property
    def last_price(self) -> Optional[float]:
        return self.points[-1].price if self.points else None

    @property
    def last_date(self) -> Optional[dt.date]:
        return self.points[-1].date if self.points else None

    def to_frame(self) -> pd.DataFrame:
        """Return the path as a ``price`` column indexed by ``date``."""
        return pd.DataFrame(
            {"price": [p.price for p in self.points]},
            index=pd.Index([p.date for p in self.points], name="date"),
        )


class VariationContext(BaseModel):
    """Deterministic input of the variation engine."""

    model_config = ConfigDict(frozen=True)

    calendar_day: dt.date
    symbol: Optional[str] = None
    sector: Optional[str] = None
    recent_changes: Optional[List[float]] = Field(
        None,
        description="Recent fractional changes, oldest first",
    )


class StockProfile(BaseModel):
    """Static description of an instrument in the local universe."""

    symbol: str = Field(..., min_length=1)
    name: str
    sector: str = "Unknown"
    base_price: float = Field(..., gt=0)


class Quote(BaseModel):
    """Current-day quote."""

    current_price: float = Field(..., gt=0)
    previous_close: float
    change: float
    change_percent: float
    day_high: float
    day_low: float
    day_open: float


class HistoricalSeries(BaseModel):
    """Parallel OHLCV arrays, oldest first.

    ``status`` is ``"ok"`` when the arrays hold data and ``"no_data"`` when
    the provider had nothing for the symbol.
    """

    status: Literal["ok", "no_data"] = "ok"
    timestamps: List[int] = Field(default_factory=list)
    opens: List[float] = Field(default_factory=list)
    highs: List[float] = Field(default_factory=list)
    lows: List[float] = Field(default_factory=list)
    closes: List[float] = Field(default_factory=list)
    volumes: List[float] = Field(default_factory=list)

    @field_validator("closes")
    @classmethod
    def closes_must_match_timestamps(cls, v: List[float], info) -> List[float]:
        """Ensure closes line up one-to-one with timestamps."""
        if "timestamps" in info.data and len(v) != len(info.data["timestamps"]):
            raise ValueError(
                f"closes length ({len(v)}) must match "
                f"timestamps length ({len(info.data['timestamps'])})"
            )
        return v

    @property
    def is_ok(self) -> bool:
        return self.status == "ok" and len(self.timestamps) > 0

    def to_price_points(self) -> List[PricePoint]:
        """Convert timestamps and closes into chart points (UTC day)."""
        return [
            PricePoint(
                date=dt.datetime.fromtimestamp(ts, tz=dt.timezone.utc).date(),
                price=close,
            )
            for ts, close in zip(self.timestamps, self.closes)
        ]


class CompanyProfile(BaseModel):
    name: str
    ticker: str
    country: Optional[str] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None
    industry: Optional[str] = None


class SearchResult(BaseModel):
    symbol: str
    description: str
    type: str


class StockData(BaseModel):
    """Full snapshot of one stock: quote, history and forecast."""

    symbol: str
    name: str
    current_price: float
    previous_close: float
    change: float
    change_percent: float
    predicted_price: float
    predicted_change: float
    predicted_change_percent: float
    confidence: float = Field(..., gt=0, le=1.0)
    historical_data: List[PricePoint]
    prediction_data: List[PricePoint]
    is_real_data: bool = False


class WatchlistItem(BaseModel):
    symbol: str
    name: str
    current_price: float
    change: float
    change_percent: float
    predicted_change: float

    @classmethod
    def from_stock(cls, stock: StockData) -> "WatchlistItem":
        return cls(
            symbol=stock.symbol,
            name=stock.name,
            current_price=stock.current_price,
            change=stock.change,
            change_percent=stock.change_percent,
            predicted_change=stock.predicted_change,
        )


class PredictionRecord(BaseModel):
    """Persisted forecast, unique per (symbol, prediction_date)."""

    symbol: str
    prediction_date: dt.date
    predicted_price: float = Field(..., gt=0)
    confidence: float = Field(..., gt=0, le=1.0)


class DynamicPrediction(BaseModel):
    predicted_price: float
    confidence: float
    prediction_data: List[PricePoint]


class ApiStatus(BaseModel):
    is_available: bool
    message: str
    suggestion: str
