"""Shared data models for the coinpoll client.

Wire payloads (AssetDetail, ChartSeries) are pydantic models so a payload
that does not match the expected shape fails validation at the HTTP client
boundary. Every market field is optional: the upstream omits them freely.
"""

import time
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from coinpoll.exceptions import CoinPollError


class TimeRange(str, Enum):
    """Chart window selectable by the consumer.

    The value is the upstream ``days`` query parameter.
    """

    DAY = "1"
    WEEK = "7"
    MONTH = "30"
    QUARTER = "90"
    YEAR = "365"

    @property
    def days(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return _RANGE_LABELS[self]


_RANGE_LABELS: dict[TimeRange, str] = {
    TimeRange.DAY: "1D",
    TimeRange.WEEK: "7D",
    TimeRange.MONTH: "1M",
    TimeRange.QUARTER: "3M",
    TimeRange.YEAR: "1Y",
}


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ImageLinks(_Payload):
    thumb: str | None = None
    small: str | None = None
    large: str | None = None


class MarketData(_Payload):
    """Current market state; per-currency maps are keyed by e.g. "usd"."""

    current_price: dict[str, float] | None = None
    price_change_percentage_24h: float | None = None
    high_24h: dict[str, float] | None = None
    low_24h: dict[str, float] | None = None
    market_cap: dict[str, float] | None = None
    total_volume: dict[str, float] | None = None
    circulating_supply: float | None = None
    total_supply: float | None = None
    max_supply: float | None = None


class Description(_Payload):
    en: str | None = None
    zh_tw: str | None = None


class Links(_Payload):
    homepage: list[str] | None = None
    blockchain_site: list[str] | None = None
    subreddit_url: str | None = None
    twitter_screen_name: str | None = None


class AssetDetail(_Payload):
    """Snapshot of an asset's current market state from ``/coins/{id}``."""

    id: str
    symbol: str
    name: str
    image: ImageLinks | None = None
    market_data: MarketData | None = None
    description: Description | None = None
    links: Links | None = None
    genesis_date: str | None = None
    categories: list[str] | None = None


ChartPoint = tuple[float, float]  # (timestamp_ms, value)


class ChartSeries(_Payload):
    """Parallel series from ``/coins/{id}/market_chart``.

    Point cadence is decided upstream: raw intraday points for short
    ranges, daily aggregates for long ones.
    """

    prices: list[ChartPoint] | None = None
    market_caps: list[ChartPoint] | None = None
    total_volumes: list[ChartPoint] | None = None

    @field_validator("prices", "market_caps", "total_volumes")
    @classmethod
    def _chronological(cls, points: list[ChartPoint] | None) -> list[ChartPoint] | None:
        if points is None:
            return None
        return sorted(points, key=lambda p: p[0])


@dataclass(frozen=True)
class AxisHint:
    """Rendering hint for the chart's time axis."""

    granularity: str  # "hourly" | "daily" | "weekly" | "monthly"
    label_format: str  # strftime pattern


@dataclass(frozen=True)
class PollSnapshot:
    """Read-only view of the poller state published to consumers."""

    asset_id: str
    time_range: TimeRange
    axis_hint: AxisHint
    detail: AssetDetail | None = None
    chart: ChartSeries | None = None
    chart_range: TimeRange | None = None  # range the chart was fetched for
    last_error: CoinPollError | None = None
    busy: bool = False
    last_updated: float | None = None  # Unix seconds of last successful fetch
    taken_at: float = field(default_factory=time.time)
