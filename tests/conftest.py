"""Shared test fixtures for the coinpoll client."""

import asyncio
from collections.abc import Mapping

import pytest

from coinpoll.api.client import JsonFetcher, ModelT
from coinpoll.config import AppSettings, CoinGeckoSettings, PollerSettings

# ---------------------------------------------------------------------------
# Sample payloads (trimmed CoinGecko responses)
# ---------------------------------------------------------------------------

DETAIL_PAYLOAD = {
    "id": "asset-a",
    "symbol": "aa",
    "name": "Asset A",
    "image": {"thumb": "https://img/t.png", "small": "https://img/s.png", "large": None},
    "market_data": {
        "current_price": {"usd": 64123.5, "eur": 59000.0},
        "price_change_percentage_24h": -1.2549,
        "high_24h": {"usd": 65000.0},
        "low_24h": {"usd": 63000.0},
        "market_cap": {"usd": 1262000000000.4},
        "total_volume": {"usd": 32000000000.0},
        "circulating_supply": 19700000.0,
        "total_supply": 21000000.0,
        "max_supply": 21000000.0,
    },
    "description": {"en": "A test asset."},
    "links": {"homepage": ["https://asset-a.example"], "subreddit_url": None},
    "genesis_date": "2009-01-03",
    "categories": ["Layer 1"],
    # Sections the client never asked for are ignored
    "tickers": [],
}

DAY_MS = 24 * 60 * 60 * 1000
T0_MS = 1_700_000_000_000

CHART_PAYLOAD = {
    "prices": [[T0_MS + i * DAY_MS, 100.0 + i] for i in range(7)],
    "market_caps": [[T0_MS + i * DAY_MS, 1e9 + i] for i in range(7)],
    "total_volumes": [[T0_MS + i * DAY_MS, 5e6 + i] for i in range(7)],
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher(JsonFetcher):
    """Scripted JsonFetcher keyed by the requested model type.

    ``responses[model]`` is either a model instance to return or an
    exception to raise. ``gates[model]`` holds the call until the event
    is set, to control completion order.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.responses: dict[type, object] = {}
        self.gates: dict[type, asyncio.Event] = {}
        self.closed = False

    async def fetch_json(
        self,
        path: str,
        query: Mapping[str, str],
        model: type[ModelT],
    ) -> ModelT:
        self.calls.append((path, dict(query)))
        gate = self.gates.get(model)
        if gate is not None:
            await gate.wait()
        result = self.responses[model]
        if isinstance(result, BaseException):
            raise result
        return result  # type: ignore[return-value]

    async def close(self) -> None:
        self.closed = True


async def settle(rounds: int = 10) -> None:
    """Let ready tasks run without advancing any timer."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults."""
    return AppSettings(
        log_level="DEBUG",
        coingecko=CoinGeckoSettings(
            base_url="https://api.test.local/api/v3",
            request_timeout=1.0,
            resource_timeout=2.0,
        ),
        poller=PollerSettings(min_spacing_seconds=5.0),
    )
