"""Request builders for the two endpoints a fetch cycle hits."""

from dataclasses import dataclass, field

from coinpoll.models import TimeRange

# Only market data is needed; the other sections are large and unused.
DETAIL_QUERY: dict[str, str] = {
    "localization": "false",
    "tickers": "false",
    "market_data": "true",
    "community_data": "false",
    "developer_data": "false",
    "sparkline": "false",
}


@dataclass(frozen=True)
class Request:
    path: str
    query: dict[str, str] = field(default_factory=dict)


def detail_request(asset_id: str) -> Request:
    """Build the ``/coins/{id}`` request for an asset's current snapshot."""
    return Request(path=f"coins/{asset_id}", query=dict(DETAIL_QUERY))


def chart_request(asset_id: str, time_range: TimeRange, vs_currency: str = "usd") -> Request:
    """Build the ``/coins/{id}/market_chart`` request for a time range."""
    return Request(
        path=f"coins/{asset_id}/market_chart",
        query={"vs_currency": vs_currency, "days": time_range.value},
    )

