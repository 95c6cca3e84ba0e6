"""Text formatting for consumers rendering a PollSnapshot.

Missing values render as "-" rather than failing, since every market
field is optional upstream.
"""

from datetime import datetime, timezone

from coinpoll.exceptions import CoinPollError, RateLimited
from coinpoll.models import AssetDetail, PollSnapshot

PLACEHOLDER = "-"


def _per_currency(values: dict[str, float] | None, currency: str) -> float | None:
    if not values:
        return None
    return values.get(currency)


def _money(value: float, currency: str, decimals: int) -> str:
    if currency == "usd":
        return f"${value:.{decimals}f}"
    return f"{value:.{decimals}f} {currency.upper()}"


def price_text(detail: AssetDetail | None, currency: str = "usd") -> str:
    """Current price, e.g. ``$64123.45`` or ``59000.00 EUR``."""
    if detail is None or detail.market_data is None:
        return PLACEHOLDER
    price = _per_currency(detail.market_data.current_price, currency)
    if price is None:
        return PLACEHOLDER
    return _money(price, currency, 2)


def change_24h_text(detail: AssetDetail | None) -> str:
    """24h change percentage, e.g. ``-1.25%``."""
    if detail is None or detail.market_data is None:
        return PLACEHOLDER
    change = detail.market_data.price_change_percentage_24h
    if change is None:
        return PLACEHOLDER
    return f"{change:.2f}%"


def market_cap_text(detail: AssetDetail | None, currency: str = "usd") -> str:
    if detail is None or detail.market_data is None:
        return PLACEHOLDER
    market_cap = _per_currency(detail.market_data.market_cap, currency)
    if market_cap is None:
        return PLACEHOLDER
    return _money(market_cap, currency, 0)


def error_text(error: CoinPollError | None) -> str | None:
    """Message shown next to (not instead of) any stale data.

    Rate limiting gets its own wording so the user knows to wait rather
    than check their connection.
    """
    if error is None:
        return None
    if isinstance(error, RateLimited):
        return error.user_message
    return f"Loading Failed: {error.user_message}"


def summary_line(snapshot: PollSnapshot, currency: str = "usd") -> str:
    """One-line status used by the command-line watcher."""
    name = snapshot.detail.name if snapshot.detail else snapshot.asset_id
    points = len(snapshot.chart.prices or []) if snapshot.chart else 0
    parts = [
        f"{name} [{snapshot.time_range.label}]",
        price_text(snapshot.detail, currency),
        change_24h_text(snapshot.detail),
        f"cap {market_cap_text(snapshot.detail, currency)}",
        f"{points} pts",
    ]
    if snapshot.last_updated is not None:
        updated = datetime.fromtimestamp(snapshot.last_updated, tz=timezone.utc)
        parts.append(f"updated {updated:%H:%M:%S}Z")
    if snapshot.busy:
        parts.append("loading")
    message = error_text(snapshot.last_error)
    if message:
        parts.append(message)
    return " | ".join(parts)
