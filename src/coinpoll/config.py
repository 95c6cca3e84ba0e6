"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from coinpoll.models import TimeRange


class CoinGeckoSettings(BaseSettings):
    """Upstream market-data API connection settings."""

    model_config = SettingsConfigDict(env_prefix="COINGECKO_")

    base_url: str = "https://api.coingecko.com/api/v3"
    request_timeout: float = 30.0  # per connect/read/write
    resource_timeout: float = 60.0  # whole request, body included
    vs_currency: str = "usd"
    user_agent: str = "coinpoll/0.1"


class PollerSettings(BaseSettings):
    """Polling cadence and rate governor parameters.

    The upstream free tier publishes no exact budget, so the spacing and
    per-range intervals are tunable via the POLLER_ environment prefix.
    """

    model_config = SettingsConfigDict(env_prefix="POLLER_")

    min_spacing_seconds: float = 5.0
    interval_1d_seconds: float = 5 * 60
    interval_7d_seconds: float = 60 * 60
    interval_30d_seconds: float = 24 * 60 * 60
    interval_90d_seconds: float = 24 * 60 * 60
    interval_365d_seconds: float = 24 * 60 * 60


class WatchSettings(BaseSettings):
    """What the command-line entry point polls."""

    model_config = SettingsConfigDict(env_prefix="WATCH_")

    asset_id: str = "bitcoin"
    time_range: TimeRange = TimeRange.WEEK


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    coingecko: CoinGeckoSettings = CoinGeckoSettings()
    poller: PollerSettings = PollerSettings()
    watch: WatchSettings = WatchSettings()
