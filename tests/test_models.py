"""Tests for wire models, TimeRange, and settings loading."""

import pytest
from pydantic import ValidationError

from coinpoll.config import AppSettings, PollerSettings, WatchSettings
from coinpoll.models import AssetDetail, ChartSeries, TimeRange


class TestTimeRange:
    def test_values_are_query_days(self) -> None:
        assert [r.value for r in TimeRange] == ["1", "7", "30", "90", "365"]
        assert [r.days for r in TimeRange] == [1, 7, 30, 90, 365]

    def test_labels(self) -> None:
        assert [r.label for r in TimeRange] == ["1D", "7D", "1M", "3M", "1Y"]

    def test_lookup_by_value(self) -> None:
        assert TimeRange("90") is TimeRange.QUARTER


class TestAssetDetail:
    def test_market_data_optional(self) -> None:
        detail = AssetDetail.model_validate({"id": "a", "symbol": "a", "name": "A"})
        assert detail.market_data is None
        assert detail.image is None
        assert detail.categories is None

    def test_partial_market_data(self) -> None:
        detail = AssetDetail.model_validate(
            {
                "id": "a",
                "symbol": "a",
                "name": "A",
                "market_data": {"current_price": {"usd": 1.0}, "max_supply": None},
            }
        )
        assert detail.market_data is not None
        assert detail.market_data.current_price == {"usd": 1.0}
        assert detail.market_data.high_24h is None

    def test_frozen(self) -> None:
        detail = AssetDetail(id="a", symbol="a", name="A")
        with pytest.raises(ValidationError):
            detail.name = "B"  # type: ignore[misc]


class TestChartSeries:
    def test_points_sorted_chronologically(self) -> None:
        chart = ChartSeries.model_validate(
            {"prices": [[3000, 3.0], [1000, 1.0], [2000, 2.0]]}
        )
        assert chart.prices == [(1000, 1.0), (2000, 2.0), (3000, 3.0)]
        assert chart.market_caps is None

    def test_empty_payload(self) -> None:
        chart = ChartSeries.model_validate({})
        assert chart.prices is None
        assert chart.total_volumes is None


class TestSettings:
    def test_defaults(self) -> None:
        settings = PollerSettings()
        assert settings.min_spacing_seconds == 5.0
        assert settings.interval_1d_seconds == 300

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POLLER_MIN_SPACING_SECONDS", "12.5")
        monkeypatch.setenv("WATCH_TIME_RANGE", "30")
        monkeypatch.setenv("WATCH_ASSET_ID", "ethereum")
        assert PollerSettings().min_spacing_seconds == 12.5
        watch = WatchSettings()
        assert watch.time_range is TimeRange.MONTH
        assert watch.asset_id == "ethereum"

    def test_app_settings_defaults(self) -> None:
        settings = AppSettings()
        assert settings.coingecko.base_url == "https://api.coingecko.com/api/v3"
        assert settings.coingecko.request_timeout == 30.0
        assert settings.coingecko.resource_timeout == 60.0
