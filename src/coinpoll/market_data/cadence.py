"""Cadence policy: how often to poll and how to label the axis per time range.

Longer windows move slowly relative to their span, so they are refreshed
far less often than the intraday chart. Pure lookups, no I/O.
"""

from coinpoll.config import PollerSettings
from coinpoll.models import AxisHint, TimeRange

DEFAULT_INTERVALS: dict[TimeRange, float] = {
    TimeRange.DAY: 5 * 60,
    TimeRange.WEEK: 60 * 60,
    TimeRange.MONTH: 24 * 60 * 60,
    TimeRange.QUARTER: 24 * 60 * 60,
    TimeRange.YEAR: 24 * 60 * 60,
}

AXIS_HINTS: dict[TimeRange, AxisHint] = {
    TimeRange.DAY: AxisHint(granularity="hourly", label_format="%H:%M"),
    TimeRange.WEEK: AxisHint(granularity="daily", label_format="%a"),
    TimeRange.MONTH: AxisHint(granularity="daily", label_format="%m/%d"),
    TimeRange.QUARTER: AxisHint(granularity="weekly", label_format="%m/%d"),
    TimeRange.YEAR: AxisHint(granularity="monthly", label_format="%b"),
}


class CadencePolicy:
    """Maps a TimeRange to its timer interval and axis hint.

    Args:
        intervals: Seconds between polls per range. Missing ranges fall
            back to DEFAULT_INTERVALS so every range stays mapped.
    """

    def __init__(self, intervals: dict[TimeRange, float] | None = None) -> None:
        merged = dict(DEFAULT_INTERVALS)
        if intervals:
            merged.update(intervals)
        for time_range, seconds in merged.items():
            if seconds <= 0:
                raise ValueError(f"interval for {time_range.label} must be positive, got {seconds}")
        self._intervals = merged

    @classmethod
    def from_settings(cls, settings: PollerSettings) -> "CadencePolicy":
        return cls(
            {
                TimeRange.DAY: settings.interval_1d_seconds,
                TimeRange.WEEK: settings.interval_7d_seconds,
                TimeRange.MONTH: settings.interval_30d_seconds,
                TimeRange.QUARTER: settings.interval_90d_seconds,
                TimeRange.YEAR: settings.interval_365d_seconds,
            }
        )

    def interval_for(self, time_range: TimeRange) -> float:
        """Seconds between timer ticks for ``time_range``."""
        return self._intervals[time_range]

    def axis_hint_for(self, time_range: TimeRange) -> AxisHint:
        return AXIS_HINTS[time_range]
