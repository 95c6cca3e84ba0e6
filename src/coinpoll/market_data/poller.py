"""Asset poller -- keeps one asset's detail and chart fresh on a timer.

Each admitted tick issues a fetch cycle: the detail request and the
market-chart request run concurrently, and each applies its own slice of
state the moment it completes. The rate governor stays in flight until
both have finished, so a slow chart blocks the next cycle.

Cycles are tagged with a generation id. change_range() and stop() bump
the generation; late completions from an older generation are dropped
instead of overwriting newer state. In-flight HTTP requests are never
cancelled, only their results discarded.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

from coinpoll.api.client import JsonFetcher
from coinpoll.api.endpoints import chart_request, detail_request
from coinpoll.config import AppSettings
from coinpoll.exceptions import CoinPollError, HttpError, UnexpectedFetchError
from coinpoll.logging import get_logger
from coinpoll.market_data.cadence import CadencePolicy
from coinpoll.market_data.rate_governor import RateGovernor
from coinpoll.models import AssetDetail, ChartSeries, PollSnapshot, TimeRange

logger = get_logger(__name__)

Subscriber = Callable[[PollSnapshot], None]


@dataclass
class PollState:
    """Mutable state owned by a running AssetPoller."""

    asset_id: str
    time_range: TimeRange
    detail: AssetDetail | None = None
    chart: ChartSeries | None = None
    chart_range: TimeRange | None = None
    last_error: CoinPollError | None = None
    busy: bool = False
    last_updated: float | None = None


class AssetPoller:
    """Polls detail and chart data for a single asset.

    Lifecycle is Idle -> Active (start) -> Idle (stop). While active, a
    recurring timer at the cadence of the selected range triggers fetch
    cycles through the rate governor.

    Args:
        fetcher: JSON client used for both requests.
        cadence: Range -> interval / axis mapping.
        governor: Admission control shared by ticks and range changes.
        vs_currency: Quote currency for the market chart.
        clock: Monotonic clock fed to the governor.
    """

    def __init__(
        self,
        fetcher: JsonFetcher,
        cadence: CadencePolicy | None = None,
        governor: RateGovernor | None = None,
        vs_currency: str = "usd",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._cadence = cadence or CadencePolicy()
        self._governor = governor or RateGovernor()
        self._vs_currency = vs_currency
        self._clock = clock
        self._state: PollState | None = None
        self._generation = 0
        self._timer: asyncio.Task | None = None  # type: ignore[type-arg]
        self._cycles: set[asyncio.Task] = set()  # type: ignore[type-arg]
        self._subscribers: list[Subscriber] = []

    @classmethod
    def from_settings(cls, fetcher: JsonFetcher, settings: AppSettings) -> "AssetPoller":
        return cls(
            fetcher,
            cadence=CadencePolicy.from_settings(settings.poller),
            governor=RateGovernor(min_spacing=settings.poller.min_spacing_seconds),
            vs_currency=settings.coingecko.vs_currency,
        )

    # ──────────────────────────────────────────────
    # Consumer-facing
    # ──────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._state is not None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def snapshot(self) -> PollSnapshot | None:
        """Current read-only snapshot, or None while idle."""
        if self._state is None:
            return None
        state = self._state
        # The chart may still hold an older range until a new one is admitted
        axis_range = state.chart_range or state.time_range
        return PollSnapshot(
            asset_id=state.asset_id,
            time_range=state.time_range,
            axis_hint=self._cadence.axis_hint_for(axis_range),
            detail=state.detail,
            chart=state.chart,
            chart_range=state.chart_range,
            last_error=state.last_error,
            busy=state.busy,
            last_updated=state.last_updated,
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    # ──────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────

    async def start(self, asset_id: str, time_range: TimeRange) -> None:
        """Begin polling: one immediate cycle, then arm the recurring timer."""
        if not asset_id:
            raise ValueError("asset_id must be a non-empty string")
        if self._state is not None:
            logger.warning("asset_poller_already_running", asset_id=self._state.asset_id)
            return

        self._state = PollState(asset_id=asset_id, time_range=time_range)
        self._generation += 1
        logger.info(
            "asset_poller_started",
            asset_id=asset_id,
            time_range=time_range.label,
            interval=self._cadence.interval_for(time_range),
        )
        self._publish()
        self._try_start_cycle()
        self._arm_timer()

    async def change_range(self, time_range: TimeRange) -> None:
        """Switch range: rebuild the timer and try one immediate cycle.

        The immediate cycle still goes through the governor and may be
        rejected if the previous attempt was too recent or is still in flight.
        """
        state = self._state
        if state is None:
            logger.warning("asset_poller_not_running", action="change_range")
            return

        await self._cancel_timer()
        if self._state is not state:
            # stop() or a restart ran while the old timer was winding down
            logger.debug("asset_poller_range_change_superseded", time_range=time_range.label)
            return
        previous = state.time_range
        state.time_range = time_range
        self._generation += 1
        # Anything still in flight belongs to the superseded generation
        state.busy = False
        logger.info(
            "asset_poller_range_changed",
            asset_id=state.asset_id,
            previous=previous.label,
            time_range=time_range.label,
            interval=self._cadence.interval_for(time_range),
        )
        self._publish()
        self._try_start_cycle()
        self._arm_timer()

    async def stop(self) -> None:
        """Stop polling. In-flight fetches finish but their results are dropped."""
        state = self._state
        if state is not None:
            self._state = None
            self._generation += 1
        await self._cancel_timer()
        if state is None:
            return
        logger.info("asset_poller_stopped", asset_id=state.asset_id, pending_cycles=len(self._cycles))

    async def wait_for_pending(self) -> None:
        """Wait until every in-flight fetch cycle has completed."""
        while self._cycles:
            await asyncio.gather(*list(self._cycles))

    # ──────────────────────────────────────────────
    # Timer
    # ──────────────────────────────────────────────

    def _arm_timer(self) -> None:
        assert self._state is not None
        if self._timer is not None:
            # An overlapping change_range armed one after our cancel returned
            self._timer.cancel()
        interval = self._cadence.interval_for(self._state.time_range)
        self._timer = asyncio.create_task(
            self._timer_loop(interval),
            name=f"asset-poller-timer:{self._state.asset_id}",
        )

    async def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.cancel()
        try:
            await timer
        except asyncio.CancelledError:
            pass

    async def _timer_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self._tick()

    def _tick(self) -> bool:
        """Timer callback. Returns True if a fetch cycle was started."""
        return self._try_start_cycle()

    # ──────────────────────────────────────────────
    # Fetch cycle
    # ──────────────────────────────────────────────

    def _try_start_cycle(self) -> bool:
        state = self._state
        if state is None:
            return False
        if not self._governor.try_acquire(self._clock()):
            logger.debug("fetch_cycle_rejected", asset_id=state.asset_id)
            return False

        generation = self._generation
        state.busy = True
        state.last_error = None
        self._publish()

        task = asyncio.create_task(
            self._run_cycle(generation, state.asset_id, state.time_range),
            name=f"asset-poller-cycle:{state.asset_id}:{generation}",
        )
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)
        logger.debug(
            "fetch_cycle_started",
            asset_id=state.asset_id,
            time_range=state.time_range.label,
            generation=generation,
        )
        return True

    async def _run_cycle(self, generation: int, asset_id: str, time_range: TimeRange) -> None:
        started = time.monotonic()
        try:
            await asyncio.gather(
                self._fetch_detail(generation, asset_id),
                self._fetch_chart(generation, asset_id, time_range),
            )
        finally:
            self._governor.release()

        if not self._is_current(generation):
            logger.debug("fetch_cycle_discarded", asset_id=asset_id, generation=generation)
            return

        assert self._state is not None
        self._state.busy = False
        logger.debug(
            "fetch_cycle_completed",
            asset_id=asset_id,
            generation=generation,
            duration_seconds=round(time.monotonic() - started, 3),
            error=type(self._state.last_error).__name__ if self._state.last_error else None,
        )
        self._publish()

    async def _fetch_detail(self, generation: int, asset_id: str) -> None:
        request = detail_request(asset_id)
        try:
            detail = await self._fetcher.fetch_json(request.path, request.query, AssetDetail)
        except HttpError as e:
            self._record_error(generation, "detail", e)
            return
        except Exception as e:
            logger.warning("detail_fetch_unexpected_error", asset_id=asset_id, exc_info=True)
            self._record_error(generation, "detail", UnexpectedFetchError(str(e)))
            return

        if not self._is_current(generation):
            return
        assert self._state is not None
        self._state.detail = detail
        self._state.last_updated = time.time()
        self._publish()

    async def _fetch_chart(self, generation: int, asset_id: str, time_range: TimeRange) -> None:
        request = chart_request(asset_id, time_range, self._vs_currency)
        try:
            chart = await self._fetcher.fetch_json(request.path, request.query, ChartSeries)
        except HttpError as e:
            self._record_error(generation, "chart", e)
            return
        except Exception as e:
            logger.warning("chart_fetch_unexpected_error", asset_id=asset_id, exc_info=True)
            self._record_error(generation, "chart", UnexpectedFetchError(str(e)))
            return

        if not self._is_current(generation):
            return
        assert self._state is not None
        self._state.chart = chart
        self._state.chart_range = time_range
        self._state.last_updated = time.time()
        self._publish()

    def _record_error(self, generation: int, slice_name: str, error: CoinPollError) -> None:
        """Store the error, leaving the slice's last good data untouched."""
        if not self._is_current(generation):
            return
        assert self._state is not None
        self._state.last_error = error
        logger.warning(
            f"{slice_name}_fetch_failed",
            asset_id=self._state.asset_id,
            error_type=type(error).__name__,
            error=str(error),
        )
        self._publish()

    def _is_current(self, generation: int) -> bool:
        return self._state is not None and generation == self._generation

    def _publish(self) -> None:
        snapshot = self.snapshot
        if snapshot is None:
            return
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.warning("snapshot_subscriber_error", exc_info=True)
