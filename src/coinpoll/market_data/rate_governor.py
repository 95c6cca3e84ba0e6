"""Rate governor guarding the shared upstream request budget.

A throttle, not a queue: a rejected attempt is dropped on the floor and
nothing is rescheduled. The next timer tick or range change simply tries
again.
"""

from coinpoll.logging import get_logger

logger = get_logger(__name__)


class RateGovernor:
    """Admits at most one fetch cycle at a time, spaced by ``min_spacing``.

    Timestamps are caller-supplied monotonic seconds so the governor stays
    deterministic under test.

    Args:
        min_spacing: Minimum seconds between two admitted attempts.
    """

    def __init__(self, min_spacing: float = 5.0) -> None:
        if min_spacing < 0:
            raise ValueError(f"min_spacing must be >= 0, got {min_spacing}")
        self._min_spacing = min_spacing
        self._last_admitted: float | None = None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def last_admitted(self) -> float | None:
        return self._last_admitted

    def try_acquire(self, now: float) -> bool:
        """Admit a new cycle if none is in flight and spacing has elapsed.

        On admission, records ``now`` and marks the cycle in flight.
        """
        if self._in_flight:
            logger.debug("rate_governor_rejected", reason="in_flight")
            return False
        if self._last_admitted is not None and now - self._last_admitted < self._min_spacing:
            logger.debug(
                "rate_governor_rejected",
                reason="spacing",
                elapsed=round(now - self._last_admitted, 3),
                min_spacing=self._min_spacing,
            )
            return False
        self._last_admitted = now
        self._in_flight = True
        return True

    def release(self) -> None:
        """Clear the in-flight flag once every sub-fetch has completed."""
        self._in_flight = False
