"""Tests for RateGovernor admission control."""

import pytest

from coinpoll.market_data.rate_governor import RateGovernor


@pytest.fixture
def governor() -> RateGovernor:
    return RateGovernor(min_spacing=5.0)


class TestSpacing:
    """Minimum spacing between admitted attempts."""

    def test_first_attempt_admitted(self, governor: RateGovernor) -> None:
        assert governor.try_acquire(100.0) is True
        assert governor.in_flight is True
        assert governor.last_admitted == 100.0

    def test_two_attempts_within_window_admit_once(self, governor: RateGovernor) -> None:
        results = [governor.try_acquire(100.0)]
        governor.release()
        results.append(governor.try_acquire(102.0))
        assert results == [True, False]

    def test_admitted_after_window(self, governor: RateGovernor) -> None:
        assert governor.try_acquire(100.0) is True
        governor.release()
        assert governor.try_acquire(105.0) is True
        assert governor.last_admitted == 105.0

    def test_rejection_does_not_move_last_admitted(self, governor: RateGovernor) -> None:
        governor.try_acquire(100.0)
        governor.release()
        governor.try_acquire(103.0)
        # Spacing is measured from the admitted attempt, not the rejected one
        assert governor.last_admitted == 100.0
        assert governor.try_acquire(105.0) is True

    def test_zero_spacing_only_checks_in_flight(self) -> None:
        governor = RateGovernor(min_spacing=0.0)
        assert governor.try_acquire(1.0) is True
        governor.release()
        assert governor.try_acquire(1.0) is True

    def test_negative_spacing_rejected(self) -> None:
        with pytest.raises(ValueError):
            RateGovernor(min_spacing=-1.0)


class TestInFlight:
    """A cycle in flight blocks new admissions regardless of elapsed time."""

    def test_rejected_while_in_flight(self, governor: RateGovernor) -> None:
        assert governor.try_acquire(100.0) is True
        assert governor.try_acquire(10_000.0) is False
        assert governor.in_flight is True

    def test_release_allows_next_cycle(self, governor: RateGovernor) -> None:
        governor.try_acquire(100.0)
        governor.release()
        assert governor.in_flight is False
        assert governor.try_acquire(200.0) is True

    def test_release_without_acquire_is_harmless(self, governor: RateGovernor) -> None:
        governor.release()
        assert governor.try_acquire(0.0) is True
